"""
Mapping of hierarchical parameter names to local secret keys.

Local secret keys may only contain alphanumerics, ``-``, ``_`` and ``.``.
Parameter names use the same character set plus ``/`` as the hierarchy
separator, so the mapping only has to deal with slashes:

    /dev/myapp/password  →  dev_myapp_password

The mapping is not injective: ``/dev/my_db`` and ``/dev/my/db`` both map to
``dev_my_db``. Callers building a result set must check for collisions.
"""

PATH_SEPARATOR = "/"


def map_secret_key(name: str) -> str:
    return name.lstrip(PATH_SEPARATOR).replace(PATH_SEPARATOR, "_")
