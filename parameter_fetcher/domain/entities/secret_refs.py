"""
Domain entities for parameter lookups.
Zero external dependencies, pure Python dataclasses only.

SecretData is the result set of one call: local secret key → raw value.
It is built fresh for every call and never shared between calls.
"""

from dataclasses import dataclass, field
from typing import Optional

SecretData = dict[str, bytes]


@dataclass(frozen=True)
class RemoteEntry:
    """One named value in the remote parameter store."""

    name: str
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FindRequest:
    """Bulk selector: a name regex or a set of tags that must all be equal.

    When both are set the name wins.
    """

    name: Optional[str] = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def has_selector(self) -> bool:
        return self.name is not None or bool(self.tags)


@dataclass(frozen=True)
class RemoteRef:
    """Single-key lookup, optionally narrowed to a structured-path property."""

    key: str
    property: str = ""


@dataclass(frozen=True)
class SecretDataItem:
    """Expose the value of *remote_ref* under *secret_key*."""

    secret_key: str
    remote_ref: RemoteRef


@dataclass(frozen=True)
class SecretDataFrom:
    """Merge a whole set of keys: either one JSON object or a bulk find."""

    extract: Optional[RemoteRef] = None
    find: Optional[FindRequest] = None
