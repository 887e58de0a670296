"""
Error taxonomy for secret providers.

Every failure aborts the whole in-flight operation, so each error carries
enough context (key, property) to be reported on its own. Messages coming
from the remote service are sanitized before they reach these classes.
"""


class SecretProviderError(Exception):
    """Base class for every error raised by a secret provider."""


class SelectorMissingError(SecretProviderError):
    def __init__(self) -> None:
        super().__init__("unexpected find operator: no name pattern or tags provided")


class InvalidNamePatternError(SecretProviderError):
    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"invalid name pattern {pattern!r}: {reason}")


class RemoteListError(SecretProviderError):
    """A describe/list page request failed. No partial result is returned."""


class RemoteFetchError(SecretProviderError):
    """A point lookup failed."""


class KeyCollisionError(SecretProviderError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"duplicate key mapping at {key}")


class MissingValueError(SecretProviderError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"invalid secret received. parameter value is nil for key: {key}")


class PropertyNotFoundError(SecretProviderError):
    def __init__(self, property: str, key: str) -> None:
        self.property = property
        self.key = key
        super().__init__(f"key {property} does not exist in secret {key}")


class MalformedValueError(SecretProviderError):
    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"unable to unmarshal secret {key}: {reason}")


class CredentialsUnavailableError(SecretProviderError):
    """The provider's credentials could not be resolved."""
