"""
Port (interface) for secret providers.
Infrastructure adapters (e.g. ParameterStoreProvider) must implement this
interface so the sync controller stays independent of any remote backend.
"""

from abc import ABC, abstractmethod

from parameter_fetcher.domain.entities.secret_refs import FindRequest, RemoteRef, SecretData


class ISecretProvider(ABC):
    @abstractmethod
    def get_all_secrets(self, ref: FindRequest) -> SecretData:
        """Return every remote entry selected by *ref*, keyed by local secret key.

        Raises:
            SelectorMissingError: if *ref* has neither a name nor tags.
            KeyCollisionError:    if two remote names map to the same local key.
        """
        ...

    @abstractmethod
    def get_secret(self, ref: RemoteRef) -> bytes:
        """Return the value of a single key, narrowed to *ref.property* if set."""
        ...

    @abstractmethod
    def get_secret_map(self, ref: RemoteRef) -> SecretData:
        """Decompose a flat JSON object value into local key → value pairs."""
        ...

    @abstractmethod
    def validate(self) -> None:
        """Check that the provider's credentials resolve. Raises on failure."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release any resources held by the provider."""
        ...
