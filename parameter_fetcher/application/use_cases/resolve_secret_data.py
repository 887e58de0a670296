"""
Use-case: resolve the data of one synchronized secret.
Depends only on Domain ports and entities, no infrastructure imports.
"""

from parameter_fetcher.domain.entities.secret_refs import (
    SecretData,
    SecretDataFrom,
    SecretDataItem,
)
from parameter_fetcher.domain.ports.secret_provider_port import ISecretProvider


class ResolveSecretDataUseCase:
    def __init__(self, provider: ISecretProvider) -> None:
        self._provider = provider

    def execute(
        self,
        data: list[SecretDataItem],
        data_from: list[SecretDataFrom],
    ) -> SecretData:
        """Build the full key → value map for one secret.

        Every *data_from* entry is merged first, in order (later entries win),
        then each *data* item is written under its own secret key.

        Raises:
            ValueError: if a data_from entry sets neither or both of
                        extract / find.
            Any SecretProviderError propagated from the provider. Nothing
            is returned on failure.
        """
        result: SecretData = {}
        for source in data_from:
            if (source.extract is None) == (source.find is None):
                raise ValueError("data_from entries must set exactly one of extract or find")
            if source.extract is not None:
                result.update(self._provider.get_secret_map(source.extract))
            else:
                result.update(self._provider.get_all_secrets(source.find))

        for item in data:
            result[item.secret_key] = self._provider.get_secret(item.remote_ref)
        return result
