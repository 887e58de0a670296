"""
Infrastructure adapter: AWS Systems Manager Parameter Store → ISecretProvider.

All boto3 details (DescribeParameters paging, GetParameter with decryption,
ClientError handling) are confined here; the rest of the codebase depends
only on ISecretProvider.

Calls are synchronous and sequential: each page is processed completely,
one GetParameter at a time, before the next page is requested. A result
set lives only for the duration of one call.
"""

import json
from collections.abc import Iterator
from typing import Any, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from parameter_fetcher.domain.entities.secret_refs import (
    FindRequest,
    RemoteEntry,
    RemoteRef,
    SecretData,
)
from parameter_fetcher.domain.errors import (
    CredentialsUnavailableError,
    KeyCollisionError,
    MalformedValueError,
    MissingValueError,
    PropertyNotFoundError,
    RemoteFetchError,
    RemoteListError,
    SelectorMissingError,
)
from parameter_fetcher.domain.key_mapping import map_secret_key
from parameter_fetcher.domain.ports.secret_provider_port import ISecretProvider
from parameter_fetcher.infrastructure.aws.errors import sanitize_error
from parameter_fetcher.infrastructure.parameterstore.name_matcher import NameMatcher
from parameter_fetcher.infrastructure.parameterstore.structured_path import get_path

_AWS_ERRORS = (ClientError, BotoCoreError)


class ParameterStoreProvider(ISecretProvider):
    """Reads (and decrypts) parameters from AWS SSM Parameter Store."""

    def __init__(
        self,
        client: Any,
        session: Optional[boto3.Session] = None,
        logger: Any = None,
    ) -> None:
        """
        Args:
            client:  boto3 ``ssm`` client (or any object exposing
                     describe_parameters / get_parameter).
            session: boto3 Session whose credentials validate() resolves.
            logger:  structlog logger; per-call context is bound onto it.
        """
        self._client = client
        self._session = session
        self._log = logger if logger is not None else structlog.get_logger(__name__)

    @classmethod
    def from_session(
        cls,
        session: boto3.Session,
        endpoint_url: Optional[str] = None,
        logger: Any = None,
    ) -> "ParameterStoreProvider":
        client = session.client("ssm", endpoint_url=endpoint_url)
        return cls(client, session=session, logger=logger)

    # ------------------------------------------------------------------
    # ISecretProvider interface
    # ------------------------------------------------------------------

    def get_all_secrets(self, ref: FindRequest) -> SecretData:
        if not ref.has_selector:
            raise SelectorMissingError()
        if ref.name is not None:
            return self._find_by_name(ref.name)
        return self._find_by_tags(ref.tags)

    def get_secret(self, ref: RemoteRef) -> bytes:
        log = self._log.bind(operation="get_secret", key=ref.key)
        log.info("fetching secret value")
        value = self._get_parameter_value(ref.key)
        if not ref.property:
            return value.encode("utf-8")

        resolved, exists = get_path(value, ref.property)
        if not exists:
            raise PropertyNotFoundError(ref.property, ref.key)
        return resolved.encode("utf-8")

    def get_secret_map(self, ref: RemoteRef) -> SecretData:
        log = self._log.bind(operation="get_secret_map", key=ref.key)
        log.info("fetching secret map")
        raw = self.get_secret(ref)
        try:
            decoded = json.loads(raw)
        except ValueError as exc:
            raise MalformedValueError(ref.key, str(exc)) from exc

        if not isinstance(decoded, dict):
            raise MalformedValueError(
                ref.key, f"expected a JSON object, got {type(decoded).__name__}"
            )
        data: SecretData = {}
        for key, value in decoded.items():
            if not isinstance(value, str):
                raise MalformedValueError(
                    ref.key, f"value of {key!r} is {type(value).__name__}, expected string"
                )
            data[key] = value.encode("utf-8")
        return data

    def validate(self) -> None:
        """Resolve the session credentials. SSM itself is not called."""
        session = self._session if self._session is not None else boto3.Session()
        try:
            credentials = session.get_credentials()
            if credentials is None:
                raise CredentialsUnavailableError("no AWS credentials found")
            credentials.get_frozen_credentials()
        except BotoCoreError as exc:
            raise CredentialsUnavailableError(sanitize_error(exc)) from None

    def close(self) -> None:
        return None

    # ------------------------------------------------------------------
    # List-and-filter
    # ------------------------------------------------------------------

    def _find_by_name(self, pattern: str) -> SecretData:
        matcher = NameMatcher(pattern)
        log = self._log.bind(operation="find_by_name", pattern=pattern)
        data: SecretData = {}
        for entry in self._describe_parameters(log):
            if matcher.matches(entry.name):
                self._fetch_and_set(data, entry.name)
        log.info("find by name complete", secrets=len(data))
        return data

    def _find_by_tags(self, tags: dict[str, str]) -> SecretData:
        filters = [
            {"Key": f"tag:{key}", "Option": "Equals", "Values": [value]}
            for key, value in tags.items()
        ]
        log = self._log.bind(operation="find_by_tags", tags=sorted(tags))
        data: SecretData = {}
        # The service applies the tag filters; no local re-check.
        for entry in self._describe_parameters(log, filters):
            self._fetch_and_set(data, entry.name)
        log.info("find by tags complete", secrets=len(data))
        return data

    def _describe_parameters(
        self,
        log: Any,
        filters: Optional[list[dict]] = None,
    ) -> Iterator[RemoteEntry]:
        """Yield every described parameter, one page at a time, until NextToken runs out."""
        next_token: Optional[str] = None
        while True:
            kwargs: dict[str, Any] = {}
            if filters:
                kwargs["ParameterFilters"] = filters
            if next_token:
                kwargs["NextToken"] = next_token
            try:
                page = self._client.describe_parameters(**kwargs)
            except _AWS_ERRORS as exc:
                raise RemoteListError(sanitize_error(exc)) from None

            parameters = page.get("Parameters", [])
            log.debug("described parameters page", parameters=len(parameters))
            for param in parameters:
                yield RemoteEntry(
                    name=param["Name"],
                    tags={tag["Key"]: tag["Value"] for tag in param.get("Tags", [])},
                )

            next_token = page.get("NextToken")
            if not next_token:
                return

    # ------------------------------------------------------------------
    # Fetch-and-map
    # ------------------------------------------------------------------

    def _fetch_and_set(self, data: SecretData, name: str) -> None:
        value = self._get_parameter_value(name)
        key = map_secret_key(name)
        if key in data:
            raise KeyCollisionError(key)
        data[key] = value.encode("utf-8")

    def _get_parameter_value(self, name: str) -> str:
        try:
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except _AWS_ERRORS as exc:
            raise RemoteFetchError(sanitize_error(exc)) from None

        value = response.get("Parameter", {}).get("Value")
        if value is None:
            raise MissingValueError(name)
        return value
