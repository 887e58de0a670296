"""
Composition helpers: Settings → boto3 Session → ParameterStoreProvider.
"""

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError

from parameter_fetcher.domain.errors import CredentialsUnavailableError
from parameter_fetcher.infrastructure.aws.errors import sanitize_error
from parameter_fetcher.infrastructure.config.settings import Settings
from parameter_fetcher.infrastructure.parameterstore.parameter_store_adapter import (
    ParameterStoreProvider,
)


def build_session(settings: Settings) -> boto3.Session:
    return boto3.Session(profile_name=settings.profile, region_name=settings.region)


def build_parameter_store(settings: Settings, logger: Any = None) -> ParameterStoreProvider:
    """Wire a ParameterStoreProvider for *settings*.

    Raises:
        CredentialsUnavailableError: if the session or client cannot be
            created, e.g. AWS_PROFILE names a profile that does not exist.
    """
    try:
        return ParameterStoreProvider.from_session(
            build_session(settings),
            endpoint_url=settings.endpoint_url,
            logger=logger,
        )
    except BotoCoreError as exc:
        raise CredentialsUnavailableError(sanitize_error(exc)) from None
