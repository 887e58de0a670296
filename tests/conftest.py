"""Shared fixtures: a MagicMock stands in for the boto3 ssm client."""

from typing import Optional
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from parameter_fetcher.infrastructure.parameterstore.parameter_store_adapter import (
    ParameterStoreProvider,
)


def client_error(code: str, message: str, operation: str = "GetParameter") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def describe_page(names: list[str], next_token: Optional[str] = None) -> dict:
    page: dict = {"Parameters": [{"Name": name} for name in names]}
    if next_token is not None:
        page["NextToken"] = next_token
    return page


@pytest.fixture
def parameters() -> dict:
    """Remote store contents: parameter name → value. Tests fill it in."""
    return {}


@pytest.fixture
def ssm_client(parameters: dict) -> MagicMock:
    client = MagicMock()

    def get_parameter(Name: str, WithDecryption: bool = False) -> dict:
        if Name not in parameters:
            raise client_error("ParameterNotFound", f"Parameter {Name} not found.")
        return {"Parameter": {"Name": Name, "Type": "SecureString", "Value": parameters[Name]}}

    client.get_parameter.side_effect = get_parameter
    return client


@pytest.fixture
def provider(ssm_client: MagicMock) -> ParameterStoreProvider:
    return ParameterStoreProvider(ssm_client)
