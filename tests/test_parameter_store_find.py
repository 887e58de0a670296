"""
Tests for ParameterStoreProvider.get_all_secrets(): paging, filtering and
collision handling over a mocked DescribeParameters / GetParameter client.
"""

from unittest.mock import MagicMock, call

import pytest
from structlog.testing import capture_logs

from conftest import client_error, describe_page
from parameter_fetcher.domain.entities.secret_refs import FindRequest
from parameter_fetcher.domain.errors import (
    InvalidNamePatternError,
    KeyCollisionError,
    MissingValueError,
    RemoteFetchError,
    RemoteListError,
    SelectorMissingError,
)
from parameter_fetcher.infrastructure.parameterstore.parameter_store_adapter import (
    ParameterStoreProvider,
)


class TestFindByName:
    def test_single_page(self, provider, ssm_client: MagicMock, parameters: dict) -> None:
        parameters.update({"/dev/myapp/password": "s3cret", "/dev/other/token": "t0ken"})
        ssm_client.describe_parameters.return_value = describe_page(list(parameters))

        result = provider.get_all_secrets(FindRequest(name="myapp"))

        assert result == {"dev_myapp_password": b"s3cret"}
        ssm_client.describe_parameters.assert_called_once_with()
        ssm_client.get_parameter.assert_called_once_with(
            Name="/dev/myapp/password", WithDecryption=True
        )

    def test_pagination_follows_tokens_until_absent(
        self, provider, ssm_client: MagicMock, parameters: dict
    ) -> None:
        parameters.update({f"/app/p{i}": f"v{i}" for i in range(5)})
        ssm_client.describe_parameters.side_effect = [
            describe_page(["/app/p0", "/app/p1"], next_token="t1"),
            describe_page(["/app/p2"], next_token="t2"),
            describe_page(["/app/p3", "/app/p4"]),
        ]

        result = provider.get_all_secrets(FindRequest(name="^/app/"))

        assert result == {f"app_p{i}": f"v{i}".encode() for i in range(5)}
        assert ssm_client.describe_parameters.call_args_list == [
            call(),
            call(NextToken="t1"),
            call(NextToken="t2"),
        ]
        fetched = [c.kwargs["Name"] for c in ssm_client.get_parameter.call_args_list]
        assert fetched == [f"/app/p{i}" for i in range(5)]

    def test_empty_pages(self, provider, ssm_client: MagicMock) -> None:
        ssm_client.describe_parameters.side_effect = [
            describe_page([], next_token="t1"),
            {"Parameters": [], "NextToken": ""},
        ]

        assert provider.get_all_secrets(FindRequest(name=".*")) == {}
        assert ssm_client.describe_parameters.call_count == 2
        ssm_client.get_parameter.assert_not_called()

    def test_name_takes_precedence_over_tags(
        self, provider, ssm_client: MagicMock, parameters: dict
    ) -> None:
        parameters.update({"/dev/a": "1", "/dev/b": "2"})
        ssm_client.describe_parameters.return_value = describe_page(["/dev/a", "/dev/b"])

        result = provider.get_all_secrets(FindRequest(name="a$", tags={"env": "dev"}))

        assert result == {"dev_a": b"1"}
        ssm_client.describe_parameters.assert_called_once_with()

    def test_collision_fails_whole_call(
        self, provider, ssm_client: MagicMock, parameters: dict
    ) -> None:
        parameters.update({"/dev/my_db": "one", "/dev/my/db": "two", "/dev/z": "z"})
        ssm_client.describe_parameters.return_value = describe_page(
            ["/dev/my_db", "/dev/my/db", "/dev/z"]
        )

        with pytest.raises(KeyCollisionError, match="duplicate key mapping at dev_my_db") as exc:
            provider.get_all_secrets(FindRequest(name="^/dev/"))
        assert exc.value.key == "dev_my_db"

    def test_collision_across_pages(
        self, provider, ssm_client: MagicMock, parameters: dict
    ) -> None:
        parameters.update({"/dev/my_db": "one", "dev/my/db": "two"})
        ssm_client.describe_parameters.side_effect = [
            describe_page(["/dev/my_db"], next_token="t1"),
            describe_page(["dev/my/db"]),
        ]

        with pytest.raises(KeyCollisionError):
            provider.get_all_secrets(FindRequest(name="db"))

    def test_list_failure_aborts(self, provider, ssm_client: MagicMock, parameters: dict) -> None:
        parameters["/dev/a"] = "1"
        ssm_client.describe_parameters.side_effect = [
            describe_page(["/dev/a"], next_token="t1"),
            client_error("ThrottlingException", "Rate exceeded", "DescribeParameters"),
        ]

        with pytest.raises(RemoteListError, match="ThrottlingException: Rate exceeded") as exc:
            provider.get_all_secrets(FindRequest(name="dev"))
        assert exc.value.__cause__ is None
        assert exc.value.__suppress_context__

    def test_fetch_failure_is_sanitized(self, provider, ssm_client: MagicMock) -> None:
        ssm_client.describe_parameters.return_value = describe_page(["/dev/gone"])

        with pytest.raises(RemoteFetchError) as exc:
            provider.get_all_secrets(FindRequest(name="dev"))
        assert str(exc.value) == "ParameterNotFound: Parameter /dev/gone not found."

    def test_missing_value_in_bulk(self, provider, ssm_client: MagicMock) -> None:
        ssm_client.describe_parameters.return_value = describe_page(["/dev/a"])
        ssm_client.get_parameter.side_effect = None
        ssm_client.get_parameter.return_value = {"Parameter": {"Name": "/dev/a"}}

        with pytest.raises(MissingValueError, match="/dev/a"):
            provider.get_all_secrets(FindRequest(name="dev"))

    def test_malformed_pattern_makes_no_remote_call(self, provider, ssm_client: MagicMock) -> None:
        with pytest.raises(InvalidNamePatternError):
            provider.get_all_secrets(FindRequest(name="[unclosed"))
        ssm_client.describe_parameters.assert_not_called()


class TestFindByTags:
    def test_tags_become_server_side_filters(
        self, provider, ssm_client: MagicMock, parameters: dict
    ) -> None:
        parameters.update({"/dev/a": "1", "/prod/b": "2"})
        ssm_client.describe_parameters.side_effect = [
            describe_page(["/dev/a"], next_token="t1"),
            describe_page(["/prod/b"]),
        ]

        result = provider.get_all_secrets(FindRequest(tags={"team": "payments", "tier": "1"}))

        # No local re-check: whatever the service returns is fetched.
        assert result == {"dev_a": b"1", "prod_b": b"2"}
        filters = [
            {"Key": "tag:team", "Option": "Equals", "Values": ["payments"]},
            {"Key": "tag:tier", "Option": "Equals", "Values": ["1"]},
        ]
        assert ssm_client.describe_parameters.call_args_list == [
            call(ParameterFilters=filters),
            call(ParameterFilters=filters, NextToken="t1"),
        ]

    def test_collision(self, provider, ssm_client: MagicMock, parameters: dict) -> None:
        parameters.update({"/dev/my_db": "one", "/dev/my/db": "two"})
        ssm_client.describe_parameters.return_value = describe_page(["/dev/my_db", "/dev/my/db"])

        with pytest.raises(KeyCollisionError, match="dev_my_db"):
            provider.get_all_secrets(FindRequest(tags={"env": "dev"}))


def test_no_selector_makes_no_remote_call(provider, ssm_client: MagicMock) -> None:
    with pytest.raises(SelectorMissingError):
        provider.get_all_secrets(FindRequest())
    ssm_client.describe_parameters.assert_not_called()
    ssm_client.get_parameter.assert_not_called()


def test_logs_are_bound_per_call_and_never_contain_values(
    ssm_client: MagicMock, parameters: dict
) -> None:
    parameters["/dev/a"] = "very-secret-value"
    ssm_client.describe_parameters.return_value = describe_page(["/dev/a"])

    with capture_logs() as logs:
        ParameterStoreProvider(ssm_client).get_all_secrets(FindRequest(name="dev"))

    done = [entry for entry in logs if entry["event"] == "find by name complete"]
    assert done == [
        {
            "event": "find by name complete",
            "log_level": "info",
            "operation": "find_by_name",
            "pattern": "dev",
            "secrets": 1,
        }
    ]
    assert all("very-secret-value" not in str(entry) for entry in logs)
