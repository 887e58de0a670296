"""
CLI entry point: inspect what a secret would be synchronized as.

This module is the Composition Root for command-line runs: it loads .env,
reads Settings, configures logging and wires the ParameterStoreProvider.

    parameter-fetcher find --name '^/dev/myapp/'
    parameter-fetcher find --tag team=payments --tag env=dev
    parameter-fetcher get /dev/myapp/config --property db.password
    parameter-fetcher get-map /dev/myapp/config
    parameter-fetcher resolve manifest.json
    parameter-fetcher validate

Values are written to stdout as JSON; logs go to stderr.
"""

import argparse
import json
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from parameter_fetcher.application.use_cases.resolve_secret_data import ResolveSecretDataUseCase
from parameter_fetcher.domain.entities.secret_refs import (
    FindRequest,
    RemoteRef,
    SecretData,
    SecretDataFrom,
    SecretDataItem,
)
from parameter_fetcher.domain.errors import SecretProviderError
from parameter_fetcher.domain.ports.secret_provider_port import ISecretProvider
from parameter_fetcher.infrastructure.aws.session_factory import build_parameter_store
from parameter_fetcher.infrastructure.config.settings import Settings
from parameter_fetcher.infrastructure.observability.logging import configure_logging, get_logger


def _parse_tag(value: str) -> tuple[str, str]:
    key, sep, tag_value = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"tag must look like KEY=VALUE, got {value!r}")
    return key, tag_value


def _decode(data: SecretData) -> dict[str, str]:
    return {key: value.decode("utf-8", errors="replace") for key, value in data.items()}


def _remote_ref(raw: dict) -> RemoteRef:
    return RemoteRef(key=raw["key"], property=raw.get("property", ""))


def load_manifest(raw: dict) -> tuple[list[SecretDataItem], list[SecretDataFrom]]:
    """Parse a ``{"data": [...], "dataFrom": [...]}`` manifest.

    Raises:
        ValueError: if a required field is missing.
    """
    try:
        return _load_manifest(raw)
    except KeyError as exc:
        raise ValueError(f"manifest is missing field {exc}") from exc


def _load_manifest(raw: dict) -> tuple[list[SecretDataItem], list[SecretDataFrom]]:
    data = [
        SecretDataItem(secret_key=item["secretKey"], remote_ref=_remote_ref(item["remoteRef"]))
        for item in raw.get("data", [])
    ]
    data_from = []
    for entry in raw.get("dataFrom", []):
        extract = _remote_ref(entry["extract"]) if "extract" in entry else None
        find = None
        if "find" in entry:
            find = FindRequest(
                name=entry["find"].get("name"),
                tags=dict(entry["find"].get("tags", {})),
            )
        data_from.append(SecretDataFrom(extract=extract, find=find))
    return data, data_from


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parameter-fetcher",
        description="Fetch secret values from AWS SSM Parameter Store.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    find = sub.add_parser("find", help="Fetch every parameter matching a name regex or tags")
    find.add_argument("--name", help="Regular expression matched against parameter names")
    find.add_argument(
        "--tag",
        action="append",
        type=_parse_tag,
        default=[],
        metavar="KEY=VALUE",
        help="Required tag (repeatable); ignored when --name is given",
    )

    get = sub.add_parser("get", help="Fetch a single parameter")
    get.add_argument("key")
    get.add_argument("--property", default="", help="Dotted path into a JSON value")

    get_map = sub.add_parser("get-map", help="Fetch a JSON object parameter as key/value pairs")
    get_map.add_argument("key")
    get_map.add_argument("--property", default="", help="Dotted path to the object")

    resolve = sub.add_parser("resolve", help="Resolve a data/dataFrom manifest file")
    resolve.add_argument("manifest", type=argparse.FileType("r"))

    sub.add_parser("validate", help="Check that AWS credentials resolve")
    return parser


def run(args: argparse.Namespace, provider: ISecretProvider) -> Any:
    if args.command == "find":
        request = FindRequest(name=args.name, tags=dict(args.tag))
        return _decode(provider.get_all_secrets(request))
    if args.command == "get":
        value = provider.get_secret(RemoteRef(key=args.key, property=args.property))
        return value.decode("utf-8", errors="replace")
    if args.command == "get-map":
        return _decode(provider.get_secret_map(RemoteRef(key=args.key, property=args.property)))
    if args.command == "resolve":
        with args.manifest as fh:
            data, data_from = load_manifest(json.load(fh))
        return _decode(ResolveSecretDataUseCase(provider).execute(data, data_from))
    provider.validate()
    return {"status": "ok"}


def main(argv: Optional[list[str]] = None, provider: Optional[ISecretProvider] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level, settings.log_format)
        if provider is None:
            provider = build_parameter_store(settings, logger=get_logger("parameter_fetcher"))
    except (SecretProviderError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        output = run(args, provider)
    except (SecretProviderError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        provider.close()

    print(json.dumps(output, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
