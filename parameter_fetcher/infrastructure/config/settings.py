"""
Runtime settings read from the environment.

Composition roots call load_dotenv() first, so a local .env file can supply
any of these during development.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_FORMATS = ("console", "json")


@dataclass(frozen=True)
class Settings:
    region: str = "us-east-1"
    profile: Optional[str] = None
    endpoint_url: Optional[str] = None
    log_level: str = "INFO"
    log_format: str = "console"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        log_format = env.get("LOG_FORMAT", "console").lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(
                f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {log_format!r}"
            )
        return cls(
            region=env.get("AWS_DEFAULT_REGION", "us-east-1"),
            profile=env.get("AWS_PROFILE") or None,
            endpoint_url=env.get("SSM_ENDPOINT_URL") or None,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
        )
