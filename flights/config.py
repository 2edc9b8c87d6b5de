"""Configuration settings for the flights service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("flights.config")

ADSB_COOKIE_PARAMETER = "/flights/adsb/cookie"


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _aws_region() -> str:
    return os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1"


@lru_cache(maxsize=1)
def get_adsb_cookie() -> str:
    """Return the ADS-B Exchange session cookie.

    ``ADSB_COOKIE`` takes precedence; otherwise the value is read from AWS SSM
    Parameter Store and cached in-memory. Any failure results in a runtime
    error so callers fail fast instead of issuing anonymous requests.
    """

    value = os.getenv("ADSB_COOKIE")
    if value:
        return value

    try:
        ssm_client = boto3.client("ssm", region_name=_aws_region())
        response = ssm_client.get_parameter(
            Name=ADSB_COOKIE_PARAMETER, WithDecryption=True
        )
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load ADS-B cookie from SSM: %s", exc)
        raise RuntimeError("Unable to load ADS-B cookie from SSM") from exc

    if not value:
        logger.error("Received empty ADS-B cookie from SSM")
        raise RuntimeError("ADS-B cookie not configured")

    return value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    flights_env: str = os.getenv("FLIGHTS_ENV", "local")
    log_level: str = os.getenv("FLIGHTS_LOG_LEVEL", "INFO")

    # Storage
    storage_backend: str = os.getenv("FLIGHTS_STORAGE_BACKEND", "disk")
    storage_root: str = os.getenv("FLIGHTS_STORAGE_ROOT", ".")
    s3_bucket: str = os.getenv("FLIGHTS_S3_BUCKET", "privatejets")
    s3_endpoint_url: str | None = os.getenv("FLIGHTS_S3_ENDPOINT_URL")
    aws_region: str = _aws_region()

    # ADS-B Exchange trace source
    adsb_base_url: str = os.getenv("ADSB_BASE_URL", "https://globe.adsbexchange.com")
    adsb_timeout: float = float(os.getenv("ADSB_TIMEOUT", "30.0"))

    # Fan-out limits; the remote source rate limits, so months run one at a time.
    month_concurrency: int = int(os.getenv("FLIGHTS_MONTH_CONCURRENCY", "1"))
    day_concurrency: int = int(os.getenv("FLIGHTS_DAY_CONCURRENCY", "1"))
    enumerate_concurrency: int = int(os.getenv("FLIGHTS_ENUMERATE_CONCURRENCY", "10"))

    refresh_current_month: bool = _get_bool("FLIGHTS_REFRESH_CURRENT_MONTH")
    allow_unterminated_legs: bool = _get_bool("FLIGHTS_ALLOW_UNTERMINATED_LEGS")


settings = Settings()

__all__ = ["settings", "Settings", "get_adsb_cookie"]
