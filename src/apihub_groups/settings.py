"""
Settings and configuration for APIHUB group tooling.

Centralizes configuration values and provides validation with fail-fast behavior.
Values come from environment variables, with explicit overrides (CLI flags)
taking precedence.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

import httpx

__all__ = ["Settings", "create_settings_from_env"]

# Header carrying the personal access token on every request
TOKEN_HEADER = "X-Personal-Access-Token"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for the APIHUB client and pipeline.

    Connection:
        base_url: APIHUB instance URL, e.g. https://apihub.example.com (required)
        token: Personal access token (required)
        api_type: API type segment used in package paths
        http_timeout_s: Per-request transport timeout in seconds

    Pipeline:
        page_size: Operations requested per page when listing
        export_poll_interval_s: Constant delay between export status polls
        export_poll_attempts: Maximum number of export status polls
    """
    base_url: str
    token: str
    api_type: str = "rest"
    http_timeout_s: float = 30.0
    page_size: int = 100
    export_poll_interval_s: float = 5.0
    export_poll_attempts: int = 30

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.base_url:
            raise ValueError("base_url is required")

        # Any http(s) URL with a host; underscores and IPv6 literals included
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid base_url format: {self.base_url}") from e
        if (url.scheme not in ("http", "https") or not url.host
                or any(ch.isspace() for ch in self.base_url)):
            raise ValueError(f"Invalid base_url format: {self.base_url}")

        if not self.token:
            raise ValueError("token is required")

        if not re.match(r"^[a-z][a-z0-9-]*$", self.api_type or ""):
            raise ValueError(f"Invalid api_type: {self.api_type}")

        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

        # Zero is allowed so tests and local fakes can poll without sleeping
        if self.export_poll_interval_s < 0:
            raise ValueError(
                f"export_poll_interval_s must be non-negative, got {self.export_poll_interval_s}"
            )

        if self.export_poll_attempts <= 0:
            raise ValueError(
                f"export_poll_attempts must be positive, got {self.export_poll_attempts}"
            )

    @property
    def api_root(self) -> str:
        """Base URL without a trailing slash."""
        return self.base_url.rstrip("/")


def create_settings_from_env(**overrides: Optional[object]) -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - APIHUB_URL (required unless overridden)
        - APIHUB_TOKEN (required unless overridden)
        - APIHUB_API_TYPE (default: rest)
        - APIHUB_HTTP_TIMEOUT (default: 30.0)
        - APIHUB_EXPORT_POLL_INTERVAL (default: 5.0)
        - APIHUB_EXPORT_POLL_ATTEMPTS (default: 30)

    Args:
        **overrides: Settings field values that win over the environment.
            ``None`` values are ignored so unset CLI flags fall through.

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid or required values missing
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    values = {
        "base_url": os.getenv("APIHUB_URL"),
        "token": os.getenv("APIHUB_TOKEN"),
        "api_type": os.getenv("APIHUB_API_TYPE") or "rest",
        "http_timeout_s": get_float("APIHUB_HTTP_TIMEOUT", 30.0),
        "export_poll_interval_s": get_float("APIHUB_EXPORT_POLL_INTERVAL", 5.0),
        "export_poll_attempts": get_int("APIHUB_EXPORT_POLL_ATTEMPTS", 30),
    }

    unknown = set(overrides) - set(values)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values["base_url"]:
        raise ValueError("APIHUB_URL environment variable or --apihub-url is required")
    if not values["token"]:
        raise ValueError("APIHUB_TOKEN environment variable or --token is required")

    return Settings(**values)
