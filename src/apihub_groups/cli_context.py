"""
CLI Context for managing application dependencies.

Holds the settings of one CLI invocation and the HTTP client built from them,
so commands get their dependencies injected instead of reaching for globals.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .client import ApihubClient
from .settings import Settings, create_settings_from_env


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    The client is created on first access and closed by ``close()``
    (or by leaving the ``with`` block).
    """
    settings: Settings
    _client: Optional[ApihubClient] = None

    @classmethod
    def from_options(cls, apihub_url: Optional[str] = None,
                     token: Optional[str] = None) -> CLIContext:
        """
        Create context from CLI options, falling back to environment variables.

        Returns:
            CLIContext with validated settings
        """
        settings = create_settings_from_env(base_url=apihub_url, token=token)
        return cls(settings=settings)

    @property
    def client(self) -> ApihubClient:
        if self._client is None:
            self._client = ApihubClient(self.settings)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> CLIContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
