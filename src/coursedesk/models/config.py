"""Configuration models for CourseDesk.

ClientConfig holds everything needed to talk to the backend and tune
the workspace. Values come from constructor arguments or environment
variables (see ``ClientConfig.from_env``).
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel

from coursedesk.exceptions import ConfigError

ENV_API_URL = "COURSEDESK_API_URL"
ENV_TOKEN = "COURSEDESK_TOKEN"
ENV_TIMEOUT = "COURSEDESK_TIMEOUT"


class ClientConfig(BaseModel):
    """Backend connection and workspace settings."""

    base_url: str
    token: str
    timeout: Optional[float] = None  # None = httpx default
    sync_retries: int = 3  # attempts for idempotent reads only
    retry_wait: float = 0.5  # exponential backoff multiplier, seconds
    mail_dismiss_delay: float = 2.0

    @classmethod
    def from_env(
        cls,
        *,
        base_url: str | None = None,
        token: str | None = None,
        **overrides: object,
    ) -> ClientConfig:
        """Build a config, falling back to environment variables.

        Args:
            base_url: API base URL. Falls back to COURSEDESK_API_URL.
            token: Bearer token. Falls back to COURSEDESK_TOKEN.
            **overrides: Any other ClientConfig field.

        Raises:
            ConfigError: If no base URL or token is available.
        """
        base_url = base_url or os.environ.get(ENV_API_URL, "")
        token = token or os.environ.get(ENV_TOKEN, "")
        if not base_url:
            raise ConfigError(
                f"No API URL provided. Pass base_url= or set {ENV_API_URL}."
            )
        if not token:
            raise ConfigError(
                f"No token provided. Pass token= or set {ENV_TOKEN}."
            )
        if "timeout" not in overrides and os.environ.get(ENV_TIMEOUT):
            try:
                overrides["timeout"] = float(os.environ[ENV_TIMEOUT])
            except ValueError as exc:
                raise ConfigError(
                    f"{ENV_TIMEOUT} must be a number, got {os.environ[ENV_TIMEOUT]!r}"
                ) from exc
        return cls(base_url=base_url.rstrip("/"), token=token, **overrides)
