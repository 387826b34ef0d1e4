"""
Module: client.config

Purpose:
    Connection settings for the processing collaborator, plus the upload
    limits checked locally before any request is made.

Key Classes:
    - ClientConfig: Immutable client configuration

Key Functions:
    - ClientConfig.from_env(): Build from environment variables

Used By:
    - client.http: HttpProcessingClient
    - workflow.uploads: Upload size/format guard
    - gui.main_window: Built from settings at startup
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_TIMEOUT_SECONDS = 60.0
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ACCEPTED_FORMATS: FrozenSet[str] = frozenset({"JPEG", "PNG"})

ENV_API_URL = "PHOTOSHEET_API_URL"
ENV_TIMEOUT = "PHOTOSHEET_TIMEOUT"


@dataclass(frozen=True)
class ClientConfig:
    """
    Processing collaborator configuration (immutable).

    Attributes:
        base_url: Collaborator root URL, without trailing slash
        timeout_seconds: Per-request timeout
        max_upload_bytes: Largest accepted upload
        accepted_formats: Pillow format names accepted for upload

    Example:
        >>> config = ClientConfig(base_url="http://10.0.0.5:8000/")
        >>> config.endpoint("/upload")
        'http://10.0.0.5:8000/upload'
    """

    base_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    accepted_formats: FrozenSet[str] = field(default=ACCEPTED_FORMATS)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        url = (self.base_url or "").strip()
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL: {self.base_url!r}")
        # Frozen: normalise through object.__setattr__
        object.__setattr__(self, "base_url", url.rstrip("/"))
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive: {self.timeout_seconds}")
        if self.max_upload_bytes <= 0:
            raise ValueError(f"max_upload_bytes must be positive: {self.max_upload_bytes}")
        if not self.accepted_formats:
            raise ValueError("accepted_formats cannot be empty")
        object.__setattr__(
            self, "accepted_formats", frozenset(f.upper() for f in self.accepted_formats)
        )

    def endpoint(self, path: str) -> str:
        """Absolute URL for an endpoint path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        base_url: Optional[str] = None,
    ) -> "ClientConfig":
        """
        Build configuration from environment variables.

        An explicit base_url (e.g. from user settings) wins over the
        environment. Invalid timeouts fall back to the default.

        Args:
            environ: Mapping to read (defaults to os.environ)
            base_url: Optional override for the collaborator URL

        Returns:
            ClientConfig
        """
        env = os.environ if environ is None else environ
        url = base_url or env.get(ENV_API_URL) or DEFAULT_API_URL

        timeout = DEFAULT_TIMEOUT_SECONDS
        raw_timeout = env.get(ENV_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_TIMEOUT}={raw_timeout!r}")
            else:
                if timeout <= 0:
                    logger.warning(f"Ignoring non-positive {ENV_TIMEOUT}={raw_timeout!r}")
                    timeout = DEFAULT_TIMEOUT_SECONDS

        return cls(base_url=url, timeout_seconds=timeout)
