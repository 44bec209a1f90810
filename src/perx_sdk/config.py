"""
Perx client configuration.

Settings can be passed explicitly or read from the environment:

    PERX_API_URL             - API host, e.g. https://api.perxtech.io (required)
    PERX_CLIENT_ID           - OAuth client id (required)
    PERX_CLIENT_SECRET       - OAuth client secret (required)
    PERX_TOKEN_DURATION_SEC  - Lifetime requested for user tokens (default: 300)
    PERX_TIMEOUT_SEC         - Transport timeout (default: none)
    PERX_DEBUG               - request | response | all | none (default: none)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from .client_base import DEBUG_MODES
from .errors import PerxConfigError


DEFAULT_TOKEN_DURATION_SEC = 300


@dataclass(frozen=True)
class PerxConfig:
    base_url: str
    client_id: str
    client_secret: str = field(repr=False)
    token_duration_in_seconds: int = DEFAULT_TOKEN_DURATION_SEC
    timeout: Optional[float] = None
    debug: str = "none"

    def __post_init__(self) -> None:
        if not self.base_url:
            raise PerxConfigError("base_url must be set.")
        if not self.client_id or not self.client_secret:
            raise PerxConfigError("client_id and client_secret must be set.")
        if self.token_duration_in_seconds <= 0:
            raise PerxConfigError(
                f"token_duration_in_seconds must be positive, got {self.token_duration_in_seconds}."
            )
        if self.debug not in DEBUG_MODES:
            raise PerxConfigError(
                f"debug must be one of {', '.join(DEBUG_MODES)}, got '{self.debug}'."
            )

    @classmethod
    def from_env(cls) -> "PerxConfig":
        base_url = os.getenv("PERX_API_URL") or None
        client_id = os.getenv("PERX_CLIENT_ID") or None
        client_secret = os.getenv("PERX_CLIENT_SECRET") or None

        missing = [
            name
            for name, value in (
                ("PERX_API_URL", base_url),
                ("PERX_CLIENT_ID", client_id),
                ("PERX_CLIENT_SECRET", client_secret),
            )
            if not value
        ]
        if missing:
            raise PerxConfigError(f"Missing required environment variables: {', '.join(missing)}.")

        duration_raw = os.getenv("PERX_TOKEN_DURATION_SEC", str(DEFAULT_TOKEN_DURATION_SEC)).strip()
        try:
            duration = int(duration_raw)
        except ValueError as e:
            raise PerxConfigError(
                f"PERX_TOKEN_DURATION_SEC must be an integer, got '{duration_raw}'."
            ) from e

        timeout_raw = (os.getenv("PERX_TIMEOUT_SEC") or "").strip()
        timeout: Optional[float] = None
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as e:
                raise PerxConfigError(
                    f"PERX_TIMEOUT_SEC must be a number, got '{timeout_raw}'."
                ) from e

        debug = os.getenv("PERX_DEBUG", "none").strip().lower() or "none"

        return cls(
            base_url=base_url,
            client_id=client_id,
            client_secret=client_secret,
            token_duration_in_seconds=duration,
            timeout=timeout,
            debug=debug,
        )
