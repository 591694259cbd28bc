from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .transport import AMPLITUDE_API_URL

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class TrackerSettings:
    api_key: Optional[str] = None
    api_url: str = AMPLITUDE_API_URL
    timeout: float = 10
    debug_response: bool = False

    @classmethod
    def from_env(cls) -> "TrackerSettings":
        """Build settings from ``AMPLITUDE_*`` environment variables."""
        timeout = os.getenv("AMPLITUDE_TIMEOUT")
        try:
            parsed_timeout = float(timeout) if timeout else 10.0
        except ValueError as exc:
            raise ValueError(f"AMPLITUDE_TIMEOUT must be numeric, got {timeout!r}") from exc
        return cls(
            api_key=os.getenv("AMPLITUDE_API_KEY") or None,
            api_url=os.getenv("AMPLITUDE_API_URL") or AMPLITUDE_API_URL,
            timeout=parsed_timeout,
            debug_response=(os.getenv("AMPLITUDE_DEBUG_RESPONSE", "").strip().lower() in _TRUTHY),
        )
