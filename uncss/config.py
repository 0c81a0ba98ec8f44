from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from uncss import __version__

DEFAULT_OUTPUT = "output.json"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"uncss-scan/{__version__}"


def split_names(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(s.strip() for s in raw.split(",") if s.strip())


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise SystemExit(f"{name} must be a number, got {raw!r}")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    output: str = DEFAULT_OUTPUT
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = 0  # 0: one thread per URL
    user_agent: str = DEFAULT_USER_AGENT
    excluded_stylesheets: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls) -> "Settings":
        """Read UNCSS_* variables (call load_dotenv() first to honour .env)."""
        return cls(
            output=os.getenv("UNCSS_OUTPUT") or DEFAULT_OUTPUT,
            timeout=_float_env("UNCSS_TIMEOUT", DEFAULT_TIMEOUT),
            max_workers=_int_env("UNCSS_MAX_WORKERS", 0),
            user_agent=os.getenv("UNCSS_USER_AGENT") or DEFAULT_USER_AGENT,
            excluded_stylesheets=split_names(os.getenv("UNCSS_EXCLUDE_STYLESHEETS")),
        )
