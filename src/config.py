"""Runtime settings for the checkout application.

Settings are read from environment variables so the same code can run in
tests, in the demo driver and in an embedding application without editing
source files.

``CHECKOUT_SHIPPING_FEE``
    Flat fee charged per shipped unit (default ``10.0``).
``CHECKOUT_LOG_DIR``
    Directory for the rotating JSON log file.  When unset, logs go to the
    console only.
``CHECKOUT_LOG_LEVEL``
    Name of the root log level (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SHIPPING_FEE = 10.0


def _read_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{key} must not be negative, got {raw!r}")
    return value


def _read_level(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"{key} must be a logging level name, got {raw!r}")
    return level


@dataclass(frozen=True)
class Settings:
    shipping_fee_per_unit: float = DEFAULT_SHIPPING_FEE
    log_dir: Optional[str] = None
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            env = os.environ
        return cls(
            shipping_fee_per_unit=_read_float(env, "CHECKOUT_SHIPPING_FEE", DEFAULT_SHIPPING_FEE),
            log_dir=env.get("CHECKOUT_LOG_DIR") or None,
            log_level=_read_level(env, "CHECKOUT_LOG_LEVEL", logging.INFO),
        )
