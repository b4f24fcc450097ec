"""Runtime settings read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_GATEWAY_URL = "https://api.razorpay.com/v1"


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    currency: str = "INR"
    lock_timeout: float = 5.0
    gateway_timeout: float = 10.0
    log_level: str = "WARNING"
    gateway_key_id: str | None = None
    gateway_key_secret: str | None = None
    gateway_base_url: str = DEFAULT_GATEWAY_URL

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"

    @property
    def rate_limit_path(self) -> Path:
        return self.data_dir / "rate_limits.json"

    @staticmethod
    def from_env(load_dotenv_file: bool = True) -> Settings:
        if load_dotenv_file:
            load_dotenv()
        return Settings(
            data_dir=Path(os.environ.get("STOREFRONT_DATA_DIR", "data")).expanduser(),
            currency=os.environ.get("STOREFRONT_CURRENCY", "INR").strip().upper(),
            lock_timeout=_float_env("STOREFRONT_LOCK_TIMEOUT", 5.0),
            gateway_timeout=_float_env("STOREFRONT_GATEWAY_TIMEOUT", 10.0),
            log_level=os.environ.get("STOREFRONT_LOG_LEVEL", "WARNING").strip().upper(),
            gateway_key_id=os.environ.get("RAZORPAY_KEY_ID") or None,
            gateway_key_secret=os.environ.get("RAZORPAY_KEY_SECRET") or None,
            gateway_base_url=os.environ.get("RAZORPAY_BASE_URL", DEFAULT_GATEWAY_URL),
        )
