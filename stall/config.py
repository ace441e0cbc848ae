"""Runtime configuration defaults, overridable from the environment or a .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]

DATA_DIR = "data"
APP_ID = "default-app-id"
STAFF_PASSWORD = "mamba123"
BUSINESS_NAME = "Mamba Foods"
PAYMENT_DESCRIPTION = "Stall Order Payment"
CURRENCY = "INR"
CURRENCY_SYMBOL = "₹"
PICKUP_ADDRESS = "IIT Gandhinagar Campus"
POLL_INTERVAL_SECONDS = 1.0
DEBUG_LOG_PATH = "/tmp/stall-order-debug.log"
LOG_LEVEL = "INFO"

# Human-facing order numbers are three digits.
ORDER_NUMBER_MIN = 100
ORDER_NUMBER_MAX = 999


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    app_id: str
    db_path: str
    staff_password: str
    business_name: str
    payment_description: str
    currency: str
    currency_symbol: str
    pickup_address: str
    poll_interval: float
    debug_log_path: str
    log_level: str


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read settings, letting environment variables override the module defaults."""
    load_dotenv(dotenv_path=env_file or ROOT_DIR / ".env")
    app_id = _get_env("STALL_APP_ID", default=APP_ID) or APP_ID
    return Settings(
        app_id=app_id,
        db_path=_get_env("STALL_DB_PATH", default=str(ROOT_DIR / DATA_DIR / app_id / "orders.db")) or "",
        staff_password=_get_env("STALL_STAFF_PASSWORD", default=STAFF_PASSWORD) or "",
        business_name=_get_env("STALL_BUSINESS_NAME", default=BUSINESS_NAME) or BUSINESS_NAME,
        payment_description=_get_env("STALL_PAYMENT_DESCRIPTION", default=PAYMENT_DESCRIPTION) or PAYMENT_DESCRIPTION,
        currency=_get_env("STALL_CURRENCY", default=CURRENCY) or CURRENCY,
        currency_symbol=_get_env("STALL_CURRENCY_SYMBOL", default=CURRENCY_SYMBOL) or CURRENCY_SYMBOL,
        pickup_address=_get_env("STALL_PICKUP_ADDRESS", default=PICKUP_ADDRESS) or PICKUP_ADDRESS,
        poll_interval=_get_float("STALL_POLL_INTERVAL", default=POLL_INTERVAL_SECONDS),
        debug_log_path=_get_env("STALL_DEBUG_LOG_PATH", default=DEBUG_LOG_PATH) or DEBUG_LOG_PATH,
        log_level=(_get_env("STALL_LOG_LEVEL", default=LOG_LEVEL) or LOG_LEVEL).upper(),
    )
