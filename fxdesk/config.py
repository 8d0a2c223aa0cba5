import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

# Base prices for the simulated market. Order matters: /api/rates lists
# instruments in this order.
BASE_RATES = {
    "EUR/USD": 1.085,
    "GBP/USD": 1.265,
    "USD/JPY": 148.5,
    "USD/CHF": 0.875,
    "AUD/USD": 0.658,
    "USD/CAD": 1.352,
    "NZD/USD": 0.612,
    "EUR/GBP": 0.858,
    "EUR/JPY": 161.2,
    "GBP/JPY": 187.9,
}

DEFAULT_INITIAL_BALANCE = Decimal("10000")
DEFAULT_RATE_JITTER = 0.001
DEFAULT_PORT = 3001


def _env_decimal(name: str, default: Decimal) -> Decimal:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    initial_balance: Decimal = DEFAULT_INITIAL_BALANCE
    rate_jitter: float = DEFAULT_RATE_JITTER
    random_seed: Optional[int] = None
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Unset or blank variables fall back to the defaults above.
        """
        balance = _env_decimal("FXDESK_INITIAL_BALANCE", DEFAULT_INITIAL_BALANCE)
        if not balance.is_finite() or balance < 0:
            raise ValueError("FXDESK_INITIAL_BALANCE must be a non-negative number")

        jitter = _env_float("FXDESK_RATE_JITTER", DEFAULT_RATE_JITTER)
        if jitter < 0 or jitter >= 1:
            raise ValueError("FXDESK_RATE_JITTER must be in [0, 1)")

        log_level = (os.environ.get("FXDESK_LOG_LEVEL") or "INFO").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"FXDESK_LOG_LEVEL must be a logging level name, got {log_level!r}")

        origins = os.environ.get("FXDESK_CORS_ORIGINS", "*")
        cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",)

        return cls(
            initial_balance=balance,
            rate_jitter=jitter,
            random_seed=_env_int("FXDESK_RANDOM_SEED", None),
            cors_origins=cors_origins,
            log_level=log_level,
            host=os.environ.get("HOST", "0.0.0.0"),
            port=_env_int("PORT", DEFAULT_PORT),
        )
