import json
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

import base58
from dotenv import load_dotenv
from solders.keypair import Keypair

import settings
from errors import ConfigError

T = TypeVar("T")


@dataclass(frozen=True)
class Config:
    rpc_url: str
    pool_address: str
    pool_type: str
    token_mint: str
    wsol_mint: str
    wallet: Keypair
    min_interval_ms: int
    max_interval_ms: int
    error_delay_ms: int
    random_factor: float
    slippage_bps: int
    min_trade_fraction: float
    max_trade_fraction: float
    buys_per_sell: float
    random_decision_threshold: float
    cycles: int = settings.CYCLES
    jupiter_api_url: str = settings.JUPITER_API_URL
    unit_budget: int = settings.UNIT_BUDGET
    unit_price: int = settings.UNIT_PRICE
    log_level: str = "INFO"


def parse_private_key(raw: str) -> Keypair:
    """Accept either a JSON array of byte values or a base58 string."""
    try:
        values = json.loads(raw)
    except ValueError:
        values = None
    if isinstance(values, list):
        try:
            return Keypair.from_bytes(bytes(values))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"PRIVATE_KEY JSON array is not a valid keypair: {e}") from e

    try:
        return Keypair.from_bytes(base58.b58decode(raw.strip()))
    except ValueError as e:
        raise ConfigError("PRIVATE_KEY must be either a base58 string or a JSON array of numbers") from e


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if not value:
        raise ConfigError(f"{name} environment variable is required")
    return value


def _number(env: Mapping[str, str], name: str, cast: Callable[[str], T], default: T) -> T:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _trade_fractions(env: Mapping[str, str]):
    if env.get("TRADE_FRACTION"):
        max_fraction = _number(env, "TRADE_FRACTION", float, settings.MAX_TRADE_FRACTION)
        return max_fraction * settings.LEGACY_MIN_FRACTION_SHARE, max_fraction
    return (
        _number(env, "MIN_TRADE_FRACTION", float, settings.MIN_TRADE_FRACTION),
        _number(env, "MAX_TRADE_FRACTION", float, settings.MAX_TRADE_FRACTION),
    )


def validate(config: Config) -> Config:
    if config.pool_type not in settings.POOL_TYPES:
        raise ConfigError(f"POOL_TYPE must be either {' or '.join(settings.POOL_TYPES)}")
    if config.min_interval_ms < 0 or config.min_interval_ms > config.max_interval_ms:
        raise ConfigError("MIN_INTERVAL_MS must be non-negative and not greater than MAX_INTERVAL_MS")
    if config.error_delay_ms < 0:
        raise ConfigError("ERROR_DELAY_MS must be non-negative")
    if not 0 <= config.random_factor < 1:
        raise ConfigError("RANDOM_FACTOR must be in [0, 1)")
    if not 0 <= config.slippage_bps <= 10_000:
        raise ConfigError("SLIPPAGE_BPS must be between 0 and 10000")
    if not 0 < config.min_trade_fraction <= config.max_trade_fraction <= 1:
        raise ConfigError("Trade fractions must satisfy 0 < MIN_TRADE_FRACTION <= MAX_TRADE_FRACTION <= 1")
    if config.buys_per_sell <= 0:
        raise ConfigError("BUYS_PER_SELL must be positive")
    if not 0 <= config.random_decision_threshold <= 1:
        raise ConfigError("RANDOM_DECISION_THRESHOLD must be in [0, 1]")
    if config.cycles < 0:
        raise ConfigError("CYCLES must be non-negative")
    if config.log_level not in settings.LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(settings.LOG_LEVELS)}")
    return config


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    if env is None:
        load_dotenv()
        env = os.environ

    rpc_url = _required(env, "SOLANA_RPC_URL")
    pool_address = _required(env, "METEORA_POOL")
    token_mint = _required(env, "TOKEN_MINT")
    wallet = parse_private_key(_required(env, "PRIVATE_KEY"))
    min_fraction, max_fraction = _trade_fractions(env)

    return validate(Config(
        rpc_url=rpc_url,
        pool_address=pool_address,
        pool_type=(env.get("POOL_TYPE") or settings.DEFAULT_POOL_TYPE).upper(),
        token_mint=token_mint,
        wsol_mint=env.get("WSOL_MINT") or settings.WSOL_MINT,
        wallet=wallet,
        min_interval_ms=_number(env, "MIN_INTERVAL_MS", int, settings.MIN_INTERVAL_MS),
        max_interval_ms=_number(env, "MAX_INTERVAL_MS", int, settings.MAX_INTERVAL_MS),
        error_delay_ms=_number(env, "ERROR_DELAY_MS", int, settings.ERROR_DELAY_MS),
        random_factor=_number(env, "RANDOM_FACTOR", float, settings.RANDOM_FACTOR),
        slippage_bps=_number(env, "SLIPPAGE_BPS", int, settings.SLIPPAGE_BPS),
        min_trade_fraction=min_fraction,
        max_trade_fraction=max_fraction,
        buys_per_sell=_number(env, "BUYS_PER_SELL", float, settings.BUYS_PER_SELL),
        random_decision_threshold=_number(env, "RANDOM_DECISION_THRESHOLD", float,
                                          settings.RANDOM_DECISION_THRESHOLD),
        cycles=_number(env, "CYCLES", int, settings.CYCLES),
        jupiter_api_url=env.get("JUPITER_API_URL") or settings.JUPITER_API_URL,
        unit_budget=_number(env, "UNIT_BUDGET", int, settings.UNIT_BUDGET),
        unit_price=_number(env, "UNIT_PRICE", int, settings.UNIT_PRICE),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    ))
