#  Bankr App Kit - Configuration
#
#  Loads an optional config.json and provides typed access to all settings.
#  Dot-notation path lookup: cfg("trading.max_trades_per_hour")
#  Environment variables override file values. A .env file in the working
#  directory (or BANKR_ENV_FILE) is loaded first; variables already set in
#  the process environment win over it. Generated projects ship a
#  .env.example listing them.
#
#  Depends on: config.json (optional), .env (optional), models/schemas.py
#  Used by:    all bankr_app modules

import json
import os
from pathlib import Path

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when critical configuration is invalid."""


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------

PACKAGE_ROOT = Path(__file__).parent
TEMPLATES_ROOT = PACKAGE_ROOT / "templates"
ENV_FILE_PATH = Path(os.environ.get("BANKR_ENV_FILE", ".env"))

# Must run before any constant below reads os.environ
load_dotenv(ENV_FILE_PATH, override=False)

CONFIG_PATH = Path(os.environ.get("BANKR_CONFIG", "config.json"))

# ---------------------------------------------------------------------------
# Load config
# ---------------------------------------------------------------------------

_config: dict = {}


def _load_config(path: Path | None = None):
    """Load configuration from JSON file (internal, called once at import time).

    Module-level constants below are snapshots from _config.
    """
    global _config
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Copy config.example.json to config.json."
        )
    with open(config_path) as f:
        _config = json.load(f)


# Auto-load if config exists at import time
if CONFIG_PATH.exists():
    _load_config()


def cfg(path: str, default=None):
    """Get a config value by dot-notation path.

    Example: cfg("bankr.base_url") -> "https://api.bankr.bot"
    """
    keys = path.split(".")
    val = _config
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def env_or_cfg(env_name: str, path: str, default=None, cast=str):
    """Environment variable if set and non-empty, else cfg(path, default).

    Raises ConfigError when the environment value cannot be cast.
    """
    raw = os.environ.get(env_name)
    if raw is None or raw == "":
        return cfg(path, default)
    if cast is bool:
        return _parse_bool(raw)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid {env_name}={raw!r}; expected {cast.__name__}") from e


# ---------------------------------------------------------------------------
# Convenience constants
# ---------------------------------------------------------------------------

# Agent endpoint
BANKR_API_KEY = os.environ.get("BANKR_API_KEY", "")
BANKR_BASE_URL = env_or_cfg("BANKR_BASE_URL", "bankr.base_url", "https://api.bankr.bot")
AGENT_MODEL = cfg("bankr.model", "bankr-agent")
REQUEST_TIMEOUT = env_or_cfg("REQUEST_TIMEOUT_S", "bankr.request_timeout_s", 30.0, float)

# Rate limiting
MAX_TRADES_PER_HOUR = env_or_cfg("MAX_TRADES_PER_HOUR", "rate_limit.max_requests", 20, int)
RATE_LIMIT_WINDOW_MS = env_or_cfg("RATE_LIMIT_WINDOW_MS", "rate_limit.window_ms", 3_600_000, int)
CHARGE_ON_FAILURE = env_or_cfg("CHARGE_ON_FAILURE", "rate_limit.charge_on_failure", True, bool)

# Trading
DEFAULT_CHAIN = env_or_cfg("DEFAULT_CHAIN", "trading.default_chain", "base")
TRADE_AMOUNT_USD = env_or_cfg("TRADE_AMOUNT_USD", "trading.trade_amount_usd", 10.0, float)
MAX_POSITION_SIZE_USD = env_or_cfg("MAX_POSITION_SIZE_USD", "trading.max_position_size_usd", 1000.0, float)
MIN_TRADE_AMOUNT_USD = env_or_cfg("MIN_TRADE_AMOUNT_USD", "trading.min_trade_amount_usd", 5.0, float)
TRADING_LOOP_INTERVAL = env_or_cfg("TRADING_LOOP_INTERVAL_S", "trading.loop_interval_s", 60.0, float)

# Alerts
PRICE_ALERTS_ENABLED = env_or_cfg("PRICE_ALERTS_ENABLED", "alerts.price_alerts_enabled", True, bool)
ALERT_WEBHOOK_URL = env_or_cfg("ALERT_WEBHOOK_URL", "alerts.webhook_url", "")

# Token launcher
TOKEN_NAME = env_or_cfg("TOKEN_NAME", "token.name", "MyToken")
TOKEN_SYMBOL = env_or_cfg("TOKEN_SYMBOL", "token.symbol", "MTK")
TOKEN_SUPPLY = env_or_cfg("TOKEN_SUPPLY", "token.supply", 1_000_000, int)
TOKEN_DECIMALS = env_or_cfg("TOKEN_DECIMALS", "token.decimals", 18, int)
TOKEN_VAULT_PERCENTAGE = env_or_cfg("TOKEN_VAULT_PERCENTAGE", "token.vault_percentage", 20.0, float)
TOKEN_VESTING_DAYS = env_or_cfg("TOKEN_VESTING_DAYS", "token.vesting_days", 30, int)
FEE_RECIPIENT = env_or_cfg("FEE_RECIPIENT", "token.fee_recipient", "")
FEE_PERCENTAGE = env_or_cfg("FEE_PERCENTAGE", "token.fee_percentage", 2.0, float)

# Logging
LOG_LEVEL = env_or_cfg("LOG_LEVEL", "logging.level", "INFO")
LOG_FORMAT = env_or_cfg("LOG_FORMAT", "logging.format", "text")

# Scaffolding
GIT_COMMAND_TIMEOUT = cfg("scaffold.git_command_timeout", 30)
GIT_COMMIT_MESSAGE = cfg("scaffold.git_commit_message", "Initial commit: Create Bankr app")


def build_gateway_config():
    """GatewayConfig from the current module-level settings."""
    from bankr_app.models.schemas import GatewayConfig

    return GatewayConfig(
        endpoint_base_url=BANKR_BASE_URL,
        auth_token=BANKR_API_KEY,
        max_requests_per_window=MAX_TRADES_PER_HOUR,
        window_duration_ms=RATE_LIMIT_WINDOW_MS,
        request_timeout_s=REQUEST_TIMEOUT,
        charge_on_failure=CHARGE_ON_FAILURE,
        model=AGENT_MODEL,
    )


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

def validate_config():
    """Validate critical config values. Call during app startup (not at import time).

    Raises ConfigError for fatal issues, logs warnings for non-fatal ones.
    """
    import logging
    _logger = logging.getLogger("bankr.config")

    # Fatal: the agent endpoint needs a bearer token
    if not BANKR_API_KEY:
        raise ConfigError(
            "BANKR_API_KEY is not set. Bankr API key is required "
            "(add it to your .env file or export it)."
        )

    if not isinstance(BANKR_BASE_URL, str) or not BANKR_BASE_URL.startswith(("http://", "https://")):
        raise ConfigError(
            f"bankr.base_url must start with http:// or https://, got '{BANKR_BASE_URL}'"
        )

    # Fatal: rate limit must admit at least one request per positive window
    if not isinstance(MAX_TRADES_PER_HOUR, int) or MAX_TRADES_PER_HOUR <= 0:
        raise ConfigError(f"rate_limit.max_requests must be > 0, got {MAX_TRADES_PER_HOUR}")
    if not isinstance(RATE_LIMIT_WINDOW_MS, int) or RATE_LIMIT_WINDOW_MS <= 0:
        raise ConfigError(f"rate_limit.window_ms must be > 0, got {RATE_LIMIT_WINDOW_MS}")

    for label, val in [("bankr.request_timeout_s", REQUEST_TIMEOUT),
                       ("trading.loop_interval_s", TRADING_LOOP_INTERVAL)]:
        if not isinstance(val, (int, float)) or val <= 0:
            raise ConfigError(f"{label} must be > 0, got {val}")

    if MIN_TRADE_AMOUNT_USD > MAX_POSITION_SIZE_USD:
        raise ConfigError(
            f"trading.min_trade_amount_usd ({MIN_TRADE_AMOUNT_USD}) exceeds "
            f"trading.max_position_size_usd ({MAX_POSITION_SIZE_USD})"
        )

    # Warning: alerts enabled but nowhere to send them
    if PRICE_ALERTS_ENABLED and not ALERT_WEBHOOK_URL:
        _logger.warning(
            "Price alerts are enabled but ALERT_WEBHOOK_URL is not set; "
            "alerts will only be logged"
        )
