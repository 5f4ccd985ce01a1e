#  Bankr App Kit - Enums
#
#  Template, chain, feature and order enumerations used across the kit.
#
#  Depends on: (none)
#  Used by:    models/schemas.py, scaffold/*, services/trading_bot.py

from enum import Enum


class TemplateKind(str, Enum):
    TRADING_BOT = "trading-bot"
    TOKEN_LAUNCHER = "token-launcher"
    PORTFOLIO_TRACKER = "portfolio-tracker"
    ARBITRAGE_BOT = "arbitrage-bot"
    DEFI_YIELD_FARM = "defi-yield-farm"


class Blockchain(str, Enum):
    BASE = "base"            # Gas sponsorship available
    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    UNICHAIN = "unichain"
    SOLANA = "solana"


class Feature(str, Enum):
    # Common to every template
    ENV_CONFIG = "env-config"
    TESTING = "testing"
    TUTORIALS = "tutorials"
    LOGGING = "logging"
    ERROR_HANDLING = "error-handling"

    # Trading bot
    LIMIT_ORDERS = "limit-orders"
    DCA = "dca"
    PORTFOLIO_TRACKING = "portfolio-tracking"
    PRICE_ALERTS = "price-alerts"

    # Token launcher
    VAULTING = "vaulting"
    VESTING = "vesting"
    FEE_MANAGEMENT = "fee-management"
    TOKEN_ANALYTICS = "token-analytics"


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"
