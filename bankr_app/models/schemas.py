#  Bankr App Kit - Pydantic Schemas
#
#  Gateway configuration, order/token inputs and client results.
#
#  Depends on: models/enums.py
#  Used by:    config.py, services/*, scaffold/*

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from bankr_app.models.enums import Blockchain, Feature, TemplateKind, TradeSide

PROJECT_NAME_PATTERN = r"^[A-Za-z0-9_-]+$"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class GatewayConfig(BaseModel):
    """Immutable settings for one AgentGateway."""

    model_config = ConfigDict(frozen=True)

    endpoint_base_url: str = Field(..., min_length=1)
    auth_token: str = Field(..., min_length=1)
    max_requests_per_window: int = Field(..., gt=0)
    window_duration_ms: int = Field(default=3_600_000, gt=0)
    request_timeout_s: float = Field(default=30.0, gt=0)
    charge_on_failure: bool = True
    model: str = Field(default="bankr-agent", min_length=1)


class LedgerUsage(BaseModel):
    in_window: int
    limit: int
    remaining: int
    retry_after_ms: int  # 0 when a request would be admitted now


# ---------------------------------------------------------------------------
# Trading
# ---------------------------------------------------------------------------

class TradeOrder(BaseModel):
    side: TradeSide
    amount: float = Field(..., gt=0)  # USD
    from_token: str = Field(..., min_length=1)
    to_token: str = Field(..., min_length=1)
    chain: str | None = None


class LimitOrder(TradeOrder):
    target_price: float = Field(..., gt=0)
    order_id: str | None = None


class PriceInfo(BaseModel):
    symbol: str
    price: float | None = None  # None when the agent text had no number
    chain: str
    raw_response: str = ""


class Portfolio(BaseModel):
    raw_response: str
    last_updated: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenConfig(BaseModel):
    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1, max_length=16)
    chain: str | None = None
    supply: int = Field(default=1_000_000, gt=0)
    decimals: int = Field(default=18, ge=0, le=36)
    vault_percentage: float = Field(default=0, ge=0, le=100)
    vesting_days: int = Field(default=0, ge=0)
    fee_recipient: str | None = None
    fee_percentage: float | None = Field(default=None, ge=0, le=100)
    description: str | None = None
    image: str | None = None


# ---------------------------------------------------------------------------
# Scaffolding
# ---------------------------------------------------------------------------

class ProjectOptions(BaseModel):
    project_name: str = Field(default="my-bankr-app", pattern=PROJECT_NAME_PATTERN)
    template: TemplateKind = TemplateKind.TRADING_BOT
    blockchain: Blockchain = Blockchain.BASE
    features: list[Feature] = Field(default_factory=list)
    git_init: bool = True

    def has(self, feature: Feature) -> bool:
        return feature in self.features
