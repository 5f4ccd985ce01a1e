#  Bankr App Kit - Token Launcher
#
#  Token deployment and fee management over the agent gateway.
#  Deployment parameters are rendered into a single instruction; what the
#  agent does with it is outside this client.
#
#  Depends on: config.py, services/gateway.py, services/parsing.py,
#              models/schemas.py
#  Used by:    container.py, cli.py, templates/token-launcher

import logging

from bankr_app.config import (
    DEFAULT_CHAIN,
    FEE_PERCENTAGE,
    FEE_RECIPIENT,
    TOKEN_DECIMALS,
    TOKEN_NAME,
    TOKEN_SUPPLY,
    TOKEN_SYMBOL,
    TOKEN_VAULT_PERCENTAGE,
    TOKEN_VESTING_DAYS,
)
from bankr_app.exceptions import ResponseParseError
from bankr_app.models.schemas import TokenConfig
from bankr_app.services.parsing import parse_price

logger = logging.getLogger("bankr.tokens")

DEFAULT_SUPPLY = 1_000_000


def _num(value: float) -> str:
    return f"{value:g}"


def build_deploy_instruction(token: TokenConfig, default_chain: str = DEFAULT_CHAIN) -> str:
    """Render a TokenConfig as a deployment instruction.

    Optional clauses only appear when they differ from the agent's defaults:
    supply when not 1M, vault (and vesting) when vaulted, fees when both the
    recipient and the percentage are set.
    """
    chain = token.chain or default_chain
    parts = [f"deploy a token called {token.name} with symbol {token.symbol} on {chain}"]

    if token.supply != DEFAULT_SUPPLY:
        parts.append(f"with supply of {token.supply}")

    if token.vault_percentage > 0:
        vault = f"with {_num(token.vault_percentage)}% vaulted"
        if token.vesting_days > 0:
            vault += f" for {token.vesting_days} days"
        parts.append(vault)

    if token.fee_recipient and token.fee_percentage:
        parts.append(f"with {_num(token.fee_percentage)}% fees going to {token.fee_recipient}")

    return " ".join(parts)


class TokenLauncher:
    """Token deployment client built on an AgentGateway."""

    def __init__(self, gateway, *, default_chain: str = DEFAULT_CHAIN):
        self._gateway = gateway
        self.default_chain = default_chain
        self._deployed: dict[str, TokenConfig] = {}

    @property
    def deployed_tokens(self) -> list[TokenConfig]:
        """Tokens deployed through this instance (this process only)."""
        return list(self._deployed.values())

    async def initialize(self):
        await self._gateway.verify_connectivity()
        logger.info("Token launcher initialized")

    async def deploy_token(self, token: TokenConfig) -> str:
        instruction = build_deploy_instruction(token, self.default_chain)
        logger.info("Deploying token %s (%s)", token.name, token.symbol)
        try:
            result = await self._gateway.submit(instruction)
        except Exception as e:
            logger.error("Token deployment failed: %s", e)
            raise
        self._deployed[token.symbol] = token
        return result

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    async def deploy_meme_token(self, **overrides) -> str:
        fields = {"name": "MemeToken", "symbol": "MEME", "chain": "base",
                  "supply": 1_000_000_000_000}
        fields.update(overrides)
        return await self.deploy_token(TokenConfig(**fields))

    async def deploy_utility_token(self, **overrides) -> str:
        fields = {"name": "UtilityToken", "symbol": "UTIL", "chain": "base",
                  "supply": 1_000_000_000, "vault_percentage": 20, "vesting_days": 365}
        fields.update(overrides)
        return await self.deploy_token(TokenConfig(**fields))

    async def deploy_defi_token(self, **overrides) -> str:
        fields = {"name": "DeFiToken", "symbol": "DEFI", "chain": "base",
                  "supply": 100_000_000, "fee_percentage": 2}
        fields.update(overrides)
        return await self.deploy_token(TokenConfig(**fields))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_tokens(self) -> str:
        return await self._gateway.submit("list all tokens I have deployed across all chains")

    async def check_fees(self, symbol: str) -> str:
        return await self._gateway.submit(f"check accumulated trading fees for {symbol}")

    async def claim_fees(self, symbol: str) -> str:
        logger.info("Claiming fees for %s", symbol)
        return await self._gateway.submit(f"claim all available fees for {symbol}")

    async def get_holders(self, symbol: str) -> str:
        return await self._gateway.submit(f"show holder distribution for {symbol}")

    async def get_trading_volume(self, symbol: str) -> str:
        return await self._gateway.submit(f"show trading volume and analytics for {symbol}")

    async def get_token_price(self, symbol: str) -> float | None:
        text = await self._gateway.submit(f"what is the current price of {symbol}?")
        try:
            return parse_price(text)
        except ResponseParseError as e:
            logger.warning("Could not read a price for %s: %s", symbol, e)
            return None

    def demo_token(self) -> TokenConfig:
        """Sample configuration shown by the CLI demo; nothing is deployed."""
        return TokenConfig(
            name=TOKEN_NAME,
            symbol=TOKEN_SYMBOL,
            chain=self.default_chain,
            supply=TOKEN_SUPPLY,
            decimals=TOKEN_DECIMALS,
            vault_percentage=TOKEN_VAULT_PERCENTAGE,
            vesting_days=TOKEN_VESTING_DAYS,
            # fees only apply once someone is set to receive them
            fee_recipient=FEE_RECIPIENT or None,
            fee_percentage=FEE_PERCENTAGE if FEE_RECIPIENT else None,
        )
