#  Bankr App Kit - Trading Bot
#
#  Trading client over the agent gateway: balances, prices, market/limit
#  orders, DCA and a periodic opportunity loop. Orders are phrased as
#  natural-language instructions; the agent does the execution.
#
#  Depends on: config.py, services/gateway.py, services/parsing.py,
#              models/schemas.py, exceptions.py
#  Used by:    container.py, cli.py, templates/trading-bot

import asyncio
import logging
import time
from datetime import datetime, timezone

from bankr_app.config import (
    DEFAULT_CHAIN,
    MAX_POSITION_SIZE_USD,
    MIN_TRADE_AMOUNT_USD,
    TRADING_LOOP_INTERVAL,
)
from bankr_app.exceptions import RateLimitExceeded, ResponseParseError, TradeValidationError
from bankr_app.models.schemas import LimitOrder, Portfolio, PriceInfo, TradeOrder
from bankr_app.services.parsing import parse_price

logger = logging.getLogger("bankr.trading")


def _on_chain(chain: str | None) -> str:
    return f" on {chain}" if chain else ""


def _fmt_amount(amount: float) -> str:
    return f"{amount:g}"


class TradingBot:
    """Trading client built on an AgentGateway.

    Subclass and override check_trading_opportunities() to add a strategy;
    start_trading_loop() calls it every loop_interval_s seconds.
    """

    def __init__(
        self,
        gateway,
        *,
        default_chain: str = DEFAULT_CHAIN,
        min_trade_amount_usd: float = MIN_TRADE_AMOUNT_USD,
        max_position_size_usd: float = MAX_POSITION_SIZE_USD,
        loop_interval_s: float = TRADING_LOOP_INTERVAL,
    ):
        self._gateway = gateway
        self.default_chain = default_chain
        self.min_trade_amount_usd = min_trade_amount_usd
        self.max_position_size_usd = max_position_size_usd
        self.loop_interval_s = loop_interval_s
        self._trade_count = 0
        self._last_trade_time: float | None = None
        self._loop_task: asyncio.Task | None = None

    @property
    def trade_count(self) -> int:
        return self._trade_count

    @property
    def last_trade_time(self) -> datetime | None:
        if self._last_trade_time is None:
            return None
        return datetime.fromtimestamp(self._last_trade_time, tz=timezone.utc)

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def initialize(self):
        """Validate credentials and reachability before any real traffic."""
        await self._gateway.verify_connectivity()
        logger.info("Trading bot initialized")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def check_balances(self) -> str:
        logger.info("Checking wallet balances")
        return await self._gateway.submit("what are my balances across all supported chains?")

    async def get_price(self, token: str, chain: str | None = None) -> PriceInfo:
        instruction = (
            f"what is the current price of {token}{_on_chain(chain)}? "
            "include market cap, volume, and 24h change if available"
        )
        text = await self._gateway.submit(instruction)
        try:
            price = parse_price(text)
        except ResponseParseError as e:
            logger.warning("Could not read a price for %s: %s", token, e)
            price = None
        return PriceInfo(
            symbol=token,
            price=price,
            chain=chain or self.default_chain,
            raw_response=text,
        )

    async def get_portfolio(self) -> Portfolio:
        logger.info("Fetching portfolio overview")
        text = await self._gateway.submit(
            "show my complete portfolio including total value and individual token holdings"
        )
        return Portfolio(raw_response=text)

    async def get_performance_metrics(self) -> str:
        return await self._gateway.submit("show my trading performance and statistics")

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def _validate_amount(self, amount: float):
        if amount < self.min_trade_amount_usd:
            raise TradeValidationError(
                f"Trade amount ${_fmt_amount(amount)} is below minimum "
                f"${_fmt_amount(self.min_trade_amount_usd)}"
            )
        if amount > self.max_position_size_usd:
            raise TradeValidationError(
                f"Trade amount ${_fmt_amount(amount)} exceeds maximum position size "
                f"${_fmt_amount(self.max_position_size_usd)}"
            )

    async def execute_trade(self, order: TradeOrder) -> str:
        """Market order, e.g. "buy $10 of USDC for ETH on base"."""
        self._validate_amount(order.amount)
        instruction = (
            f"{order.side.value} ${_fmt_amount(order.amount)} of {order.from_token} "
            f"for {order.to_token}{_on_chain(order.chain)}"
        )
        logger.info(
            "Executing %s order: %s %s -> %s",
            order.side.value, _fmt_amount(order.amount), order.from_token, order.to_token,
        )
        try:
            result = await self._gateway.submit(instruction)
        except Exception as e:
            logger.error("Trade failed: %s", e)
            raise
        self._trade_count += 1
        self._last_trade_time = time.time()
        return result

    async def set_limit_order(self, order: LimitOrder) -> str:
        instruction = (
            f"set a limit order to {order.side.value} {_fmt_amount(order.amount)} "
            f"{order.to_token} when the price reaches ${_fmt_amount(order.target_price)}"
            f"{_on_chain(order.chain)}"
        )
        logger.info("Setting limit order for %s at $%s", order.to_token, _fmt_amount(order.target_price))
        return await self._gateway.submit(instruction)

    async def set_dca(self, token: str, amount: float, frequency: str) -> str:
        """Dollar-cost averaging, e.g. set_dca("ETH", 25, "every week")."""
        if amount <= 0:
            raise TradeValidationError(f"DCA amount must be positive, got {amount}")
        instruction = (
            f"set up a dollar-cost averaging strategy to buy ${_fmt_amount(amount)} "
            f"of {token} {frequency}"
        )
        logger.info("Setting DCA: %s %s %s", _fmt_amount(amount), token, frequency)
        return await self._gateway.submit(instruction)

    # ------------------------------------------------------------------
    # Trading loop
    # ------------------------------------------------------------------

    async def check_trading_opportunities(self):
        """Strategy hook. The default only logs."""
        logger.debug("Checking for trading opportunities")

    async def start_trading_loop(self):
        if self.is_running:
            return
        logger.info("Starting trading loop (every %ss)", self.loop_interval_s)
        self._loop_task = asyncio.create_task(self._trading_loop())

    async def stop_trading_loop(self):
        if self._loop_task:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None
            logger.info("Trading loop stopped")

    async def _trading_loop(self):
        while True:
            try:
                await self.check_trading_opportunities()
            except RateLimitExceeded as e:
                logger.warning("Trading loop throttled: %s", e)
            except Exception as e:
                logger.error("Error in trading loop: %s", e)
            await asyncio.sleep(self.loop_interval_s)
