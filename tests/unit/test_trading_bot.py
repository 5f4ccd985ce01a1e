#  Bankr App Kit - Trading Bot Tests
#
#  Instruction phrasing, local order validation and the trading loop.
#  The gateway is an AsyncMock; see test_gateway.py for the HTTP side.
#
#  Depends on: bankr_app/services/trading_bot.py
#  Used by:    pytest

import asyncio
from unittest.mock import AsyncMock

import pytest

from bankr_app.exceptions import (
    ConnectivityCheckFailed,
    RateLimitExceeded,
    TradeValidationError,
    UpstreamRequestFailed,
)
from bankr_app.models.enums import TradeSide
from bankr_app.models.schemas import LimitOrder, TradeOrder
from bankr_app.services.trading_bot import TradingBot


@pytest.fixture
def bot(mock_gateway):
    return TradingBot(
        mock_gateway,
        default_chain="base",
        min_trade_amount_usd=5,
        max_position_size_usd=1000,
        loop_interval_s=0.01,
    )


def _sent(gateway) -> str:
    return gateway.submit.await_args.args[0]


# ---------------------------------------------------------------------------
# Initialization and queries
# ---------------------------------------------------------------------------

class TestInitialize:
    async def test_runs_connectivity_probe(self, bot, mock_gateway):
        await bot.initialize()
        mock_gateway.verify_connectivity.assert_awaited_once()

    async def test_probe_failure_propagates(self, bot, mock_gateway):
        mock_gateway.verify_connectivity.side_effect = ConnectivityCheckFailed("nope")
        with pytest.raises(ConnectivityCheckFailed):
            await bot.initialize()


class TestQueries:
    async def test_check_balances(self, bot, mock_gateway):
        mock_gateway.submit.return_value = "ETH: 1.2"
        assert await bot.check_balances() == "ETH: 1.2"
        assert _sent(mock_gateway) == "what are my balances across all supported chains?"

    async def test_get_price_parses_number(self, bot, mock_gateway):
        mock_gateway.submit.return_value = "ETH is $2,500.10 (market cap $300B)"
        info = await bot.get_price("ETH", "base")
        assert info.price == 2500.10
        assert info.symbol == "ETH"
        assert info.chain == "base"
        assert _sent(mock_gateway).startswith("what is the current price of ETH on base?")

    async def test_get_price_without_chain_uses_default(self, bot, mock_gateway):
        mock_gateway.submit.return_value = "1.00"
        info = await bot.get_price("USDC")
        assert info.chain == "base"
        assert " on " not in _sent(mock_gateway).split("?")[0]

    async def test_get_price_unparseable_is_none(self, bot, mock_gateway):
        mock_gateway.submit.return_value = "I don't know that token"
        info = await bot.get_price("XYZ")
        assert info.price is None
        assert info.raw_response == "I don't know that token"

    async def test_get_portfolio(self, bot, mock_gateway):
        mock_gateway.submit.return_value = "Total: 1000"
        portfolio = await bot.get_portfolio()
        assert portfolio.raw_response == "Total: 1000"
        assert portfolio.last_updated is not None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class TestExecuteTrade:
    async def test_buy_instruction(self, bot, mock_gateway):
        order = TradeOrder(side=TradeSide.BUY, amount=10, from_token="USDC", to_token="ETH", chain="base")
        await bot.execute_trade(order)
        assert _sent(mock_gateway) == "buy $10 of USDC for ETH on base"

    async def test_sell_without_chain(self, bot, mock_gateway):
        order = TradeOrder(side=TradeSide.SELL, amount=12.5, from_token="ETH", to_token="USDC")
        await bot.execute_trade(order)
        assert _sent(mock_gateway) == "sell $12.5 of ETH for USDC"

    async def test_success_updates_counters(self, bot):
        assert bot.trade_count == 0
        assert bot.last_trade_time is None
        order = TradeOrder(side=TradeSide.BUY, amount=10, from_token="USDC", to_token="ETH")
        await bot.execute_trade(order)
        assert bot.trade_count == 1
        assert bot.last_trade_time is not None

    async def test_below_minimum_rejected_locally(self, bot, mock_gateway):
        order = TradeOrder(side=TradeSide.BUY, amount=1, from_token="USDC", to_token="ETH")
        with pytest.raises(TradeValidationError, match=r"below minimum \$5"):
            await bot.execute_trade(order)
        mock_gateway.submit.assert_not_awaited()

    async def test_above_maximum_rejected_locally(self, bot, mock_gateway):
        order = TradeOrder(side=TradeSide.BUY, amount=5000, from_token="USDC", to_token="ETH")
        with pytest.raises(TradeValidationError, match="exceeds maximum position size"):
            await bot.execute_trade(order)
        mock_gateway.submit.assert_not_awaited()

    async def test_failure_does_not_count(self, bot, mock_gateway):
        mock_gateway.submit.side_effect = UpstreamRequestFailed(500, "Internal Server Error")
        order = TradeOrder(side=TradeSide.BUY, amount=10, from_token="USDC", to_token="ETH")
        with pytest.raises(UpstreamRequestFailed):
            await bot.execute_trade(order)
        assert bot.trade_count == 0


class TestLimitAndDca:
    async def test_limit_order_instruction(self, bot, mock_gateway):
        order = LimitOrder(
            side=TradeSide.BUY, amount=100, from_token="USDC", to_token="ETH",
            target_price=2000, chain="base",
        )
        await bot.set_limit_order(order)
        assert _sent(mock_gateway) == (
            "set a limit order to buy 100 ETH when the price reaches $2000 on base"
        )

    async def test_dca_instruction(self, bot, mock_gateway):
        await bot.set_dca("ETH", 25, "every week")
        assert _sent(mock_gateway) == (
            "set up a dollar-cost averaging strategy to buy $25 of ETH every week"
        )

    async def test_dca_rejects_non_positive(self, bot, mock_gateway):
        with pytest.raises(TradeValidationError):
            await bot.set_dca("ETH", 0, "daily")
        mock_gateway.submit.assert_not_awaited()


# ---------------------------------------------------------------------------
# Trading loop
# ---------------------------------------------------------------------------

class TestTradingLoop:
    async def test_calls_hook_repeatedly(self, bot):
        bot.check_trading_opportunities = AsyncMock()
        await bot.start_trading_loop()
        assert bot.is_running
        await asyncio.sleep(0.05)
        await bot.stop_trading_loop()
        assert not bot.is_running
        assert bot.check_trading_opportunities.await_count >= 2

    async def test_survives_rate_limit_and_errors(self, bot):
        bot.check_trading_opportunities = AsyncMock(
            side_effect=[RateLimitExceeded(3, 1000, 500), RuntimeError("boom"), None, None, None, None]
        )
        await bot.start_trading_loop()
        await asyncio.sleep(0.05)
        assert bot.is_running
        await bot.stop_trading_loop()
        assert bot.check_trading_opportunities.await_count >= 3

    async def test_start_twice_is_single_loop(self, bot):
        bot.check_trading_opportunities = AsyncMock()
        await bot.start_trading_loop()
        task = bot._loop_task
        await bot.start_trading_loop()
        assert bot._loop_task is task
        await bot.stop_trading_loop()

    async def test_stop_without_start(self, bot):
        await bot.stop_trading_loop()
        assert not bot.is_running
