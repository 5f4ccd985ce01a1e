"""Trading strategy for ${project_name}.

check_trading_opportunities() runs once per loop interval. Put your
rules here; every call to the agent counts toward the hourly request limit.
"""

import logging

from bankr_app.config import TRADE_AMOUNT_USD
from bankr_app.models.enums import TradeSide
from bankr_app.models.schemas import TradeOrder
from bankr_app.services.trading_bot import TradingBot

logger = logging.getLogger("bankr.strategy")


class Strategy(TradingBot):
    """Buy a fixed USD amount of watch_token whenever it trades below buy_below."""

    watch_token = "ETH"
    quote_token = "USDC"
    buy_below: float | None = None  # USD; None disables buying

    async def check_trading_opportunities(self):
        info = await self.get_price(self.watch_token, self.default_chain)
        if info.price is None:
            logger.info("No price for %s this round", self.watch_token)
            return
        logger.info("%s is at %s USD", self.watch_token, info.price)

        if self.buy_below is not None and info.price < self.buy_below:
            order = TradeOrder(
                side=TradeSide.BUY,
                amount=TRADE_AMOUNT_USD,
                from_token=self.quote_token,
                to_token=self.watch_token,
                chain=self.default_chain,
            )
            await self.execute_trade(order)
