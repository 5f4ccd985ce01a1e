"""${project_name}: a Bankr trading bot on ${blockchain}."""

import asyncio
import sys

from bankr_app.config import LOG_FORMAT, LOG_LEVEL
from bankr_app.cli import run_trading_bot
from bankr_app.logging_config import setup_logging

from app.strategy import Strategy


def main() -> int:
    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT)
    return asyncio.run(run_trading_bot(bot_cls=Strategy))


if __name__ == "__main__":
    sys.exit(main())
