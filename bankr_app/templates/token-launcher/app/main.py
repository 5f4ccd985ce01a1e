"""${project_name}: a Bankr token launcher on ${blockchain}."""

import asyncio
import sys

from bankr_app.config import LOG_FORMAT, LOG_LEVEL
from bankr_app.cli import run_token_launcher
from bankr_app.logging_config import setup_logging


def main() -> int:
    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT)
    return asyncio.run(run_token_launcher())


if __name__ == "__main__":
    sys.exit(main())
