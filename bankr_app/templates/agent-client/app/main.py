"""${project_name}: a Bankr ${template} on ${blockchain}.

Starts an interactive prompt: each line is sent to the Bankr agent and the
answer printed. Build your own logic on top of AgentGateway.submit().
"""

import asyncio
import sys

from bankr_app.config import LOG_FORMAT, LOG_LEVEL
from bankr_app.cli import run_console
from bankr_app.logging_config import setup_logging


def main() -> int:
    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT)
    return asyncio.run(run_console())


if __name__ == "__main__":
    sys.exit(main())
