#  Bankr App Kit - Command Line Interface
#
#  create-bankr-app entry point plus the runners generated projects call:
#    create          scaffold a new project (interactive unless --yes)
#    trading-bot     initialize, show portfolio, run the trading loop
#    token-launcher  initialize, show the demo token configuration
#    console         send instructions typed at a prompt
#    check           connectivity probe only
#
#  Depends on: config.py, container.py, logging_config.py, scaffold/*
#  Used by:    run.py, templates/*/app/main.py

import argparse
import asyncio
import signal
import sys
from contextlib import AsyncExitStack
from pathlib import Path

from dependency_injector import providers

from bankr_app.config import LOG_FORMAT, LOG_LEVEL, ConfigError, validate_config
from bankr_app.container import Container
from bankr_app.exceptions import (
    BankrAppError,
    GatewayError,
    InvalidProjectNameError,
    RateLimitExceeded,
)
from bankr_app.logging_config import set_app_name, setup_logging
from bankr_app.models.enums import Blockchain, Feature, TemplateKind
from bankr_app.scaffold.questionnaire import (
    DEFAULT_PROJECT_NAME,
    ask_project_options,
    default_features,
    validate_project_name,
)
from bankr_app.services.trading_bot import TradingBot

_RED = "\033[31m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

SETUP_HELP = (
    "Setup Help:\n"
    "1. Get your API key from https://bankr.bot/api\n"
    "2. Add it to your .env file as BANKR_API_KEY\n"
    "3. Run the check command to verify your setup"
)


def _color(text: str, code: str) -> str:
    if sys.stderr.isatty():
        return f"{code}{text}{_RESET}"
    return text


def _is_credential_problem(message: str) -> bool:
    lowered = message.lower()
    return "api key" in lowered or "401" in lowered or "unauthorized" in lowered


def report_failure(prefix: str, error: Exception) -> int:
    """Print a failure (plus setup help for credential problems). Returns 1."""
    message = str(error)
    print(_color(f"{prefix}: {message}", _RED), file=sys.stderr)
    if _is_credential_problem(message):
        print(_color(SETUP_HELP, _YELLOW), file=sys.stderr)
    return 1


# ---------------------------------------------------------------------------
# Agent runners
# ---------------------------------------------------------------------------

async def _wait_for_shutdown():
    """Block until SIGINT/SIGTERM."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows: KeyboardInterrupt still ends asyncio.run
            pass
    await stop.wait()


async def run_trading_bot(container: Container | None = None, bot_cls=TradingBot) -> int:
    container = container or Container()
    if bot_cls is not TradingBot:
        # Strategy subclasses reuse the container's gateway and window
        container.trading_bot.override(providers.Singleton(bot_cls, gateway=container.gateway))
    set_app_name("trading-bot")
    try:
        validate_config()
        async with AsyncExitStack() as stack:
            stack.push_async_callback(container.http_client().aclose)
            bot = container.trading_bot()

            print(f"Bankr Trading Bot - trading on {bot.default_chain}")
            await bot.initialize()

            portfolio = await bot.get_portfolio()
            print(f"Portfolio:\n{portfolio.raw_response}")

            await bot.start_trading_loop()
            stack.push_async_callback(bot.stop_trading_loop)
            await _wait_for_shutdown()
            print("Shutting down trading bot gracefully...")
    except (BankrAppError, ConfigError) as e:
        return report_failure("Error starting trading bot", e)
    return 0


async def run_token_launcher(container: Container | None = None) -> int:
    container = container or Container()
    set_app_name("token-launcher")
    try:
        validate_config()
        async with AsyncExitStack() as stack:
            stack.push_async_callback(container.http_client().aclose)
            launcher = container.token_launcher()
            await launcher.initialize()

            demo = launcher.demo_token()
            print("Demo token configuration:")
            print(f"   Name: {demo.name}")
            print(f"   Symbol: {demo.symbol}")
            print(f"   Chain: {demo.chain}")
            print(f"   Supply: {demo.supply}")
            print(f"   Decimals: {demo.decimals}")
            print(f"   Vault: {demo.vault_percentage:g}%")
            print(f"   Vesting: {demo.vesting_days} days")
            if demo.fee_recipient:
                print(f"   Fees: {demo.fee_percentage:g}% to {demo.fee_recipient}")
            print("This is a demo - no real token will be deployed.")
    except (BankrAppError, ConfigError) as e:
        return report_failure("Error starting token launcher", e)
    return 0


async def run_console(container: Container | None = None, input_fn=input) -> int:
    """Read instructions line by line and print the agent's answers."""
    container = container or Container()
    set_app_name("console")
    try:
        validate_config()
        async with AsyncExitStack() as stack:
            stack.push_async_callback(container.http_client().aclose)
            gateway = container.gateway()
            await gateway.verify_connectivity()
            print("Connected. Type an instruction, or 'exit' to quit.")
            while True:
                try:
                    line = (await asyncio.to_thread(input_fn, "> ")).strip()
                except EOFError:
                    break
                if line.lower() in ("exit", "quit"):
                    break
                if not line:
                    continue
                try:
                    print(await gateway.submit(line))
                except RateLimitExceeded as e:
                    print(_color(str(e), _YELLOW), file=sys.stderr)
                except GatewayError as e:
                    # one failed instruction does not end the session
                    report_failure("Request failed", e)
    except (BankrAppError, ConfigError) as e:
        return report_failure("Console error", e)
    return 0


async def run_check(container: Container | None = None) -> int:
    container = container or Container()
    try:
        validate_config()
        async with AsyncExitStack() as stack:
            stack.push_async_callback(container.http_client().aclose)
            await container.gateway().verify_connectivity()
    except (BankrAppError, ConfigError) as e:
        return report_failure("Connectivity check failed", e)
    print("Connection successful!")
    return 0


# ---------------------------------------------------------------------------
# Scaffolding
# ---------------------------------------------------------------------------

def _parse_features(raw: str | None) -> list[Feature] | None:
    if raw is None:
        return None
    return [Feature(part.strip()) for part in raw.split(",") if part.strip()]


def cmd_create(args, container: Container | None = None, input_fn=None) -> int:
    container = container or Container()
    input_fn = input_fn or input
    template = TemplateKind(args.template) if args.template else None
    blockchain = Blockchain(args.blockchain) if args.blockchain else None
    git_init = False if args.no_git else None
    try:
        features = _parse_features(args.features)
    except ValueError as e:
        return report_failure("Invalid --features", e)

    if args.project_name is not None:
        error = validate_project_name(args.project_name)
        if error:
            return report_failure("Invalid project name", InvalidProjectNameError(error))

    if args.yes:
        template = template or TemplateKind.TRADING_BOT
        options = ask_project_options(
            input_fn,
            project_name=args.project_name or DEFAULT_PROJECT_NAME,
            template=template,
            blockchain=blockchain or Blockchain.BASE,
            features=features if features is not None else default_features(template),
            git_init=True if git_init is None else git_init,
        )
    else:
        print("Welcome to Create Bankr App!")
        options = ask_project_options(
            input_fn,
            project_name=args.project_name,
            template=template,
            blockchain=blockchain,
            features=features,
            git_init=git_init,
        )

    generator = container.project_generator()
    try:
        project_path = generator.create(options, Path(args.directory))
    except BankrAppError as e:
        return report_failure("Failed to create project", e)

    print(f"""
Your {options.template.value} is ready!

Project location: {project_path}

Next steps:
   cd {options.project_name}
   python -m venv .venv && . .venv/bin/activate
   pip install -e .[test]
   cp .env.example .env
   {options.project_name}

Need help? Read the README.md in your project or visit https://docs.bankr.bot/
""")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-bankr-app",
        description="Scaffold and run Bankr agent apps",
    )
    sub = parser.add_subparsers(dest="command")

    create = sub.add_parser("create", help="Create a new project")
    create.add_argument("project_name", nargs="?", default=None)
    create.add_argument("--template", choices=[t.value for t in TemplateKind])
    create.add_argument("--blockchain", choices=[b.value for b in Blockchain])
    create.add_argument("--features", help="Comma-separated feature list")
    create.add_argument("--no-git", action="store_true", help="Skip git initialization")
    create.add_argument("--yes", "-y", action="store_true", help="Accept defaults, no prompts")
    create.add_argument("--directory", default=".", help="Where to create the project")

    sub.add_parser("trading-bot", help="Run the trading bot")
    sub.add_parser("token-launcher", help="Run the token launcher demo")
    sub.add_parser("console", help="Interactive instruction prompt")
    sub.add_parser("check", help="Verify API key and connectivity")
    return parser


_RUNNERS = {
    "trading-bot": run_trading_bot,
    "token-launcher": run_token_launcher,
    "console": run_console,
    "check": run_check,
}


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # `create-bankr-app my-app` behaves like `create-bankr-app create my-app`
    if not argv or (argv[0] not in _RUNNERS and argv[0] not in ("create", "-h", "--help")):
        argv.insert(0, "create")
    args = build_parser().parse_args(argv)
    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT)

    if args.command == "create":
        try:
            return cmd_create(args)
        except (EOFError, KeyboardInterrupt):
            print(_color("Cancelled", _YELLOW), file=sys.stderr)
            return 1
    return asyncio.run(_RUNNERS[args.command]())


if __name__ == "__main__":
    sys.exit(main())
