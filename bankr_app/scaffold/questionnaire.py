#  Bankr App Kit - Project Questionnaire
#
#  Interactive prompts for create-bankr-app: project name, template,
#  blockchain, feature checklist and git init. Input/output functions are
#  injectable so the flow can be driven from tests.
#
#  Depends on: models/enums.py, models/schemas.py
#  Used by:    cli.py

import re
from collections.abc import Callable

from bankr_app.models.enums import Blockchain, Feature, TemplateKind
from bankr_app.models.schemas import PROJECT_NAME_PATTERN, ProjectOptions

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

DEFAULT_PROJECT_NAME = "my-bankr-app"

TEMPLATE_CHOICES: list[tuple[TemplateKind, str]] = [
    (TemplateKind.TRADING_BOT, "Trading Bot - Automated trading with limit orders, DCA, and portfolio management"),
    (TemplateKind.TOKEN_LAUNCHER, "Token Launcher - Deploy and manage your own tokens with vesting and fees"),
    (TemplateKind.PORTFOLIO_TRACKER, "Portfolio Tracker - Monitor and analyze your crypto portfolio across chains"),
    (TemplateKind.ARBITRAGE_BOT, "Arbitrage Bot - Find and execute profitable arbitrage opportunities"),
    (TemplateKind.DEFI_YIELD_FARM, "DeFi Yield Farm - Automated yield farming and liquidity management"),
]

BLOCKCHAIN_CHOICES: list[tuple[Blockchain, str]] = [
    (Blockchain.BASE, "Base (Recommended) - Fast, low-cost, gas sponsorship available"),
    (Blockchain.ETHEREUM, "Ethereum - The original smart contract platform"),
    (Blockchain.POLYGON, "Polygon - Low-cost with Polymarket integration"),
    (Blockchain.UNICHAIN, "Unichain - Uniswap's native L2"),
    (Blockchain.SOLANA, "Solana - High-speed, limited gas sponsorship"),
]

FEATURE_LABELS: dict[Feature, str] = {
    Feature.ENV_CONFIG: "Environment configuration",
    Feature.TESTING: "Testing setup",
    Feature.TUTORIALS: "Interactive tutorials",
    Feature.LOGGING: "Logging and monitoring",
    Feature.ERROR_HANDLING: "Error handling",
    Feature.LIMIT_ORDERS: "Limit orders",
    Feature.DCA: "Dollar-cost averaging",
    Feature.PORTFOLIO_TRACKING: "Real-time portfolio tracking",
    Feature.PRICE_ALERTS: "Price alerts",
    Feature.VAULTING: "Token vaulting",
    Feature.VESTING: "Vesting schedules",
    Feature.FEE_MANAGEMENT: "Fee management",
    Feature.TOKEN_ANALYTICS: "Token analytics",
}

_BASE_FEATURES = [
    (Feature.ENV_CONFIG, True),
    (Feature.TESTING, True),
    (Feature.TUTORIALS, True),
    (Feature.LOGGING, True),
    (Feature.ERROR_HANDLING, True),
]

_TEMPLATE_FEATURES = {
    TemplateKind.TRADING_BOT: [
        (Feature.LIMIT_ORDERS, True),
        (Feature.DCA, False),
        (Feature.PORTFOLIO_TRACKING, True),
        (Feature.PRICE_ALERTS, False),
    ],
    TemplateKind.TOKEN_LAUNCHER: [
        (Feature.VAULTING, True),
        (Feature.VESTING, False),
        (Feature.FEE_MANAGEMENT, True),
        (Feature.TOKEN_ANALYTICS, False),
    ],
}


def available_features(template: TemplateKind) -> list[tuple[Feature, bool]]:
    """Features offered for a template, each with its default checked state."""
    return _BASE_FEATURES + _TEMPLATE_FEATURES.get(template, [])


def default_features(template: TemplateKind) -> list[Feature]:
    return [f for f, checked in available_features(template) if checked]


def validate_project_name(name: str) -> str | None:
    """Return an error message, or None if the name is usable."""
    if not name.strip():
        return "Project name is required"
    if not re.fullmatch(PROJECT_NAME_PATTERN, name):
        return "Project name can only contain letters, numbers, hyphens, and underscores"
    return None


# ---------------------------------------------------------------------------
# Prompt primitives
# ---------------------------------------------------------------------------

def _ask_text(input_fn: InputFn, output_fn: OutputFn, message: str, default: str,
              validate: Callable[[str], str | None]) -> str:
    while True:
        answer = input_fn(f"? {message} ({default}) ").strip() or default
        error = validate(answer)
        if error is None:
            return answer
        output_fn(f">> {error}")


def _ask_choice(input_fn: InputFn, output_fn: OutputFn, message: str,
                choices: list[tuple], default_index: int = 0):
    output_fn(f"? {message}")
    for i, (_, label) in enumerate(choices, start=1):
        output_fn(f"  {i}) {label}")
    while True:
        raw = input_fn(f"  Choose 1-{len(choices)} ({default_index + 1}) ").strip()
        if not raw:
            return choices[default_index][0]
        if raw.isdigit() and 1 <= int(raw) <= len(choices):
            return choices[int(raw) - 1][0]
        output_fn(f">> Please enter a number between 1 and {len(choices)}")


def _ask_checklist(input_fn: InputFn, output_fn: OutputFn, message: str,
                   options: list[tuple[Feature, bool]]) -> list[Feature]:
    output_fn(f"? {message}")
    for i, (feature, checked) in enumerate(options, start=1):
        mark = "x" if checked else " "
        output_fn(f"  [{mark}] {i}) {FEATURE_LABELS[feature]}")
    while True:
        raw = input_fn("  Numbers separated by commas (enter keeps [x] defaults) ").strip()
        if not raw:
            return [f for f, checked in options if checked]
        picks = [p.strip() for p in raw.split(",") if p.strip()]
        if all(p.isdigit() and 1 <= int(p) <= len(options) for p in picks):
            chosen = {int(p) - 1 for p in picks}
            return [f for i, (f, _) in enumerate(options) if i in chosen]
        output_fn(f">> Please enter numbers between 1 and {len(options)}")


def _ask_confirm(input_fn: InputFn, message: str, default: bool) -> bool:
    hint = "Y/n" if default else "y/N"
    raw = input_fn(f"? {message} ({hint}) ").strip().lower()
    if not raw:
        return default
    return raw in ("y", "yes")


# ---------------------------------------------------------------------------
# Full flow
# ---------------------------------------------------------------------------

def ask_project_options(
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
    *,
    project_name: str | None = None,
    template: TemplateKind | None = None,
    blockchain: Blockchain | None = None,
    features: list[Feature] | None = None,
    git_init: bool | None = None,
) -> ProjectOptions:
    """Ask for every option not already supplied (e.g. via CLI flags)."""
    if project_name is None:
        project_name = _ask_text(
            input_fn, output_fn, "What is your project called?",
            DEFAULT_PROJECT_NAME, validate_project_name,
        )
    if template is None:
        template = _ask_choice(
            input_fn, output_fn, "What type of app do you want to build?", TEMPLATE_CHOICES,
        )
    if blockchain is None:
        blockchain = _ask_choice(
            input_fn, output_fn, "Which blockchain do you prefer?", BLOCKCHAIN_CHOICES,
        )
    if features is None:
        features = _ask_checklist(
            input_fn, output_fn, "Which features would you like to include?",
            available_features(template),
        )
    if git_init is None:
        git_init = _ask_confirm(input_fn, "Initialize a git repository?", True)

    return ProjectOptions(
        project_name=project_name,
        template=template,
        blockchain=blockchain,
        features=features,
        git_init=git_init,
    )
