#  Bankr App Kit - Project Generator
#
#  Materializes a new project directory: template files, pyproject.toml,
#  environment-config stubs, .gitignore, optional tutorial script and an
#  optional git repository.
#
#  Depends on: config.py, models/*, scaffold/git_init.py, exceptions.py
#  Used by:    container.py, cli.py

import json
import logging
import shutil
from pathlib import Path
from string import Template

from bankr_app.config import TEMPLATES_ROOT
from bankr_app.exceptions import GitInitError, ProjectExistsError, TemplateNotFoundError
from bankr_app.models.enums import Feature, TemplateKind
from bankr_app.models.schemas import ProjectOptions
from bankr_app.scaffold.git_init import init_git_repo

logger = logging.getLogger("bankr.scaffold")

# Templates without a dedicated directory share the generic agent client
SHARED_TEMPLATE = "agent-client"

# Only these files get ${placeholder} substitution
_SUBSTITUTED_SUFFIXES = {".py", ".md", ".toml", ".json", ".txt"}

KIT_DISTRIBUTION = "bankr-app-kit"

_TUTORIAL_STEPS = {
    TemplateKind.TRADING_BOT: ["Execute your first trade", "Set up portfolio tracking"],
    TemplateKind.TOKEN_LAUNCHER: ["Deploy your first token", "Configure fee management"],
    TemplateKind.PORTFOLIO_TRACKER: ["Add your wallet addresses", "View portfolio analytics"],
    TemplateKind.ARBITRAGE_BOT: ["Configure DEX connections", "Execute first arbitrage"],
    TemplateKind.DEFI_YIELD_FARM: ["Connect to DeFi protocols", "Start automated farming"],
}

_GITIGNORE = """\
# Byte-compiled / cache
__pycache__/
*.py[cod]
.pytest_cache/
.mypy_cache/

# Virtual environments
.venv/
venv/

# Environment variables
.env
.env.local
config.json

# Build outputs
dist/
build/
*.egg-info/

# Logs
logs
*.log

# IDE
.vscode/
.idea/
*.swp
*.swo

# OS
.DS_Store
Thumbs.db
"""


def template_dir_for(kind: TemplateKind, templates_root: Path = TEMPLATES_ROOT) -> Path:
    """Dedicated template directory if present, else the shared one."""
    dedicated = templates_root / kind.value
    if dedicated.is_dir():
        return dedicated
    shared = templates_root / SHARED_TEMPLATE
    if shared.is_dir():
        return shared
    raise TemplateNotFoundError(f"Template directory not found: {dedicated}")


def _substitutions(options: ProjectOptions) -> dict[str, str]:
    return {
        "project_name": options.project_name,
        "template": options.template.value,
        "blockchain": options.blockchain.value,
    }


# ---------------------------------------------------------------------------
# File renderers
# ---------------------------------------------------------------------------

def render_pyproject(options: ProjectOptions) -> str:
    """pyproject.toml for the generated project."""
    name = options.project_name
    keywords = ", ".join(f'"{k}"' for k in ["bankr", "crypto", options.template.value, options.blockchain.value])
    lines = [
        "[build-system]",
        'requires = ["setuptools>=68"]',
        'build-backend = "setuptools.build_meta"',
        "",
        "[project]",
        f'name = "{name}"',
        'version = "1.0.0"',
        f'description = "A {options.template.value} built with Bankr"',
        'requires-python = ">=3.10"',
        f'dependencies = ["{KIT_DISTRIBUTION}"]',
        f"keywords = [{keywords}]",
        'authors = [{name = "Bankr Developer"}]',
        'license = {text = "MIT"}',
        "",
        "[project.scripts]",
        f'{name} = "app.main:main"',
    ]
    if options.has(Feature.TUTORIALS):
        lines.append(f'{name}-tutorial = "tutorials.start:main"')
    if options.has(Feature.TESTING):
        lines += [
            "",
            "[project.optional-dependencies]",
            'test = ["pytest>=8", "pytest-asyncio>=0.23"]',
            "",
            "[tool.pytest.ini_options]",
            'asyncio_mode = "auto"',
            'testpaths = ["tests"]',
            'pythonpath = ["."]',
        ]
    packages = ["app*"]
    if options.has(Feature.TUTORIALS):
        packages.append("tutorials*")
    lines += [
        "",
        "[tool.setuptools.packages.find]",
        "include = [" + ", ".join(f'"{p}"' for p in packages) + "]",
    ]
    return "\n".join(lines) + "\n"


def render_env_example(options: ProjectOptions) -> str:
    return f"""\
# Bankr API Configuration
# Get your API key from https://bankr.bot/api
BANKR_API_KEY=your_api_key_here
BANKR_BASE_URL=https://api.bankr.bot

# Project Configuration
PROJECT_NAME={options.project_name}
TEMPLATE={options.template.value}
BLOCKCHAIN={options.blockchain.value}

# Trading Configuration (if applicable)
DEFAULT_CHAIN={options.blockchain.value}
TRADE_AMOUNT_USD=10
MAX_TRADES_PER_HOUR=20
MIN_TRADE_AMOUNT_USD=5
MAX_POSITION_SIZE_USD=1000

# Token Configuration (if applicable)
TOKEN_NAME=MyToken
TOKEN_SYMBOL=MTK
TOKEN_VAULT_PERCENTAGE=20
TOKEN_VESTING_DAYS=30

# Logging
LOG_LEVEL=INFO
LOG_FORMAT=text
"""


def render_config_example(options: ProjectOptions) -> str:
    data = {
        "bankr": {"base_url": "https://api.bankr.bot", "request_timeout_s": 30},
        "rate_limit": {"max_requests": 20, "window_ms": 3_600_000, "charge_on_failure": True},
        "trading": {
            "default_chain": options.blockchain.value,
            "trade_amount_usd": 10,
            "min_trade_amount_usd": 5,
            "max_position_size_usd": 1000,
            "loop_interval_s": 60,
        },
        "alerts": {"price_alerts_enabled": options.has(Feature.PRICE_ALERTS), "webhook_url": ""},
        "logging": {
            "level": "INFO",
            "format": "json" if options.has(Feature.LOGGING) else "text",
        },
    }
    return json.dumps(data, indent=2) + "\n"


def render_tutorial(options: ProjectOptions) -> str:
    """Interactive walkthrough written to tutorials/start.py."""
    steps = [
        "Set up your API key",
        "Test your connection",
        "Make your first API call",
        "Learn advanced features",
    ] + _TUTORIAL_STEPS.get(options.template, [])
    step_lines = "\n".join(f"    {i}. {s}" for i, s in enumerate(steps, start=1))
    kind = options.template.value
    return f'''\
"""Interactive tutorial for your {kind}.

Run with: python -m tutorials.start
"""

import asyncio
import os
import sys

STEPS = """
{step_lines}
"""


def confirm(message: str, default: bool) -> bool:
    hint = "Y/n" if default else "y/N"
    raw = input(f"? {{message}} ({{hint}}) ").strip().lower()
    return default if not raw else raw in ("y", "yes")


async def check_connection() -> bool:
    from bankr_app.config import build_gateway_config
    from bankr_app.exceptions import GatewayError
    from bankr_app.services.gateway import AgentGateway

    async with AgentGateway(build_gateway_config()) as gateway:
        try:
            await gateway.verify_connectivity()
        except GatewayError as e:
            print(f"Connection failed: {{e}}")
            return False
    return True


def main() -> int:
    print("Welcome to your {kind} tutorial!")
    if not confirm("Ready to start learning how to use your Bankr app?", True):
        print("When you're ready, run the tutorial again!")
        return 0

    print("Tutorial Steps:" + STEPS)
    print("Let's begin with step 1: Setting up your API key")
    if not os.environ.get("BANKR_API_KEY") and not confirm(
        "Have you added your BANKR_API_KEY to the .env file?", False
    ):
        print("Visit https://bankr.bot/api to get your API key")
        print("Add it to your .env file as BANKR_API_KEY=your_key_here")
        print("Run the tutorial again when you're ready to continue!")
        return 0

    print("Great! Now let's test your connection...")
    if not asyncio.run(check_connection()):
        return 1
    print("Connection successful!")
    print("Your {kind} is ready to use!")
    print("Check the README.md for more advanced usage examples")
    print("Visit https://docs.bankr.bot/ for full documentation")
    return 0


if __name__ == "__main__":
    sys.exit(main())
'''


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class ProjectGenerator:
    """Creates a project directory from ProjectOptions."""

    def __init__(self, *, templates_root: Path = TEMPLATES_ROOT, git_init=init_git_repo):
        self._templates_root = Path(templates_root)
        self._git_init = git_init

    def create(self, options: ProjectOptions, dest_root: Path) -> Path:
        """Generate the project under dest_root/<project_name>. Returns its path.

        Raises:
            ProjectExistsError: target exists and is not empty.
            TemplateNotFoundError: no template directory for the kind.
        """
        project_path = Path(dest_root) / options.project_name
        if project_path.exists() and (not project_path.is_dir() or any(project_path.iterdir())):
            raise ProjectExistsError(f"Project directory already exists: {project_path}")

        template_dir = template_dir_for(options.template, self._templates_root)
        logger.info("Creating %s from %s", project_path, template_dir.name)

        self._copy_template(template_dir, project_path, _substitutions(options))
        (project_path / "pyproject.toml").write_text(render_pyproject(options))
        (project_path / ".env.example").write_text(render_env_example(options))
        (project_path / "config.example.json").write_text(render_config_example(options))
        (project_path / ".gitignore").write_text(_GITIGNORE)

        if options.has(Feature.TUTORIALS):
            tutorials = project_path / "tutorials"
            tutorials.mkdir(exist_ok=True)
            (tutorials / "__init__.py").write_text("")
            (tutorials / "start.py").write_text(render_tutorial(options))

        if not options.has(Feature.TESTING):
            shutil.rmtree(project_path / "tests", ignore_errors=True)

        if options.git_init:
            # Not critical: the project is usable without a repository
            try:
                self._git_init(project_path)
            except GitInitError as e:
                logger.warning("Git initialization failed (continuing): %s", e)

        return project_path

    @staticmethod
    def _copy_template(template_dir: Path, project_path: Path, values: dict[str, str]):
        shutil.copytree(
            template_dir, project_path, dirs_exist_ok=True,
            ignore=shutil.ignore_patterns("__pycache__", "*.pyc"),
        )
        for path in project_path.rglob("*"):
            if path.is_file() and path.suffix in _SUBSTITUTED_SUFFIXES:
                text = path.read_text()
                path.write_text(Template(text).safe_substitute(values))
