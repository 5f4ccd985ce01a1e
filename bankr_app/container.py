#  Bankr App Kit - Dependency Injection Container
#
#  DeclarativeContainer wiring the gateway, the clients built on it and the
#  project generator. Replaces module-level singletons with injectable
#  providers.
#
#  Depends on: config.py, services/*, scaffold/generator.py
#  Used by:    cli.py

import httpx
from dependency_injector import containers, providers

from bankr_app.config import REQUEST_TIMEOUT, build_gateway_config
from bankr_app.scaffold.generator import ProjectGenerator
from bankr_app.services.gateway import AgentGateway
from bankr_app.services.token_launcher import TokenLauncher
from bankr_app.services.trading_bot import TradingBot


class Container(containers.DeclarativeContainer):
    """DI container for Bankr App Kit.

    Gateway and clients are Singletons: one sliding window per process.
    Tests override them via container.xxx.override(providers.Object(mock)).
    """

    # --- Core ---
    gateway_config = providers.Singleton(build_gateway_config)
    http_client = providers.Singleton(httpx.AsyncClient, timeout=REQUEST_TIMEOUT)
    gateway = providers.Singleton(AgentGateway, config=gateway_config, http_client=http_client)

    # --- Clients ---
    trading_bot = providers.Singleton(TradingBot, gateway=gateway)
    token_launcher = providers.Singleton(TokenLauncher, gateway=gateway)

    # --- Scaffolding ---
    project_generator = providers.Factory(ProjectGenerator)
