#  Bankr App Kit - DI Container Tests
#
#  Depends on: bankr_app/container.py
#  Used by:    pytest

from unittest.mock import patch

from dependency_injector import providers

from bankr_app.container import Container
from bankr_app.scaffold.generator import ProjectGenerator
from bankr_app.services.gateway import AgentGateway
from bankr_app.services.token_launcher import TokenLauncher
from bankr_app.services.trading_bot import TradingBot


class TestContainer:
    async def test_gateway_built_from_settings(self):
        container = Container()
        with patch("bankr_app.config.BANKR_API_KEY", "bk-live"), \
             patch("bankr_app.config.MAX_TRADES_PER_HOUR", 7):
            gateway = container.gateway()
        try:
            assert isinstance(gateway, AgentGateway)
            assert gateway.config.auth_token == "bk-live"
            assert gateway.config.max_requests_per_window == 7
            # one gateway (and one window) per container
            assert container.gateway() is gateway
        finally:
            await container.http_client().aclose()

    def test_clients_share_gateway(self, mock_gateway):
        container = Container()
        container.gateway.override(providers.Object(mock_gateway))
        try:
            bot = container.trading_bot()
            launcher = container.token_launcher()
            assert isinstance(bot, TradingBot)
            assert isinstance(launcher, TokenLauncher)
            assert bot._gateway is mock_gateway
            assert launcher._gateway is mock_gateway
        finally:
            container.gateway.reset_override()

    def test_project_generator_is_factory(self):
        container = Container()
        first = container.project_generator()
        assert isinstance(first, ProjectGenerator)
        assert container.project_generator() is not first
