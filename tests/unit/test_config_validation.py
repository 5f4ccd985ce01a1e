#  Bankr App Kit - Config Validation Tests
#
#  Tests for validate_config() startup checks, env overrides and
#  GatewayConfig construction from settings.
#
#  Depends on: bankr_app/config.py
#  Used by:    pytest

import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest
from unittest.mock import patch

from bankr_app.config import (
    ConfigError,
    build_gateway_config,
    cfg,
    env_or_cfg,
    validate_config,
)


@pytest.fixture
def valid_settings():
    """Patch the module constants validate_config() reads to a valid set."""
    with patch("bankr_app.config.BANKR_API_KEY", "bk-test"), \
         patch("bankr_app.config.BANKR_BASE_URL", "https://api.bankr.bot"), \
         patch("bankr_app.config.MAX_TRADES_PER_HOUR", 20), \
         patch("bankr_app.config.RATE_LIMIT_WINDOW_MS", 3_600_000), \
         patch("bankr_app.config.REQUEST_TIMEOUT", 30.0), \
         patch("bankr_app.config.TRADING_LOOP_INTERVAL", 60.0), \
         patch("bankr_app.config.MIN_TRADE_AMOUNT_USD", 5.0), \
         patch("bankr_app.config.MAX_POSITION_SIZE_USD", 1000.0), \
         patch("bankr_app.config.PRICE_ALERTS_ENABLED", False):
        yield


class TestValidateConfig:
    def test_passes_with_valid_settings(self, valid_settings):
        validate_config()  # should not raise

    def test_raises_on_missing_api_key(self, valid_settings):
        with patch("bankr_app.config.BANKR_API_KEY", ""):
            with pytest.raises(ConfigError, match="BANKR_API_KEY is not set"):
                validate_config()

    def test_raises_on_bad_base_url(self, valid_settings):
        with patch("bankr_app.config.BANKR_BASE_URL", "api.bankr.bot"):
            with pytest.raises(ConfigError, match="http:// or https://"):
                validate_config()

    def test_raises_on_zero_limit(self, valid_settings):
        with patch("bankr_app.config.MAX_TRADES_PER_HOUR", 0):
            with pytest.raises(ConfigError, match="max_requests must be > 0"):
                validate_config()

    def test_raises_on_negative_window(self, valid_settings):
        with patch("bankr_app.config.RATE_LIMIT_WINDOW_MS", -1):
            with pytest.raises(ConfigError, match="window_ms must be > 0"):
                validate_config()

    def test_raises_on_zero_timeout(self, valid_settings):
        with patch("bankr_app.config.REQUEST_TIMEOUT", 0):
            with pytest.raises(ConfigError, match="request_timeout_s"):
                validate_config()

    def test_raises_when_min_trade_exceeds_max_position(self, valid_settings):
        with patch("bankr_app.config.MIN_TRADE_AMOUNT_USD", 2000.0):
            with pytest.raises(ConfigError, match="exceeds"):
                validate_config()

    def test_warns_on_alerts_without_webhook(self, valid_settings, caplog):
        with patch("bankr_app.config.PRICE_ALERTS_ENABLED", True), \
             patch("bankr_app.config.ALERT_WEBHOOK_URL", ""):
            with caplog.at_level(logging.WARNING):
                validate_config()
            assert "ALERT_WEBHOOK_URL is not set" in caplog.text


class TestEnvOrCfg:
    def test_env_value_wins(self, monkeypatch):
        monkeypatch.setenv("BANKR_TEST_VALUE", "42")
        assert env_or_cfg("BANKR_TEST_VALUE", "nowhere.key", 7, int) == 42

    def test_empty_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("BANKR_TEST_VALUE", "")
        assert env_or_cfg("BANKR_TEST_VALUE", "nowhere.key", 7, int) == 7

    def test_bool_cast(self, monkeypatch):
        monkeypatch.setenv("BANKR_TEST_VALUE", "false")
        assert env_or_cfg("BANKR_TEST_VALUE", "nowhere.key", True, bool) is False
        monkeypatch.setenv("BANKR_TEST_VALUE", "Yes")
        assert env_or_cfg("BANKR_TEST_VALUE", "nowhere.key", False, bool) is True

    def test_bad_cast_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("BANKR_TEST_VALUE", "many")
        with pytest.raises(ConfigError, match="BANKR_TEST_VALUE"):
            env_or_cfg("BANKR_TEST_VALUE", "nowhere.key", 7, int)

    def test_cfg_dot_path(self):
        with patch("bankr_app.config._config", {"rate_limit": {"max_requests": 5}}):
            assert cfg("rate_limit.max_requests") == 5
            assert cfg("rate_limit.missing", "d") == "d"
            assert cfg("rate_limit.max_requests.deeper", None) is None


class TestBuildGatewayConfig:
    def test_reflects_settings(self, valid_settings):
        with patch("bankr_app.config.CHARGE_ON_FAILURE", False):
            config = build_gateway_config()
        assert config.endpoint_base_url == "https://api.bankr.bot"
        assert config.auth_token == "bk-test"
        assert config.max_requests_per_window == 20
        assert config.window_duration_ms == 3_600_000
        assert config.charge_on_failure is False


# ---------------------------------------------------------------------------
# .env loading (runs in a fresh interpreter: settings are read at import)
# ---------------------------------------------------------------------------

REPO_ROOT = Path(__file__).resolve().parents[2]


def _import_setting(cwd: Path, name: str, **env_overrides) -> str:
    env = {k: v for k, v in os.environ.items()
           if k not in ("BANKR_API_KEY", "BANKR_ENV_FILE", "BANKR_CONFIG", "MAX_TRADES_PER_HOUR")}
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.update(env_overrides)
    result = subprocess.run(
        [sys.executable, "-c", f"import bankr_app.config as c; print(c.{name})"],
        cwd=str(cwd), env=env, capture_output=True, text=True, timeout=60,
    )
    assert result.returncode == 0, result.stderr
    return result.stdout.strip()


class TestDotenv:
    def test_env_file_in_cwd_supplies_api_key(self, tmp_path):
        (tmp_path / ".env").write_text("BANKR_API_KEY=bk-from-dotenv\n")
        assert _import_setting(tmp_path, "BANKR_API_KEY") == "bk-from-dotenv"

    def test_env_file_feeds_typed_settings(self, tmp_path):
        (tmp_path / ".env").write_text("MAX_TRADES_PER_HOUR=7\n")
        assert _import_setting(tmp_path, "MAX_TRADES_PER_HOUR") == "7"

    def test_process_env_wins_over_file(self, tmp_path):
        (tmp_path / ".env").write_text("BANKR_API_KEY=bk-from-dotenv\n")
        assert _import_setting(tmp_path, "BANKR_API_KEY", BANKR_API_KEY="bk-exported") == "bk-exported"

    def test_custom_env_file_path(self, tmp_path):
        (tmp_path / "bankr.env").write_text("BANKR_API_KEY=bk-custom\n")
        assert _import_setting(tmp_path, "BANKR_API_KEY", BANKR_ENV_FILE="bankr.env") == "bk-custom"

    def test_missing_env_file_is_fine(self, tmp_path):
        assert _import_setting(tmp_path, "BANKR_API_KEY") == ""
