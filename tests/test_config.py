"""Unit tests for environment resolution and settings loading."""

import pytest

from paylink_payments import (
    ConfigurationError,
    Environment,
    EnvironmentConfig,
    GatewayCredentials,
    load_client_settings,
)
from paylink_payments.core.config import (
    DEFAULT_TEST_API_ID,
    DEFAULT_TEST_SECRET_KEY,
    Actor,
)
from paylink_payments.core.environment import build_environment


class TestEnvironmentParse:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("production", Environment.PRODUCTION),
            (Environment.PRODUCTION, Environment.PRODUCTION),
            ("test", Environment.TEST),
            ("Production", Environment.TEST),
            ("prod", Environment.TEST),
            ("local", Environment.TEST),
            (None, Environment.TEST),
        ],
    )
    def test_only_literal_production_selects_production(self, value, expected):
        assert Environment.parse(value) is expected


class TestResolve:

    def test_sandbox_defaults(self):
        config = EnvironmentConfig.resolve("test")

        assert config.api_base_url == "https://restpilot.paylink.sa"
        assert config.payment_page_base_url == "https://paymentpilot.paylink.sa/pay/info"
        assert config.api_id == DEFAULT_TEST_API_ID
        assert config.secret_key == DEFAULT_TEST_SECRET_KEY
        assert config.persist_token is False

    def test_sandbox_keeps_supplied_credentials(self):
        config = EnvironmentConfig.resolve(None, GatewayCredentials.merchant("MY_APP", None))

        assert config.api_id == "MY_APP"
        assert config.secret_key == DEFAULT_TEST_SECRET_KEY

    def test_production(self):
        config = EnvironmentConfig.resolve(
            "production",
            GatewayCredentials.merchant("APP", "SECRET", persist_token=True),
        )

        assert config.api_base_url == "https://restapi.paylink.sa"
        assert config.payment_page_url("99") == "https://payment.paylink.sa/pay/order/99"
        assert config.authentication_body() == {
            "apiId": "APP",
            "secretKey": "SECRET",
            "persistToken": True,
        }

    @pytest.mark.parametrize("api_id, secret", [(None, "SECRET"), ("APP", None), (None, None)])
    def test_production_requires_both_credentials(self, api_id, secret):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvironmentConfig.resolve("production", GatewayCredentials.merchant(api_id, secret))

        assert "missing credentials for production" in str(exc_info.value)

    def test_partner_requires_credentials_in_sandbox(self):
        with pytest.raises(ConfigurationError):
            EnvironmentConfig.resolve("test", GatewayCredentials.partner("PROFILE", None))

    def test_partner_authentication_body(self):
        config = EnvironmentConfig.resolve("test", GatewayCredentials.partner("PROFILE", "KEY"))

        assert config.auth_path == "/api/partner/auth"
        assert config.authentication_body() == {
            "profileNo": "PROFILE",
            "apiKey": "KEY",
            "persistToken": False,
        }

    def test_repr_hides_secret(self):
        credentials = GatewayCredentials.merchant("APP", "very-secret")
        config = EnvironmentConfig.resolve("production", credentials)

        assert "very-secret" not in repr(credentials)
        assert "very-secret" not in repr(config)


class TestBuildEnvironment:

    def test_env_file_does_not_override_base(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\nPAYLINK_A=from-file\nexport PAYLINK_B='quoted'\nbroken line\n",
            encoding="utf-8",
        )

        environment = build_environment(
            env_file=str(env_file),
            base={"PAYLINK_A": "from-base"},
            overrides={"PAYLINK_C": "override"},
        )

        assert environment.get("PAYLINK_A") == "from-base"
        assert environment.get("PAYLINK_B") == "quoted"
        assert environment.get("PAYLINK_C") == "override"

    def test_missing_file_is_ignored(self, tmp_path):
        environment = build_environment(env_file=str(tmp_path / "absent"), base={})
        assert dict(environment.variables) == {}

    def test_blank_values_read_as_unset(self):
        environment = build_environment(env_file=None, base={"KEY": ""})
        assert environment.get("KEY", "fallback") == "fallback"


class TestLoadClientSettings:

    def test_zero_config_sandbox(self):
        settings = load_client_settings(env_file=None, base={})

        assert settings.environment is Environment.TEST
        assert settings.credentials.actor is Actor.MERCHANT
        assert settings.credentials.key_id is None
        assert settings.timeout_seconds == 30.0
        assert settings.resolve().api_id == DEFAULT_TEST_API_ID

    def test_production_merchant_from_variables(self):
        settings = load_client_settings(
            env_file=None,
            base={
                "PAYLINK_ENVIRONMENT": "production",
                "PAYLINK_PRODUCTION_APP_ID": "APP",
                "PAYLINK_PRODUCTION_SECRET_KEY": "SECRET",
                "PAYLINK_PRODUCTION_PERSIST_TOKEN": "true",
                "PAYLINK_TIMEOUT_SECONDS": "12.5",
            },
        )

        config = settings.resolve()
        assert config.environment is Environment.PRODUCTION
        assert config.api_id == "APP"
        assert config.persist_token is True
        assert settings.timeout_seconds == 12.5

    def test_partner_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "PAYLINK_TESTING_PROFILE_NO=P-1\nPAYLINK_TESTING_API_KEY=K-1\n",
            encoding="utf-8",
        )

        settings = load_client_settings(actor="partner", env_file=str(env_file), base={})

        assert settings.credentials.actor is Actor.PARTNER
        assert settings.credentials.key_id == "P-1"
        assert settings.credentials.secret == "K-1"

    def test_keyword_arguments_win(self):
        settings = load_client_settings(
            environment="production",
            key_id="EXPLICIT",
            secret="S",
            persist_token=False,
            env_file=None,
            base={"PAYLINK_PRODUCTION_APP_ID": "FROM_ENV", "PAYLINK_PRODUCTION_PERSIST_TOKEN": "yes"},
        )

        assert settings.credentials.key_id == "EXPLICIT"
        assert settings.credentials.persist_token is False

    def test_production_without_credentials_fails_on_resolve(self):
        settings = load_client_settings(environment="production", env_file=None, base={})
        with pytest.raises(ConfigurationError):
            settings.resolve()

    @pytest.mark.parametrize(
        "variables",
        [
            {"PAYLINK_TESTING_PERSIST_TOKEN": "maybe"},
            {"PAYLINK_TIMEOUT_SECONDS": "soon"},
            {"PAYLINK_TIMEOUT_SECONDS": "0"},
        ],
    )
    def test_invalid_values(self, variables):
        with pytest.raises(ConfigurationError):
            load_client_settings(env_file=None, base=variables)
