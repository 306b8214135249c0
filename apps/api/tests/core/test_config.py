"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from schoolpay.core.config import DEV_JWT_SECRET, Settings


class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.port == 8080
        assert config.access_token_expire_hours == 24
        assert config.payment_amount_kobo == 500_000
        assert config.paystack_base_url == "https://api.paystack.co"

    def test_production_requires_jwt_secret(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, python_env="production", jwt_secret=DEV_JWT_SECRET)

    def test_production_with_secret(self):
        config = Settings(_env_file=None, python_env="production", jwt_secret="real-secret")

        assert config.is_production
        assert not config.is_development

    def test_webhook_secret_falls_back_to_api_key(self):
        config = Settings(_env_file=None, paystack_secret_key="sk_live_x")

        assert config.webhook_secret == "sk_live_x"

    def test_explicit_webhook_secret(self):
        config = Settings(
            _env_file=None, paystack_secret_key="sk_live_x", paystack_webhook_secret="whsec"
        )

        assert config.webhook_secret == "whsec"

    def test_cors_origins_list(self):
        config = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")

        assert config.cors_origins_list == ["http://a.test", "http://b.test"]
