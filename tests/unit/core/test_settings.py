import pytest
from pydantic import ValidationError

from src.core.config.settings import Settings


def make_settings(**overrides):
    values = {"APP_ENV": "test", "SUBSCRIPTION_STORE": "memory", "CONTACT_STORES": "memory"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.mark.unit
class TestSettings:
    def test_contact_stores_are_parsed(self):
        settings = make_settings(CONTACT_STORES=" database , spreadsheet ")

        assert settings.contact_store_names == ["database", "spreadsheet"]
        assert settings.uses_store("spreadsheet")
        assert not settings.uses_store("redis")

    def test_unknown_contact_store_is_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(CONTACT_STORES="database,postgres")

    def test_unknown_subscription_store_is_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(SUBSCRIPTION_STORE="excel")

    def test_database_url_is_assembled(self):
        settings = make_settings(
            POSTGRES_USER="app", POSTGRES_PASSWORD="pw", POSTGRES_HOST="db", POSTGRES_DB="leads"
        )

        assert settings.DATABASE_URL == "postgresql+psycopg2://app:pw@db:5432/leads?sslmode=prefer"

    def test_explicit_database_url_wins(self):
        settings = make_settings(DATABASE_URL="sqlite:///./leads.db")

        assert settings.DATABASE_URL == "sqlite:///./leads.db"

    def test_redis_url_is_assembled(self):
        settings = make_settings(REDIS_HOST="cache", REDIS_PASSWORD="secret", REDIS_SSL=True)

        assert settings.REDIS_URL == "rediss://:secret@cache:6379/0"

    def test_allowed_origins_are_split(self):
        settings = make_settings(ALLOWED_ORIGINS="https://a.example, https://b.example")

        assert settings.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]

    def test_private_key_newlines_are_restored(self):
        settings = make_settings(GOOGLE_PRIVATE_KEY="-----BEGIN-----\\nabc\\n-----END-----")

        assert settings.GOOGLE_PRIVATE_KEY.get_secret_value() == "-----BEGIN-----\nabc\n-----END-----"

    def test_required_fields_follow_configured_backends(self):
        settings = make_settings(
            SUBSCRIPTION_STORE="spreadsheet", RATE_LIMIT_BACKEND="redis", RECAPTCHA_ENABLED=True
        )

        required = settings.required_fields()

        assert "GOOGLE_SHEET_ID" in required
        assert "REDIS_HOST" in required
        assert "RECAPTCHA_SECRET_KEY" in required
        assert "POSTGRES_PASSWORD" not in required

    def test_missing_fields_only_warn_outside_strict_environments(self):
        make_settings(SUBSCRIPTION_STORE="spreadsheet").validate_required_fields()

    def test_missing_fields_fail_in_production(self):
        settings = make_settings(APP_ENV="production", SUBSCRIPTION_STORE="spreadsheet", EMAIL_TEST_MODE=True)

        with pytest.raises(ValueError, match="GOOGLE_SHEET_ID"):
            settings.validate_required_fields()

    def test_test_environment_forces_email_test_mode(self):
        assert make_settings(EMAIL_TEST_MODE=False).EMAIL_TEST_MODE
