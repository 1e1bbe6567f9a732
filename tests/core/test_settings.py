"""Tests for application settings."""

import pytest

from socialfeed.config.settings import Settings


def test_environment_flags() -> None:
    assert Settings(environment="development").is_development is True
    assert Settings(environment="production").is_production is True
    assert Settings(environment="testing").is_development is False


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMMENTS_PER_MINUTE", "3")
    monkeypatch.setenv("CASSANDRA_KEYSPACE", "feed_test")

    settings = Settings()

    assert settings.comments_per_minute == 3
    assert settings.cassandra_keyspace == "feed_test"


def test_only_settings_the_service_reads() -> None:
    assert not {"api_host", "api_port"} & set(Settings.model_fields)
    assert not hasattr(Settings, "is_testing")


def test_firebase_requires_path_and_bucket() -> None:
    assert Settings(firebase_enabled=True).firebase_configured is False
    assert (
        Settings(
            firebase_enabled=True,
            firebase_credentials_path="/creds.json",
            firebase_storage_bucket="bucket",
        ).firebase_configured
        is True
    )
