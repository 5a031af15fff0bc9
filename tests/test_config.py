"""Tests for environment-driven settings."""

import pytest

from queuebot.config import Settings


@pytest.fixture
def env(monkeypatch):
    for name in (
        "DISCORD_BOT_TOKEN",
        "DISCORD_GUILD_ID",
        "DATABASE_URL",
        "LOG_LEVEL",
        "VALIDATION_DELAY",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_reads_environment(env):
    env.setenv("DISCORD_BOT_TOKEN", "token")
    env.setenv("DISCORD_GUILD_ID", "1234")
    env.setenv("DATABASE_URL", "postgresql://localhost:6543/queue")
    env.setenv("VALIDATION_DELAY", "2.5")

    settings = Settings(_env_file=None)

    assert settings.discord_bot_token == "token"
    assert settings.discord_guild_id == 1234
    assert settings.database_url.endswith(":6543/queue")
    assert settings.validation_delay == 2.5


def test_log_level_is_normalized(env):
    env.setenv("LOG_LEVEL", "debug")
    assert Settings(_env_file=None).log_level == "DEBUG"


def test_invalid_log_level_falls_back_to_info(env):
    env.setenv("LOG_LEVEL", "chatty")
    assert Settings(_env_file=None).log_level == "INFO"


def test_negative_validation_delay_is_rejected(env):
    env.setenv("VALIDATION_DELAY", "-1")
    with pytest.raises(ValueError):
        Settings(_env_file=None)
