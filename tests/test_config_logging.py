import json
import logging

import pytest

from stronghold_bot.config import load_settings
from stronghold_bot.errors import ConfigurationError
from stronghold_bot.logging_config import get_logger, setup_logging

ENV_VARS = (
    "DISCORD_BOT_TOKEN",
    "STRONGHOLD_GUILD_ID",
    "STRONGHOLD_EXPORT_PATH",
    "STRONGHOLD_UPDATE_INTERVAL",
    "STRONGHOLD_COMMAND_PREFIX",
    "STRONGHOLD_CLIENT_ID",
    "STRONGHOLD_OAUTH_TOKENS",
    "STRONGHOLD_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path, data) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_defaults_from_environment(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc123")
    s = load_settings()
    assert s.token == "abc123"
    assert s.guild_id is None
    assert s.export_path == "discord_users.xml"
    assert s.update_interval_minutes == 5
    assert s.command_prefix == "!"
    assert s.channel_role_map == {}
    assert s.client_id is None
    assert s.log_file is None

    # empty token environment
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "")
    s2 = load_settings()
    assert s2.token == ""


def test_config_file(tmp_path):
    path = write_config(
        tmp_path,
        {
            "token": "file-token",
            "guildId": "123456789012345678",
            "xmlFilePath": "/srv/export/users.xml",
            "updateIntervalMinutes": 10,
            "commandPrefix": "?",
            "channelRoleMap": {"501": "101", "502": 102},
            "clientId": 987654321,
            "logFile": "bot.log",
        },
    )
    s = load_settings(path)
    assert s.token == "file-token"
    assert s.guild_id == 123456789012345678
    assert s.export_path == "/srv/export/users.xml"
    assert s.update_interval_minutes == 10
    assert s.command_prefix == "?"
    assert s.channel_role_map == {501: 101, 502: 102}
    assert s.client_id == "987654321"
    assert s.log_file == "bot.log"


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = write_config(tmp_path, {"token": "file-token", "updateIntervalMinutes": 10})
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "env-token")
    monkeypatch.setenv("STRONGHOLD_UPDATE_INTERVAL", "2")
    s = load_settings(path)
    assert s.token == "env-token"
    assert s.update_interval_minutes == 2


@pytest.mark.parametrize(
    "data",
    [
        {"updateIntervalMinutes": -1},
        {"updateIntervalMinutes": "soon"},
        {"channelRoleMap": ["501"]},
        {"channelRoleMap": {"general": "101"}},
        {"guildId": "my-guild"},
        {"commandPrefix": "   "},
        {"requestTimeoutSeconds": 0},
    ],
)
def test_invalid_values(tmp_path, data):
    with pytest.raises(ConfigurationError):
        load_settings(write_config(tmp_path, data))


def test_unreadable_config(tmp_path):
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(bad)


def test_setup_logging_idempotent():
    logger1 = setup_logging(logging.DEBUG)
    logger2 = setup_logging(logging.DEBUG)
    assert logger1 is logger2
    assert logger1.handlers  # at least one handler installed
    assert get_logger("export").parent is logger1


def test_log_file_from_environment(monkeypatch):
    monkeypatch.setenv("STRONGHOLD_LOG_FILE", "/var/log/stronghold.log")
    assert load_settings().log_file == "/var/log/stronghold.log"


def test_setup_logging_adds_file_handler_once(tmp_path):
    log_path = tmp_path / "bot.log"
    logger = setup_logging()
    before = list(logger.handlers)
    try:
        setup_logging(log_file=str(log_path))
        setup_logging(log_file=str(log_path))
        added = [h for h in logger.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0], logging.FileHandler)

        get_logger("export").info("XML file updated: %s", "users.xml")
        added[0].flush()
        assert "stronghold.export: XML file updated: users.xml" in log_path.read_text(
            encoding="utf-8"
        )
    finally:
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
                handler.close()
