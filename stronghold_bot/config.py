"""Runtime settings for the bot.

Values come from an optional JSON config file (the format the bot has always
accepted: ``token``, ``guildId``, ``xmlFilePath``, ``updateIntervalMinutes``,
``commandPrefix``, ``channelRoleMap``, ``clientId``, ``logFile``) with environment
variables taking precedence.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError


@dataclass(frozen=True)
class Settings:
    token: str
    guild_id: int | None = None
    export_path: str = "discord_users.xml"
    update_interval_minutes: int = 5
    command_prefix: str = "!"
    # channel id -> role id granted by ``stronghold contact`` in that channel
    channel_role_map: dict[int, int] = field(default_factory=dict)
    client_id: str | None = None
    # JSON file of ``{user_id: oauth_access_token}`` kept by the OAuth callback
    oauth_token_path: str | None = None
    request_timeout_seconds: float = 10.0
    # extra log destination alongside stdout
    log_file: str | None = None


_ENV_KEYS = {
    "token": "DISCORD_BOT_TOKEN",
    "guildId": "STRONGHOLD_GUILD_ID",
    "xmlFilePath": "STRONGHOLD_EXPORT_PATH",
    "updateIntervalMinutes": "STRONGHOLD_UPDATE_INTERVAL",
    "commandPrefix": "STRONGHOLD_COMMAND_PREFIX",
    "clientId": "STRONGHOLD_CLIENT_ID",
    "oauthTokenPath": "STRONGHOLD_OAUTH_TOKENS",
    "logFile": "STRONGHOLD_LOG_FILE",
}


def _setting(raw: dict[str, Any], key: str, default: Any) -> Any:
    value = raw.get(key)
    return default if value is None or value == "" else value


def _read_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def _as_id(value: Any, name: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a numeric id, got {value!r}") from exc


def _channel_roles(raw: Any) -> dict[int, int]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("channelRoleMap must be an object of channel -> role")
    return {
        _as_id(channel, "channelRoleMap key"): _as_id(role, "channelRoleMap value")
        for channel, role in raw.items()
    }


def _interval(raw: Any) -> int:
    try:
        minutes = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"updateIntervalMinutes must be an integer, got {raw!r}"
        ) from exc
    if minutes <= 0:
        raise ConfigurationError("updateIntervalMinutes must be positive")
    return minutes


def _timeout(raw: Any) -> float:
    try:
        seconds = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"requestTimeoutSeconds must be a number, got {raw!r}"
        ) from exc
    if seconds <= 0:
        raise ConfigurationError("requestTimeoutSeconds must be positive")
    return seconds


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    raw: dict[str, Any] = _read_file(path) if path else {}
    for key, env in _ENV_KEYS.items():
        value = os.getenv(env, "").strip()
        if value:
            raw[key] = value

    token = str(raw.get("token") or "").strip()
    guild_id = raw.get("guildId")
    prefix = str(raw.get("commandPrefix") or "!")
    if not prefix.strip():
        raise ConfigurationError("commandPrefix must not be blank")
    return Settings(
        token=token,
        guild_id=_as_id(guild_id, "guildId") if guild_id else None,
        export_path=str(raw.get("xmlFilePath") or "discord_users.xml"),
        update_interval_minutes=_interval(_setting(raw, "updateIntervalMinutes", 5)),
        command_prefix=prefix,
        channel_role_map=_channel_roles(raw.get("channelRoleMap")),
        client_id=str(raw["clientId"]) if raw.get("clientId") else None,
        oauth_token_path=raw.get("oauthTokenPath") or None,
        request_timeout_seconds=_timeout(_setting(raw, "requestTimeoutSeconds", 10.0)),
        log_file=raw.get("logFile") or None,
    )
