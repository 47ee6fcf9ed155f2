"""Resolve the Steam account linked to a Discord user.

Bots cannot see a user's connected accounts. The user has to authorise the
application with the ``connections`` scope; whatever handles that OAuth
callback stores the resulting access token in a JSON file keyed by Discord
user ID, which :class:`ConnectionsIdentityResolver` reads on every lookup.
In practice most users never do this, so "no identity" is the normal answer.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

import httpx

from ..adapters.discord import DiscordAdapter
from ..errors import VerificationError
from ..logging_config import get_logger

log = get_logger("identity")


class IdentityResolver(ABC):
    """Look up external account IDs for Discord users."""

    @abstractmethod
    async def lookup(self, user_id: int) -> str | None:
        """Return the linked ID, ``None`` if there is none.

        Raises :class:`VerificationError` if the lookup itself failed.
        """

    async def lookup_many(self, user_ids: Iterable[int]) -> dict[int, str]:
        """Return ``{user_id: external_id}`` for users with a linked account.

        Failed lookups are logged and treated as absent.
        """
        found: dict[int, str] = {}
        for user_id in user_ids:
            try:
                external_id = await self.lookup(user_id)
            except VerificationError as exc:
                log.warning("Error fetching Steam ID for %s: %s", user_id, exc)
                continue
            if external_id:
                found[user_id] = external_id
        return found


class ConnectionsIdentityResolver(IdentityResolver):
    """Read Steam IDs from users' Discord connections via stored OAuth tokens."""

    def __init__(
        self,
        adapter: DiscordAdapter,
        token_path: str | None = None,
        connection_type: str = "steam",
    ) -> None:
        self.adapter = adapter
        self.token_path = Path(token_path) if token_path else None
        self.connection_type = connection_type

    def _tokens(self) -> dict[int, str]:
        if self.token_path is None or not self.token_path.exists():
            return {}
        try:
            data = json.loads(self.token_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise VerificationError(
                f"Cannot read OAuth tokens from {self.token_path}: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise VerificationError(f"{self.token_path} must contain a JSON object")
        try:
            return {int(uid): str(token) for uid, token in data.items() if token}
        except ValueError as exc:
            raise VerificationError(
                f"{self.token_path} has a non-numeric user id: {exc}"
            ) from exc

    async def _lookup_with(self, tokens: dict[int, str], user_id: int) -> str | None:
        token = tokens.get(user_id)
        if token is None:
            return None
        try:
            connections = await self.adapter.fetch_connections(token)
        except (httpx.HTTPError, ValueError) as exc:
            raise VerificationError(
                f"Fetching connections for {user_id} failed: {exc}"
            ) from exc
        for account in connections:
            if account.get("type") == self.connection_type and account.get("id"):
                return str(account["id"])
        return None

    async def lookup(self, user_id: int) -> str | None:
        return await self._lookup_with(self._tokens(), user_id)

    async def lookup_many(self, user_ids: Iterable[int]) -> dict[int, str]:
        try:
            tokens = self._tokens()
        except VerificationError as exc:
            log.warning("Skipping Steam ID lookups: %s", exc)
            return {}
        found: dict[int, str] = {}
        # only users who completed the OAuth flow can have a linked account
        for user_id in (uid for uid in user_ids if uid in tokens):
            try:
                external_id = await self._lookup_with(tokens, user_id)
            except VerificationError as exc:
                log.warning("Error fetching Steam ID for %s: %s", user_id, exc)
                continue
            if external_id:
                found[user_id] = external_id
        return found
