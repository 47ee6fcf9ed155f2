"""Direct access to the parts of Discord's HTTP API that need a user token.

Connected accounts (Steam and so on) are only visible through
``/users/@me/connections`` with an OAuth2 token carrying the ``connections``
scope, which :mod:`discord.py` has no API for. The adapter uses :mod:`httpx`
so it stays fully asynchronous.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

import httpx

OAUTH_REDIRECT_URI = "https://discord.com/oauth2/authorized"
OAUTH_SCOPES = "identify connections"


def authorize_url(client_id: str) -> str:
    """Return the OAuth2 URL a user visits to share their connections."""
    query = urlencode(
        {
            "client_id": client_id,
            "redirect_uri": OAUTH_REDIRECT_URI,
            "response_type": "code",
            "scope": OAUTH_SCOPES,
        },
        quote_via=quote,
    )
    return f"{DiscordAdapter.api_base}/oauth2/authorize?{query}"


class DiscordAdapter:
    """Small client for Discord endpoints called with user access tokens."""

    api_base = "https://discord.com/api"

    def __init__(
        self, timeout: float = 10.0, client: httpx.AsyncClient | None = None
    ) -> None:
        """Store an optional HTTP ``client``; one is created otherwise."""
        self.client = client or httpx.AsyncClient(timeout=timeout)

    # ------------------------------------------------------------------
    async def fetch_connections(self, access_token: str) -> list[dict[str, Any]]:
        """Return the connected accounts visible to ``access_token``.

        Parameters
        ----------
        access_token:
            OAuth2 bearer token granted with the ``connections`` scope.

        """
        url = f"{self.api_base}/users/@me/connections"
        headers = {"Authorization": f"Bearer {access_token}"}
        response = await self.client.get(url, headers=headers)
        response.raise_for_status()
        data: list[dict[str, Any]] = response.json()
        return data

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
