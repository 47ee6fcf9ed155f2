"""Wiring of the bot's components, built once at startup."""

from __future__ import annotations

from dataclasses import dataclass

import discord

from .adapters.base import Platform
from .adapters.discord import DiscordAdapter, authorize_url
from .adapters.gateway import GuildPlatform
from .commands.router import CommandRouter
from .config import Settings
from .core.export import ExportWriter
from .core.identity import ConnectionsIdentityResolver, IdentityResolver
from .core.refresh import RefreshScheduler
from .core.verification import VerificationGate


@dataclass
class BotContext:
    settings: Settings
    platform: Platform
    resolver: IdentityResolver
    writer: ExportWriter
    scheduler: RefreshScheduler
    gate: VerificationGate
    router: CommandRouter
    adapter: DiscordAdapter | None = None

    async def close(self) -> None:
        if self.adapter is not None:
            await self.adapter.close()


def build_context(
    settings: Settings,
    client: discord.Client,
    *,
    platform: Platform | None = None,
    resolver: IdentityResolver | None = None,
) -> BotContext:
    """Create every component from ``settings``.

    ``platform`` and ``resolver`` may be supplied to replace the Discord
    backed defaults.
    """
    adapter = None
    if resolver is None:
        adapter = DiscordAdapter(timeout=settings.request_timeout_seconds)
        resolver = ConnectionsIdentityResolver(adapter, settings.oauth_token_path)
    platform = platform or GuildPlatform(client, settings.guild_id)
    writer = ExportWriter(settings.export_path)
    scheduler = RefreshScheduler(platform, resolver, writer)

    async def refresh_after_grant() -> None:
        await scheduler.refresh("role granted")

    gate = VerificationGate(
        platform,
        resolver,
        settings.channel_role_map,
        on_granted=refresh_after_grant,
        authorize_url=authorize_url(settings.client_id) if settings.client_id else None,
        timeout=settings.request_timeout_seconds,
    )
    return BotContext(
        settings=settings,
        platform=platform,
        resolver=resolver,
        writer=writer,
        scheduler=scheduler,
        gate=gate,
        router=CommandRouter(settings.command_prefix, gate),
        adapter=adapter,
    )
