"""Discord bot that mirrors the guild roster into an XML file.

Passive roster changes (joins, leaves, role and profile updates) and a fixed
timer all funnel into :meth:`RefreshScheduler.refresh`; the
``stronghold contact`` command is answered through the
:class:`~stronghold_bot.commands.router.CommandRouter`.
"""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands, tasks

from .adapters.base import Platform
from .config import Settings
from .context import BotContext, build_context
from .core.identity import IdentityResolver
from .logging_config import setup_logging


class StrongholdBot(commands.Bot):
    """``discord.py`` bot owning one :class:`BotContext`."""

    refresh_task: tasks.Loop | None

    def __init__(
        self,
        settings: Settings,
        *,
        platform: Platform | None = None,
        resolver: IdentityResolver | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the bot and build its components from ``settings``."""
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        # member events and full member lists need the privileged intent;
        # prefix commands need to read message text.
        intents.members = True
        intents.message_content = True
        super().__init__(
            command_prefix=settings.command_prefix,
            intents=intents,
        )
        self.log = setup_logging()
        self.refresh_task = None
        self.context: BotContext = build_context(
            settings, self, platform=platform, resolver=resolver
        )

    async def setup_hook(self) -> None:
        """Start the periodic refresh; its first run is the initial export."""
        interval = self.context.settings.update_interval_minutes
        self.refresh_task = tasks.loop(minutes=interval, reconnect=True)(
            self._scheduled_refresh
        )
        self.refresh_task.before_loop(self.wait_until_ready)
        self.refresh_task.start()
        await super().setup_hook()

    async def _scheduled_refresh(self) -> None:
        await self.context.scheduler.refresh("scheduled")

    async def on_ready(self) -> None:  # pragma: no cover - requires discord
        """Log the connection and which guild is being mirrored."""
        await self.change_presence(activity=discord.Game(name="Stronghold"))
        self.log.info(
            "Logged in as %s (%s)",
            self.user,
            self.user.id if self.user else "?",
        )
        monitored = [g for g in self.guilds if self.context.platform.monitors(g.id)]
        if not monitored:
            self.log.error("No guild found! Make sure the bot is in a server.")
        for guild in monitored:
            self.log.info("Monitoring guild: %s (%s)", guild.name, guild.id)

    async def close(self) -> None:
        if self.refresh_task is not None:
            self.refresh_task.cancel()
        await self.context.close()
        await super().close()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return
        reply = await self.context.router.route(
            message.content, message.author.id, message.channel.id
        )
        if reply is not None:
            await message.reply(reply)

    # ------------------------------------------------------------------
    # Roster change events
    # ------------------------------------------------------------------
    async def _refresh_for(self, guild: discord.Guild, reason: str) -> None:
        if not self.context.platform.monitors(guild.id):
            return
        await self.context.scheduler.refresh(reason)

    async def on_member_join(self, member: discord.Member) -> None:
        self.log.info("New member joined: %s", member.name)
        await self._refresh_for(member.guild, "member joined")

    async def on_member_remove(self, member: discord.Member) -> None:
        self.log.info("Member left: %s", member.name)
        await self._refresh_for(member.guild, "member left")

    async def on_member_update(
        self, before: discord.Member, after: discord.Member
    ) -> None:
        self.log.info("Member updated: %s", after.name)
        await self._refresh_for(after.guild, "member updated")

    async def on_user_update(self, before: discord.User, after: discord.User) -> None:
        self.log.info("User updated: %s", after.name)
        for guild in self.guilds:
            if guild.get_member(after.id) is not None:
                await self._refresh_for(guild, "user updated")

    async def on_error(self, event_method: str, *args: Any, **kwargs: Any) -> None:
        """Log listener failures instead of letting them escape."""
        self.log.exception("Unhandled error in %s", event_method)


__all__ = ["StrongholdBot"]
