"""Platform implementation backed by a connected :mod:`discord.py` client."""

from __future__ import annotations

import discord

from ..core.models import GuildRoster, MemberInfo, RoleInfo
from ..errors import GrantError, PlatformQueryError
from .base import Platform


def role_from_discord(role: discord.Role) -> RoleInfo:
    return RoleInfo(
        id=role.id,
        name=role.name,
        color=str(role.colour),
        position=role.position,
        is_default=role.is_default(),
    )


def member_from_discord(member: discord.Member) -> MemberInfo:
    return MemberInfo(
        id=member.id,
        username=member.name,
        display_name=member.display_name,
        roles=[role_from_discord(r) for r in member.roles],
    )


class GuildPlatform(Platform):
    """Read and mutate the monitored guild through the bot's connection.

    ``guild_id`` selects the guild; without it the first guild the bot has
    joined is used.
    """

    def __init__(self, client: discord.Client, guild_id: int | None = None) -> None:
        self.client = client
        self.guild_id = guild_id

    def resolve_guild(self) -> discord.Guild:
        if self.guild_id is not None:
            guild = self.client.get_guild(self.guild_id)
        else:
            guild = next(iter(self.client.guilds), None)
        if guild is None:
            raise PlatformQueryError(
                "No guild found! Make sure the bot is in a server."
            )
        return guild

    def monitors(self, guild_id: int) -> bool:
        if self.guild_id is not None:
            return guild_id == self.guild_id
        first = next(iter(self.client.guilds), None)
        return first is not None and first.id == guild_id

    # ------------------------------------------------------------------
    async def fetch_roster(self) -> GuildRoster:
        guild = self.resolve_guild()
        try:
            members = [m async for m in guild.fetch_members(limit=None)]
        except discord.HTTPException as exc:
            raise PlatformQueryError(
                f"Fetching members of guild {guild.id} failed: {exc}"
            ) from exc
        return GuildRoster(
            id=guild.id,
            name=guild.name,
            roles=[role_from_discord(r) for r in guild.roles],
            members=[member_from_discord(m) for m in members],
        )

    async def _member(self, user_id: int) -> discord.Member | None:
        guild = self.resolve_guild()
        try:
            return await guild.fetch_member(user_id)
        except discord.NotFound:
            return None
        except discord.HTTPException as exc:
            raise PlatformQueryError(
                f"Fetching member {user_id} failed: {exc}"
            ) from exc

    async def fetch_member(self, user_id: int) -> MemberInfo | None:
        member = await self._member(user_id)
        return member_from_discord(member) if member is not None else None

    async def fetch_role(self, role_id: int) -> RoleInfo | None:
        role = self.resolve_guild().get_role(role_id)
        return role_from_discord(role) if role is not None else None

    async def add_role(self, user_id: int, role_id: int, reason: str) -> None:
        member = await self._member(user_id)
        if member is None:
            raise GrantError(f"Member {user_id} left before role {role_id} was added")
        try:
            await member.add_roles(discord.Object(id=role_id), reason=reason)
        except discord.HTTPException as exc:
            # Forbidden lands here too: missing Manage Roles or role hierarchy
            raise GrantError(
                f"Adding role {role_id} to {user_id} failed: {exc}"
            ) from exc
