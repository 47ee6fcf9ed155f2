"""Base interface for the platform that owns the guild roster."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.models import GuildRoster, MemberInfo, RoleInfo


class Platform(ABC):
    """Abstract view of the monitored guild.

    Implementations must fetch fresh state on every call; the roster is
    mutated by Discord at any time.
    """

    @abstractmethod
    def monitors(self, guild_id: int) -> bool:
        """Return ``True`` if ``guild_id`` is the guild being mirrored."""

    @abstractmethod
    async def fetch_roster(self) -> GuildRoster:
        """Return every member of the guild with their roles."""

    @abstractmethod
    async def fetch_member(self, user_id: int) -> MemberInfo | None:
        """Return a single member, or ``None`` if they are not in the guild."""

    @abstractmethod
    async def fetch_role(self, role_id: int) -> RoleInfo | None:
        """Return a guild role, or ``None`` if it does not exist."""

    @abstractmethod
    async def add_role(self, user_id: int, role_id: int, reason: str) -> None:
        """Grant ``role_id`` to ``user_id``. Raises ``GrantError`` on refusal."""
