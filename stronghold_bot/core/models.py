"""Data models for the guild roster mirrored into the XML export.

The models are implemented using :mod:`pydantic` so that rosters built from
Discord objects (or from test fixtures) are validated on construction. They
are plain snapshots: the live roster is owned by Discord and is fetched again
for every refresh or verification.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RoleInfo(BaseModel):
    """A guild role as seen at fetch time.

    Attributes
    ----------
    id:
        Discord role ID.
    name:
        Role name.
    color:
        Hex colour string such as ``"#99aab5"``.
    position:
        Hierarchy position; higher values rank above lower ones.
    is_default:
        ``True`` for the implicit ``@everyone`` role every member holds.

    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    color: str = "#000000"
    position: int = 0
    is_default: bool = False


class MemberInfo(BaseModel):
    """A guild member with their roles and optional linked Steam ID."""

    id: int
    username: str
    display_name: str = ""
    roles: list[RoleInfo] = Field(default_factory=list)
    external_id: str | None = None

    def has_role(self, role_id: int) -> bool:
        return any(role.id == role_id for role in self.roles)


class GuildRoster(BaseModel):
    """Point-in-time view of one guild's members and roles."""

    id: int
    name: str
    roles: list[RoleInfo] = Field(default_factory=list)
    members: list[MemberInfo] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_members(self) -> GuildRoster:
        seen: set[int] = set()
        for member in self.members:
            if member.id in seen:
                raise ValueError(f"duplicate member id {member.id} in roster")
            seen.add(member.id)
        return self

    def get_member(self, user_id: int) -> MemberInfo | None:
        return next((m for m in self.members if m.id == user_id), None)

    def get_role(self, role_id: int) -> RoleInfo | None:
        return next((r for r in self.roles if r.id == role_id), None)

    def with_identities(self, identities: Mapping[int, str]) -> GuildRoster:
        """Return a copy with ``external_id`` filled in from ``identities``.

        Members already carrying an external ID keep it.
        """
        members = [
            m
            if m.external_id or m.id not in identities
            else m.model_copy(update={"external_id": identities[m.id]})
            for m in self.members
        ]
        return self.model_copy(update={"members": members})
