"""Stronghold bot package.

The roster models and the pure snapshot builder are exposed here so that
tools reading or producing the XML export can import them without pulling
in :mod:`discord`.
"""

from .core.models import GuildRoster, MemberInfo, RoleInfo
from .core.snapshot import build_snapshot

__all__ = ["GuildRoster", "MemberInfo", "RoleInfo", "build_snapshot"]
