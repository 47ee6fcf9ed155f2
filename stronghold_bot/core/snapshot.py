"""Render a :class:`GuildRoster` as the ``discord_users`` XML document.

The document is a pure function of the roster: no timestamps, no I/O, and
members appear in roster order so identical input yields identical bytes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from xml.sax.saxutils import escape

from .models import GuildRoster, MemberInfo, RoleInfo

_ENTITIES = {'"': "&quot;", "'": "&apos;"}
# anything outside the XML 1.0 Char production, including lone surrogates
_ILLEGAL_XML = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def escape_xml(value: object) -> str:
    """Escape ``value`` for use in element text or a quoted attribute."""
    if value is None:
        return ""
    return escape(_ILLEGAL_XML.sub("", str(value)), _ENTITIES)


def visible_roles(roles: Iterable[RoleInfo]) -> list[RoleInfo]:
    """Drop ``@everyone`` and order highest position first.

    ``sorted`` is stable with ``reverse=True`` so equal positions keep their
    input order.
    """
    return sorted(
        (role for role in roles if not role.is_default),
        key=lambda role: role.position,
        reverse=True,
    )


def _user_lines(member: MemberInfo) -> list[str]:
    lines = [
        f'    <user id="{escape_xml(member.id)}" '
        f'username="{escape_xml(member.username)}">',
        "      <roles>",
    ]
    for role in visible_roles(member.roles):
        lines.append(
            f'        <role id="{escape_xml(role.id)}" '
            f'name="{escape_xml(role.name)}" '
            f'color="{escape_xml(role.color)}" />'
        )
    lines.append("      </roles>")
    # always emit the element so consumers can tell "none linked" from "unknown"
    lines.append(f"      <steam_id>{escape_xml(member.external_id)}</steam_id>")
    lines.append("    </user>")
    return lines


def build_snapshot(roster: GuildRoster) -> str:
    """Return the XML export for ``roster``."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<discord_users>",
        f'  <guild id="{escape_xml(roster.id)}" name="{escape_xml(roster.name)}">',
    ]
    for member in roster.members:
        lines.extend(_user_lines(member))
    lines.append("  </guild>")
    lines.append("</discord_users>")
    return "\n".join(lines)
