"""Dispatch ``<prefix>stronghold ...`` messages."""

from __future__ import annotations

from ..core.verification import VerificationGate
from ..logging_config import get_logger
from . import replies

log = get_logger("commands")


class CommandRouter:
    """Turn message text into a reply, or ``None`` when it is not for us."""

    def __init__(self, prefix: str, gate: VerificationGate) -> None:
        self.prefix = prefix
        self.gate = gate

    def parse(self, content: str) -> tuple[str, list[str]] | None:
        """Split a prefixed message into ``(command, args)``; commands are lowercased."""
        if not content.startswith(self.prefix):
            return None
        args = content[len(self.prefix):].split()
        if not args:
            return None
        return args[0].lower(), args[1:]

    async def route(self, content: str, user_id: int, channel_id: int) -> str | None:
        parsed = self.parse(content)
        if parsed is None or parsed[0] != replies.ROOT_COMMAND:
            return None
        _, args = parsed
        if not args:
            return replies.help_text(self.prefix)

        subcommand = args[0].lower()
        if subcommand == "contact":
            try:
                result = await self.gate.handle_verify(user_id, channel_id)
            except Exception:
                log.exception(
                    "contact command failed for user %s in channel %s",
                    user_id,
                    channel_id,
                )
                return replies.internal_error()
            return replies.render_verify_result(result)
        return replies.unknown_subcommand(self.prefix, subcommand)
