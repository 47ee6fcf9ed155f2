"""Regenerate the XML export whenever the roster may have changed."""

from __future__ import annotations

import asyncio

from ..adapters.base import Platform
from ..errors import ExportWriteError, PlatformQueryError
from ..logging_config import get_logger
from .export import ExportWriter
from .identity import IdentityResolver
from .snapshot import build_snapshot

log = get_logger("refresh")


class RefreshScheduler:
    """Serialize fetch -> build -> write cycles.

    Only one cycle runs at a time. Requests that arrive while a cycle is
    running collapse into a single follow-up cycle, so a burst of member
    events costs at most two rebuilds and the export always ends up matching
    the roster as of the last request.
    """

    def __init__(
        self,
        platform: Platform,
        resolver: IdentityResolver,
        writer: ExportWriter,
    ) -> None:
        self.platform = platform
        self.resolver = resolver
        self.writer = writer
        self.cycles = 0
        self._lock = asyncio.Lock()
        self._pending = False

    async def refresh(self, reason: str = "requested") -> None:
        """Request a refresh; runs it now unless one is already in flight."""
        self._pending = True
        if self._lock.locked():
            log.debug("Refresh (%s) queued behind running cycle", reason)
            return
        async with self._lock:
            while self._pending:
                self._pending = False
                log.info("Updating user mapping (%s)", reason)
                await self.run_cycle()

    async def run_cycle(self) -> bool:
        """Run one cycle. Returns ``False`` if it failed; the next trigger retries."""
        self.cycles += 1
        try:
            roster = await self.platform.fetch_roster()
            identities = await self.resolver.lookup_many(m.id for m in roster.members)
            document = build_snapshot(roster.with_identities(identities))
            self.writer.write(document)
        except PlatformQueryError as exc:
            log.error("Could not fetch roster: %s", exc)
            return False
        except ExportWriteError as exc:
            log.error("Error saving XML file: %s", exc)
            return False
        except Exception:
            log.exception("Unexpected error while updating user mapping")
            return False
        return True
