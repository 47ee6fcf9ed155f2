"""Grant a channel's bound role to members with a linked Steam account."""

from __future__ import annotations

import asyncio
import enum
from collections import Counter
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from ..adapters.base import Platform
from ..errors import (
    GrantError,
    MisconfigurationError,
    PlatformQueryError,
    VerificationError,
)
from ..logging_config import get_logger
from .identity import IdentityResolver
from .models import RoleInfo

log = get_logger("verification")


class VerifyStatus(enum.Enum):
    CHANNEL_NOT_CONFIGURED = "channel_not_configured"
    MISCONFIGURED = "misconfigured"
    ALREADY_VERIFIED = "already_verified"
    NOT_CONNECTED = "not_connected"
    VERIFIED = "verified"
    GRANT_FAILED = "grant_failed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class VerifyResult:
    status: VerifyStatus
    role_name: str | None = None
    external_id: str | None = None
    # OAuth link shown with NOT_CONNECTED when a client id is configured
    authorize_url: str | None = None

    @property
    def granted(self) -> bool:
        return self.status is VerifyStatus.VERIFIED


class VerificationGate:
    """Run the ``contact`` verification for one user in one channel.

    The role is only ever added, never removed. Calls for the same user are
    serialized so a double invocation sees the role from the first one;
    calls for different users run concurrently.
    """

    def __init__(
        self,
        platform: Platform,
        resolver: IdentityResolver,
        channel_roles: Mapping[int, int],
        on_granted: Callable[[], Awaitable[None]],
        authorize_url: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.platform = platform
        self.resolver = resolver
        self.channel_roles = channel_roles
        self.on_granted = on_granted
        self.authorize_url = authorize_url
        self.timeout = timeout
        self._locks: dict[int, asyncio.Lock] = {}
        # callers holding or waiting on each lock; idle locks are dropped
        self._waiting: Counter[int] = Counter()

    async def _bound_role(self, channel_id: int, role_id: int) -> RoleInfo:
        role = await self.platform.fetch_role(role_id)
        if role is None:
            raise MisconfigurationError(
                f"Role {role_id} not found for channel {channel_id}"
            )
        return role

    async def _external_id(self, user_id: int) -> str | None:
        try:
            return await asyncio.wait_for(self.resolver.lookup(user_id), self.timeout)
        except asyncio.TimeoutError:
            log.warning("Steam ID lookup for %s timed out", user_id)
        except VerificationError as exc:
            log.warning("Error checking Steam connection for %s: %s", user_id, exc)
        return None

    async def handle_verify(self, user_id: int, channel_id: int) -> VerifyResult:
        role_id = self.channel_roles.get(channel_id)
        if role_id is None:
            return VerifyResult(VerifyStatus.CHANNEL_NOT_CONFIGURED)

        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._waiting[user_id] += 1
        try:
            async with lock:
                return await self._verify(user_id, channel_id, role_id)
        finally:
            self._waiting[user_id] -= 1
            if not self._waiting[user_id]:
                del self._waiting[user_id]
                del self._locks[user_id]

    async def _verify(self, user_id: int, channel_id: int, role_id: int) -> VerifyResult:
        try:
            role = await self._bound_role(channel_id, role_id)
        except MisconfigurationError as exc:
            log.error("%s", exc)
            return VerifyResult(VerifyStatus.MISCONFIGURED)
        except PlatformQueryError as exc:
            log.error("Could not load role %s: %s", role_id, exc)
            return VerifyResult(VerifyStatus.UNAVAILABLE)

        try:
            member = await self.platform.fetch_member(user_id)
        except PlatformQueryError as exc:
            log.error("Could not load member %s: %s", user_id, exc)
            return VerifyResult(VerifyStatus.UNAVAILABLE, role_name=role.name)
        if member is None:
            log.warning("Member %s is not in the monitored guild", user_id)
            return VerifyResult(VerifyStatus.UNAVAILABLE, role_name=role.name)

        if member.has_role(role.id):
            return VerifyResult(VerifyStatus.ALREADY_VERIFIED, role_name=role.name)

        external_id = await self._external_id(user_id)
        if not external_id:
            return VerifyResult(
                VerifyStatus.NOT_CONNECTED,
                role_name=role.name,
                authorize_url=self.authorize_url,
            )

        try:
            await asyncio.wait_for(
                self.platform.add_role(
                    user_id, role.id, reason=f"Steam account verified ({external_id})"
                ),
                self.timeout,
            )
        except (GrantError, asyncio.TimeoutError) as exc:
            log.error(
                "Error granting role %s (%s) in channel %s to %s: %s",
                role.name,
                role.id,
                channel_id,
                user_id,
                str(exc) or "timed out",
            )
            return VerifyResult(VerifyStatus.GRANT_FAILED, role_name=role.name)

        log.info(
            "Granted role %s to %s (Steam ID: %s)", role.name, member.username, external_id
        )
        await self.on_granted()
        return VerifyResult(
            VerifyStatus.VERIFIED, role_name=role.name, external_id=external_id
        )
