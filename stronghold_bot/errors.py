"""Exception hierarchy shared by the bot's components."""

from __future__ import annotations


class StrongholdError(Exception):
    """Base class for all errors raised by :mod:`stronghold_bot`."""


class ConfigurationError(StrongholdError):
    """Settings are missing or invalid. Fatal at startup."""


class PlatformQueryError(StrongholdError):
    """Fetching guild, member or role data from Discord failed."""


class ExportWriteError(StrongholdError):
    """The XML export could not be written to disk."""


class VerificationError(StrongholdError):
    """Looking up a linked external identity failed."""


class GrantError(StrongholdError):
    """Discord refused to add a role to a member."""


class MisconfigurationError(StrongholdError):
    """A channel binding points at a role that does not exist."""
