"""Shared fixtures; the fakes themselves live in ``fakes.py``."""

from __future__ import annotations

import pytest
from fakes import FakePlatform, FakeResolver, make_roster

from stronghold_bot.core.export import ExportWriter
from stronghold_bot.core.models import GuildRoster
from stronghold_bot.core.refresh import RefreshScheduler


@pytest.fixture
def roster() -> GuildRoster:
    return make_roster()


@pytest.fixture
def platform(roster: GuildRoster) -> FakePlatform:
    return FakePlatform(roster)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def export_path(tmp_path):
    return tmp_path / "discord_users.xml"


@pytest.fixture
def scheduler(platform, resolver, export_path) -> RefreshScheduler:
    return RefreshScheduler(platform, resolver, ExportWriter(export_path))
