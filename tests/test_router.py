"""Tests for command dispatch and reply rendering."""

import asyncio

from stronghold_bot.commands import replies
from stronghold_bot.commands.router import CommandRouter
from stronghold_bot.core.verification import VerifyResult, VerifyStatus


class RecordingGate:
    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result or VerifyResult(VerifyStatus.NOT_CONNECTED, role_name="Verified")
        self.error = error

    async def handle_verify(self, user_id, channel_id):
        self.calls.append((user_id, channel_id))
        if self.error:
            raise self.error
        return self.result


def route(router, content):
    return asyncio.run(router.route(content, 42, 501))


def test_ignores_other_messages():
    router = CommandRouter("!", RecordingGate())
    assert route(router, "hello there") is None
    assert route(router, "!") is None
    assert route(router, "!ping") is None
    assert route(router, "?stronghold") is None


def test_bare_root_command_shows_help():
    router = CommandRouter("!", RecordingGate())
    reply = route(router, "!stronghold")
    assert reply == replies.help_text("!")
    assert "`!stronghold contact`" in reply


def test_contact_is_case_insensitive_and_calls_gate():
    gate = RecordingGate()
    router = CommandRouter("!", gate)

    reply = route(router, "!StrongHold   CONTACT")

    assert gate.calls == [(42, 501)]
    assert reply.startswith("**Steam Account Not Connected**")


def test_unknown_subcommand():
    gate = RecordingGate()
    router = CommandRouter("!", gate)
    reply = route(router, "!stronghold Join")
    assert reply == (
        "❌ Unknown subcommand: `join`\nUse `!stronghold` to see available commands."
    )
    assert gate.calls == []


def test_custom_prefix():
    router = CommandRouter("sb>", RecordingGate())
    assert route(router, "sb>stronghold") == replies.help_text("sb>")
    assert route(router, "!stronghold") is None


def test_gate_crash_still_gets_a_reply(caplog):
    router = CommandRouter("!", RecordingGate(error=RuntimeError("boom")))
    assert route(router, "!stronghold contact") == replies.internal_error()
    assert "contact command failed" in caplog.text


def test_render_each_status():
    render = replies.render_verify_result
    assert "not configured" in render(VerifyResult(VerifyStatus.CHANNEL_NOT_CONFIGURED))
    assert "contact an administrator" in render(VerifyResult(VerifyStatus.MISCONFIGURED))
    assert render(
        VerifyResult(VerifyStatus.ALREADY_VERIFIED, role_name="Verified")
    ) == "✓ You already have the **Verified** role!"
    verified = render(
        VerifyResult(VerifyStatus.VERIFIED, role_name="Verified", external_id="7656")
    )
    assert "**Verified**" in verified
    assert "Steam ID: `7656`" in verified
    assert "permissions" in render(VerifyResult(VerifyStatus.GRANT_FAILED))
    assert "try again" in render(VerifyResult(VerifyStatus.UNAVAILABLE))


def test_not_connected_instructions():
    with_link = replies.not_connected("https://example.test/auth")
    assert "Click this link to authorize: https://example.test/auth" in with_link
    assert "Contact an administrator for the authorization link" not in with_link

    without_link = replies.not_connected(None)
    assert "Contact an administrator for the authorization link" in without_link
    assert "3️⃣ **Run this command again**" in without_link
