"""User-facing reply texts for the ``stronghold`` command."""

from __future__ import annotations

from ..core.verification import VerifyResult, VerifyStatus

ROOT_COMMAND = "stronghold"


def help_text(prefix: str) -> str:
    return (
        "**Stronghold Bot Commands**\n\n"
        f"`{prefix}{ROOT_COMMAND} contact` - Verify Steam connection and get role"
    )


def unknown_subcommand(prefix: str, subcommand: str) -> str:
    return (
        f"❌ Unknown subcommand: `{subcommand}`\n"
        f"Use `{prefix}{ROOT_COMMAND}` to see available commands."
    )


def internal_error() -> str:
    return "❌ Something went wrong while handling your command. Please try again later."


def not_connected(authorize_url: str | None) -> str:
    """Step-by-step instructions for linking Steam and sharing connections."""
    lines = [
        "**Steam Account Not Connected**",
        "",
        "To use this command, you need to:",
        "",
        "1️⃣ **Connect your Steam account to Discord:**",
        "   • Go to User Settings → Connections",
        "   • Click the Steam icon and authorize the connection",
        "",
        "2️⃣ **Grant this bot permission to see your connections:**",
    ]
    if authorize_url:
        lines += [
            f"   • Click this link to authorize: {authorize_url}",
            '   • Make sure to check "connections" permission',
        ]
    else:
        lines += [
            "   • Contact an administrator for the authorization link",
            "   • The bot needs OAuth2 setup with clientId configured",
        ]
    lines += [
        "",
        "3️⃣ **Run this command again** after completing the steps",
        "",
        "**Note:** Discord bots have limited access to connection data. "
        "If you've completed these steps and still see this message, "
        "please contact an administrator.",
    ]
    return "\n".join(lines)


def render_verify_result(result: VerifyResult) -> str:
    status = result.status
    if status is VerifyStatus.CHANNEL_NOT_CONFIGURED:
        return "❌ This channel is not configured for the contact command."
    if status is VerifyStatus.MISCONFIGURED:
        return (
            "❌ The configured role for this channel could not be found. "
            "Please contact an administrator."
        )
    if status is VerifyStatus.ALREADY_VERIFIED:
        return f"✓ You already have the **{result.role_name}** role!"
    if status is VerifyStatus.NOT_CONNECTED:
        return not_connected(result.authorize_url)
    if status is VerifyStatus.VERIFIED:
        return (
            "✓ Steam account verified! You have been granted the "
            f"**{result.role_name}** role.\n"
            f"Steam ID: `{result.external_id}`"
        )
    if status is VerifyStatus.GRANT_FAILED:
        return "❌ Failed to grant role. The bot may lack the necessary permissions."
    return "❌ Could not look you up right now. Please try again in a moment."
