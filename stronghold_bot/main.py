from __future__ import annotations

import asyncio
import sys
from typing import Any

from .bot import StrongholdBot
from .config import load_settings
from .errors import ConfigurationError
from .logging_config import get_logger, setup_logging

USAGE = "Usage: stronghold-bot [config-file-path]"


def log_unhandled(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Event loop exception handler: log failures from tasks nobody awaited."""
    get_logger("main").error(
        "Unhandled asynchronous error: %s",
        context.get("message"),
        exc_info=context.get("exception"),
    )


def main(argv: list[str] | None = None) -> int:
    log = setup_logging()
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        log.error(USAGE)
        return 2
    config_path = args[0] if args else None
    if config_path:
        log.info("Loading configuration from: %s", config_path)
    try:
        settings = load_settings(config_path)
    except ConfigurationError as exc:
        log.error("Failed to start bot: %s", exc)
        return 2
    if settings.log_file:
        log = setup_logging(log_file=settings.log_file)
    if not settings.token:
        log.error(
            "No bot token configured. Set \"token\" in the config file "
            "or export DISCORD_BOT_TOKEN before running."
        )
        return 2
    log.info("Configuration loaded successfully")
    bot = StrongholdBot(settings)

    async def runner():
        asyncio.get_running_loop().set_exception_handler(log_unhandled)
        try:
            async with bot:
                await bot.start(settings.token)
        except KeyboardInterrupt:
            log.info("Shutting down...")
        return 0

    return asyncio.run(runner())


if __name__ == "__main__":
    raise SystemExit(main())
