"""Main bot entry point (polling mode)."""
import asyncio
import logging
import os
import sys

from picar.config import Config
from picar.core.bot import PicarBot

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", log_file: str = "picar.log"):
    """Log to stdout and to a file."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


async def main():
    """Main entry point for polling mode."""
    try:
        config = Config.from_env()
        configure_logging(config.log_level, config.log_file)
        logger.info("✅ Configuration loaded")
        logger.info(f"🖼️  Picture commands: {len(config.picture_commands)}")

        bot = PicarBot(config)
        await bot.initialize()

        await bot.run_polling()

    except KeyboardInterrupt:
        logger.info("⌨️  Bot stopped by user")
    except Exception as e:
        if not logging.getLogger().handlers:
            configure_logging(os.getenv("LOG_LEVEL", "INFO"), "")
        logger.error(f"❌ Fatal error: {e}", exc_info=True)
        sys.exit(1)


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("⌨️  Bot stopped by user")


if __name__ == "__main__":
    run()
