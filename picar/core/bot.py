"""Main bot core - initialization and lifecycle management."""
import logging
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.types import BotCommand

from database import Database
from picar.config import Config
from picar.container import ServiceContainer
from picar.core.plugin_manager import PluginManager
from picar.plugins import GalleryPlugin, PictureCommandsPlugin

logger = logging.getLogger(__name__)

# Gallery first so a configured picture command cannot shadow /goodpic
DEFAULT_PLUGINS = [GalleryPlugin, PictureCommandsPlugin]


class PicarBot:
    """
    Main bot class - handles initialization, plugin loading, and lifecycle.

    This is the entry point for the bot application.
    """

    def __init__(self, config: Config):
        """
        Initialize the bot.

        Args:
            config: Bot configuration object
        """
        self.config = config
        self.bot: Bot = None
        self.dispatcher: Dispatcher = None
        self.db: Database = None
        self.container: ServiceContainer = None
        self.plugin_manager: PluginManager = None
        self._running = False
        self.logger = logging.getLogger(__name__)

    async def initialize(self):
        """Initialize bot components."""
        self.logger.info("=" * 70)
        self.logger.info("🖼️  PICAR BOT - INITIALIZING")
        self.logger.info("=" * 70)

        try:
            self.logger.info("📊 Initializing database...")
            self.db = Database(self.config.database_url or None)
            await self.db.connect()
            if not await self.db.health_check():
                raise RuntimeError("Database is not reachable")
            if self.config.auto_create_tables:
                await self.db.create_tables()
            else:
                await self.db.require_schema()
            self.logger.info("✅ Database initialized")

            self.logger.info("🔧 Initializing services...")
            self.container = await ServiceContainer.create(self.config, self.db)
            self.logger.info("✅ Services initialized")

            self.logger.info("🤖 Initializing bot...")
            self.bot = Bot(token=self.config.bot_token, default=DefaultBotProperties())
            self.dispatcher = Dispatcher()
            self.logger.info("✅ Bot initialized")

            self.plugin_manager = PluginManager(
                bot=self.bot,
                dispatcher=self.dispatcher,
                db=self.db,
                config=self.config
            )
            for name, service in self.container.services().items():
                self.plugin_manager.register_service(name, service)

            await self.load_plugins(DEFAULT_PLUGINS)

            self.logger.info("=" * 70)
            self.logger.info("✅ BOT INITIALIZATION COMPLETE")
            self.logger.info("=" * 70)

        except Exception as e:
            self.logger.error(f"❌ Failed to initialize bot: {e}", exc_info=True)
            raise

    async def load_plugins(self, plugin_classes: list):
        """
        Load bot plugins.

        Args:
            plugin_classes: List of plugin classes to load
        """
        self.logger.info("🔌 Loading plugins...")
        await self.plugin_manager.load_all_plugins(plugin_classes)
        self.logger.info(f"✅ Plugins loaded: {len(self.plugin_manager.get_all_plugins())}")

    async def start(self):
        """Start the bot."""
        if self._running:
            self.logger.warning("Bot is already running")
            return

        self.logger.info("=" * 70)
        self.logger.info("🚀 STARTING BOT")
        self.logger.info("=" * 70)

        try:
            self._running = True

            bot_info = await self.bot.get_me()
            self.logger.info(f"Bot username: @{bot_info.username}")
            self.logger.info(f"Bot ID: {bot_info.id}")

            plugins = self.plugin_manager.get_all_plugins()
            self.logger.info(f"Loaded plugins: {len(plugins)}")
            for plugin in plugins:
                self.logger.info(f"  - {plugin.name} v{plugin.version}")

            commands = self.plugin_manager.get_all_commands()
            self.logger.info(f"Available commands: {len(commands)}")
            for cmd in commands:
                self.logger.info(f"  - {cmd['command']}: {cmd['description']}")

            await self._set_command_menu(commands)

            self.logger.info("=" * 70)
            self.logger.info("✅ BOT IS RUNNING")
            self.logger.info("=" * 70)

        except Exception as e:
            self.logger.error(f"❌ Failed to start bot: {e}", exc_info=True)
            self._running = False
            raise

    async def _set_command_menu(self, commands: list):
        """Configure Telegram's "/" command list from the plugin commands."""
        try:
            await self.bot.set_my_commands(
                commands=[
                    BotCommand(command=cmd["command"].lstrip("/"), description=cmd["description"])
                    for cmd in commands
                ]
            )
        except Exception as e:
            self.logger.warning(f"Failed to set command menu: {e}")

    async def stop(self):
        """Stop the bot and cleanup."""
        if not self._running:
            self.logger.warning("Bot is not running")
            return

        self.logger.info("=" * 70)
        self.logger.info("🛑 STOPPING BOT")
        self.logger.info("=" * 70)

        try:
            self._running = False

            if self.plugin_manager:
                await self.plugin_manager.unload_all_plugins()

            if self.container:
                self.logger.info("🧹 Cleaning up services...")
                await self.container.cleanup()

            if self.bot:
                self.logger.info("🤖 Closing bot session...")
                await self.bot.session.close()

            if self.db:
                self.logger.info("📊 Closing database...")
                await self.db.close()

            self.logger.info("=" * 70)
            self.logger.info("✅ BOT STOPPED")
            self.logger.info("=" * 70)

        except Exception as e:
            self.logger.error(f"❌ Error stopping bot: {e}", exc_info=True)
            raise

    async def run_polling(self):
        """Run bot in polling mode."""
        await self.start()

        try:
            self.logger.info("📡 Starting polling...")
            await self.dispatcher.start_polling(
                self.bot,
                allowed_updates=self.dispatcher.resolve_used_update_types()
            )
        except KeyboardInterrupt:
            self.logger.info("⌨️  Received interrupt signal")
        except Exception as e:
            self.logger.error(f"❌ Polling error: {e}", exc_info=True)
        finally:
            await self.stop()

