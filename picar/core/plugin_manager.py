"""Plugin manager for loading and managing picar plugins."""
import logging
from typing import Any, Dict, List, Type, Optional
from aiogram import Bot, Dispatcher
from picar.plugins.base import BasePlugin
from database import Database

logger = logging.getLogger(__name__)


class PluginManager:
    """
    Manages plugins - loading, unloading, and lifecycle.

    Each loaded plugin's router is included into the dispatcher.
    """

    def __init__(self, bot: Optional[Bot], dispatcher: Dispatcher, db: Database, config):
        """
        Initialize the plugin manager.

        Args:
            bot: The aiogram Bot instance
            dispatcher: The aiogram Dispatcher instance
            db: Database instance
            config: picar Config
        """
        self.bot = bot
        self.dispatcher = dispatcher
        self.db = db
        self.config = config
        self.plugins: Dict[str, BasePlugin] = {}
        self.services: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)

    def register_service(self, name: str, service: Any):
        """
        Register a service that plugins can use.

        Args:
            name: Service name
            service: Service instance
        """
        self.services[name] = service
        self.logger.info(f"Registered service: {name}")

    async def load_plugin(self, plugin_class: Type[BasePlugin]) -> bool:
        """
        Load a plugin.

        Args:
            plugin_class: The plugin class to instantiate

        Returns:
            True if loaded successfully, False otherwise
        """
        try:
            plugin = plugin_class(
                bot=self.bot,
                db=self.db,
                config=self.config,
                services=self.services
            )

            plugin_name = plugin.name

            if plugin_name in self.plugins:
                self.logger.warning(f"Plugin already loaded: {plugin_name}")
                return False

            await plugin.on_load()

            self.dispatcher.include_router(plugin.get_router())

            self.plugins[plugin_name] = plugin

            self.logger.info(
                f"✅ Loaded plugin: {plugin_name} v{plugin.version} - {plugin.description}"
            )
            return True

        except Exception as e:
            self.logger.error(f"Failed to load plugin {plugin_class.__name__}: {e}", exc_info=True)
            return False

    async def load_all_plugins(self, plugin_classes: List[Type[BasePlugin]]):
        """
        Load multiple plugins.

        Args:
            plugin_classes: List of plugin classes to load
        """
        self.logger.info(f"Loading {len(plugin_classes)} plugins...")

        loaded_count = 0
        for plugin_class in plugin_classes:
            if await self.load_plugin(plugin_class):
                loaded_count += 1

        self.logger.info(f"✅ Loaded {loaded_count}/{len(plugin_classes)} plugins")

    async def unload_all_plugins(self):
        """Unload all plugins."""
        for plugin_name in list(self.plugins):
            plugin = self.plugins.pop(plugin_name)
            try:
                await plugin.on_unload()
            except Exception as e:
                self.logger.error(f"Failed to unload plugin {plugin_name}: {e}", exc_info=True)

        self.logger.info("✅ All plugins unloaded")

    def get_all_plugins(self) -> List[BasePlugin]:
        return list(self.plugins.values())

    def get_all_commands(self) -> List[Dict[str, str]]:
        """
        Get all commands from all loaded plugins.

        Returns:
            List of command dicts from all plugins
        """
        commands = []
        for plugin in self.plugins.values():
            commands.extend(plugin.get_commands())
        return commands
