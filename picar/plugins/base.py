"""Base plugin interface for the picar plugin system."""
import logging
from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
from aiogram import Bot, Router
from database import Database

logger = logging.getLogger(__name__)


class BasePlugin(ABC):
    """
    Base class for picar plugins.

    A plugin owns a router with its command handlers and reaches the
    database and shared services (image_source, tag_store) through the
    manager that loads it.
    """

    def __init__(
        self,
        bot: Optional[Bot],
        db: Database,
        config: Any,
        services: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the plugin.

        Args:
            bot: The aiogram Bot instance (None when driven directly in tests)
            db: Database instance
            config: picar Config
            services: Shared services by name
        """
        self.bot = bot
        self.db = db
        self.config = config
        self.services = services or {}
        self.router = Router(name=self.__class__.__name__)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Plugin name."""
        pass

    @property
    def description(self) -> str:
        return "No description provided"

    @property
    def version(self) -> str:
        return "1.0.0"

    def service(self, name: str) -> Any:
        """
        Get a shared service.

        Raises:
            RuntimeError: If the service was not registered
        """
        service = self.services.get(name)
        if service is None:
            raise RuntimeError(f"Plugin {self.name} requires service '{name}'")
        return service

    async def on_load(self):
        """
        Called when plugin is loaded.

        Subclasses register their handlers here.
        """
        self.logger.info(f"Loading plugin: {self.name} v{self.version}")

    async def on_unload(self):
        """Called when plugin is unloaded."""
        self.logger.info(f"Unloading plugin: {self.name}")

    def get_commands(self) -> List[Dict[str, str]]:
        """
        Commands provided by this plugin, for the bot menu.

        Returns:
            List of dicts with 'command' and 'description' keys
            Example: [{"command": "/goodpic", "description": "Good pics by tag"}]
        """
        return []

    def get_router(self) -> Router:
        return self.router

    def __repr__(self):
        return f"<{self.__class__.__name__}(name={self.name}, version={self.version})>"
