"""Service container - wires configuration and the picar services."""
import logging
from dataclasses import dataclass
from typing import Optional

from database import Database
from picar.config import Config
from picar.services.image_source import ImageSourceService
from picar.services.tag_store import TagStoreService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Simple dependency container to share services across plugins."""

    config: Config
    image_source: ImageSourceService
    tag_store: TagStoreService

    @classmethod
    async def create(cls, config: Config, database: Optional[Database] = None) -> "ServiceContainer":
        """
        Build the service container with all dependencies.

        Args:
            config: Loaded Config instance
            database: Database handle (defaults to the shared one)

        Returns:
            ServiceContainer with initialized services
        """
        logger.info("Building service container...")

        image_source = ImageSourceService(base_dir=config.base_dir, data_dir=config.data_dir)
        tag_store = TagStoreService(database)

        logger.info("Service container ready")

        return cls(
            config=config,
            image_source=image_source,
            tag_store=tag_store,
        )

    def services(self) -> dict:
        """Services by the names plugins look them up with."""
        return {
            "image_source": self.image_source,
            "tag_store": self.tag_store,
        }

    async def cleanup(self):
        """Release HTTP resources."""
        await self.image_source.close()
        logger.info("Service container cleanup complete")
