"""Picture commands plugin - one configured command per image source."""
from typing import Dict, List

from aiogram.filters import Command
from aiogram.types import Message

from picar.config import ConfigItem
from picar.plugins.base import BasePlugin
from picar.services.image_source import ImageSourceService
from picar.utils.sender import send_reply


class PictureCommandsPlugin(BasePlugin):
    """Binds each configured {command, url, template} to a chat command."""

    @property
    def name(self) -> str:
        return "picture_commands"

    @property
    def description(self) -> str:
        return "Configured commands that reply with images from a directory or a remote list"

    @property
    def items(self) -> List[ConfigItem]:
        return list(getattr(self.config, "picture_commands", None) or [])

    @property
    def image_source(self) -> ImageSourceService:
        return self.service("image_source")

    async def on_load(self):
        """Register one handler per configured picture command."""
        await super().on_load()
        for item in self.items:
            self.logger.debug(f"Registering command: {item.command} -> {item.url}")
            self.router.message.register(self._make_handler(item), Command(item.command))

    def get_commands(self) -> List[Dict[str, str]]:
        return [
            {"command": f"/{item.command}", "description": "picture car"}
            for item in self.items
        ]

    async def run(self, item: ConfigItem) -> str:
        """Resolve the reply of one picture command."""
        self.logger.debug(f"using command: {item.command} -> {item.url}")
        return await self.image_source.resolve_template(item.template, item.url)

    def _make_handler(self, item: ConfigItem):
        async def handler(message: Message):
            self.logger.info(
                f"[CMD]/{item.command} chat={message.chat.id} "
                f"from={message.from_user.id if message.from_user else None}"
            )
            await send_reply(message, await self.run(item))

        handler.__name__ = f"cmd_{item.command}"
        return handler
