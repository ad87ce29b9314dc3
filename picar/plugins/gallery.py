"""Gallery plugin - save, browse and draw good pics by tag."""
import math
import random

from aiogram.filters import Command
from aiogram.types import Message

from picar.core.session import CommandSession
from picar.plugins.base import BasePlugin
from picar.services.tag_store import TagStoreService
from picar.utils import messages
from picar.utils.arguments import is_missing_argument, parse_page, split_command
from picar.utils.elements import Author, Forward, Image, Message as SubMessage, Reply, Text
from picar.utils.sender import send_reply

PAGE_SIZE = messages.PAGE_SIZE


class GalleryPlugin(BasePlugin):
    """/goodpic and its subcommands: random, view, list, add, help."""

    def __init__(self, bot, db, config, services):
        super().__init__(bot, db, config, services)
        self.rng = random.Random()
        self.subcommands = {
            "random": self.random_by_tag,
            "view": self.list_by_tag,
            "list": self.list_tags,
            "add": self.add_to_tag,
        }

    @property
    def name(self) -> str:
        return "gallery"

    @property
    def description(self) -> str:
        return "Tagged image gallery (/goodpic)"

    @property
    def tag_store(self) -> TagStoreService:
        return self.service("tag_store")

    async def on_load(self):
        """Register all handlers for this plugin."""
        await super().on_load()
        self.router.message.register(self.cmd_goodpic, Command(messages.GALLERY_COMMAND))

    def get_commands(self) -> list:
        return [
            {"command": f"/{messages.GALLERY_COMMAND}", "description": "Good pics by tag (help, random, view, list, add)"},
        ]

    # Commands

    async def cmd_goodpic(self, message: Message):
        """Dispatch /goodpic <subcommand> [args...]."""
        args = split_command(message.text or message.caption)
        subcommand = args[0].lower() if args else "help"
        self.logger.info(
            f"[CMD]/{messages.GALLERY_COMMAND} {subcommand} chat={message.chat.id} "
            f"from={message.from_user.id if message.from_user else None}"
        )

        action = self.subcommands.get(subcommand)
        if action is None:
            await send_reply(message, messages.help_message())
            return

        session = CommandSession.from_message(message, skip=1)
        await send_reply(message, await action(session))

    async def random_by_tag(self, session: CommandSession) -> Reply:
        """Random image, from one tag if a tag was given, else from all images."""
        tag = session.arg(0)
        urls = await self.tag_store.image_urls(None if is_missing_argument(tag) else tag)
        if not urls:
            return messages.no_images_message()

        return Image(src=self.rng.choice(urls))

    async def list_by_tag(self, session: CommandSession) -> Reply:
        """One page of the images under a tag, as a forwarded bundle."""
        tag = session.arg(0)
        if is_missing_argument(tag):
            return messages.view_usage_message()

        urls = await self.tag_store.image_urls(tag)
        if not urls:
            return messages.tag_empty_message(tag)

        page = parse_page(session.arg(1))
        total_pages = math.ceil(len(urls) / PAGE_SIZE)
        if page > total_pages:
            return messages.page_out_of_range_message(page, total_pages)

        start = (page - 1) * PAGE_SIZE
        author = Author(id=str(session.user_id or ""), nickname=session.uploader)

        bundle = [SubMessage([author, Image(src=url)]) for url in urls[start:start + PAGE_SIZE]]
        bundle.append(SubMessage([
            author,
            Text(messages.page_info_message(tag, page, total_pages, len(urls))),
        ]))
        return Forward(bundle)

    async def list_tags(self, session: CommandSession) -> Reply:
        """Every known tag, one line each."""
        rows = await self.tag_store.tag_names()
        if not rows:
            return messages.no_tags_message()

        # dict keeps first-seen order
        return messages.tag_list_message(dict.fromkeys(rows))

    async def add_to_tag(self, session: CommandSession) -> Reply:
        """Save the images of the replied-to message and of this message under a tag."""
        tag = session.arg(0)
        if is_missing_argument(tag):
            return messages.add_usage_message()

        images = list(session.quote_attachments)
        for ref in session.attachments:
            images.append(ref)
            self.logger.info(f"Image detected: {ref}")

        if not images:
            return messages.no_attachments_message()

        await self.tag_store.ensure_tag(tag)
        count = await self.tag_store.add_images(
            tag,
            images,
            uploader=session.uploader,
            uploader_id=session.uploader_id,
        )
        return messages.images_added_message(tag, count)
