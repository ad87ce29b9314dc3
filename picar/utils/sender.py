"""Delivery of reply elements to Telegram."""
import logging
from typing import List, Union

from aiogram.exceptions import TelegramAPIError
from aiogram.types import BufferedInputFile, InputMediaPhoto, Message

from picar.utils.elements import Forward, Image, Text, parse_inline, Reply

logger = logging.getLogger(__name__)

# Telegram accepts 2-10 items per media group
MEDIA_GROUP_LIMIT = 10

_EXTENSIONS = {"image/png": "png", "image/gif": "gif", "image/webp": "webp"}


async def send_reply(message: Message, reply: Reply) -> None:
    """
    Send a command reply in the chat of message.

    Strings may contain inline image markup; they are split into text and
    photo messages in order. Empty replies send nothing.
    """
    if reply is None or reply == "":
        logger.debug(f"Empty reply in chat={message.chat.id}, nothing to send")
        return

    if isinstance(reply, Forward):
        await _send_forward(message, reply)
    elif isinstance(reply, Image):
        await _send_segments(message, [reply])
    else:
        await _send_segments(message, parse_inline(reply))


async def _send_segments(message: Message, segments: List[Union[Text, Image]]) -> None:
    for segment in segments:
        try:
            if isinstance(segment, Image):
                await _send_image(message, segment)
            elif segment.content.strip():
                await message.answer(segment.content)
        except TelegramAPIError as e:
            logger.warning(f"Failed to deliver reply part in chat={message.chat.id}: {e}")


async def _send_image(message: Message, image: Image) -> None:
    if not image.is_inline:
        await message.answer_photo(photo=image.src)
        return

    mime = image.mime or "image/jpeg"
    upload = BufferedInputFile(image.decode(), filename=f"picar.{_EXTENSIONS.get(mime, 'jpg')}")
    if mime == "image/gif":
        await message.answer_animation(animation=upload)
    else:
        await message.answer_photo(photo=upload)


async def _send_forward(message: Message, forward: Forward) -> None:
    """Images go out as albums, sub-message texts as one trailing message."""
    images = [image for sub in forward.messages for image in sub.images]
    texts = [sub.text for sub in forward.messages if sub.text.strip()]

    for start in range(0, len(images), MEDIA_GROUP_LIMIT):
        chunk = images[start:start + MEDIA_GROUP_LIMIT]
        try:
            if len(chunk) == 1:
                await _send_image(message, chunk[0])
            else:
                await message.answer_media_group(
                    media=[InputMediaPhoto(media=image.src) for image in chunk]
                )
        except TelegramAPIError as e:
            logger.warning(f"Failed to deliver album in chat={message.chat.id}: {e}")

    if texts:
        await _send_segments(message, [Text("\n".join(texts))])
