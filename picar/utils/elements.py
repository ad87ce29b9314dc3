"""Reply elements - host-neutral building blocks for command replies."""
import base64
import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

BASE64_PREFIX = "base64://"

_INLINE_IMAGE_RE = re.compile(r'<image src="([^"]*)"(?: type="([^"]*)")?\s*/>')


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Image:
    """An image by reference: URL, Telegram file_id or base64:// payload."""

    src: str
    mime: Optional[str] = None

    @property
    def is_inline(self) -> bool:
        return self.src.startswith(BASE64_PREFIX)

    def decode(self) -> bytes:
        """Raw bytes of an inline (base64://) image."""
        if not self.is_inline:
            raise ValueError("Only base64:// images carry inline data")
        return base64.b64decode(self.src[len(BASE64_PREFIX):])


@dataclass(frozen=True)
class Author:
    id: str
    nickname: str


@dataclass
class Message:
    """One sub-message of a forwarded bundle."""

    parts: List[Union[Author, Image, Text]] = field(default_factory=list)

    @property
    def author(self) -> Optional[Author]:
        return next((p for p in self.parts if isinstance(p, Author)), None)

    @property
    def images(self) -> List[Image]:
        return [p for p in self.parts if isinstance(p, Image)]

    @property
    def text(self) -> str:
        return "".join(p.content for p in self.parts if isinstance(p, Text))


@dataclass
class Forward:
    """A bundle of sub-messages delivered together."""

    messages: List[Message] = field(default_factory=list)


Reply = Union[str, Image, Forward, None]


def inline_image(data: bytes, mime: str) -> str:
    """Format raw image bytes as inline image markup."""
    payload = base64.b64encode(data).decode("ascii")
    return f'<image src="{BASE64_PREFIX}{payload}" type="{mime}"/>'


def parse_inline(text: str) -> List[Union[Text, Image]]:
    """
    Split a resolved template into text and image segments.

    Empty text segments are dropped; order is preserved.
    """
    segments: List[Union[Text, Image]] = []
    position = 0
    for match in _INLINE_IMAGE_RE.finditer(text):
        if match.start() > position:
            segments.append(Text(text[position:match.start()]))
        segments.append(Image(src=match.group(1), mime=match.group(2)))
        position = match.end()
    if position < len(text):
        segments.append(Text(text[position:]))
    return [s for s in segments if not isinstance(s, Text) or s.content]
