"""Command session - the slice of an incoming message that commands need."""
from dataclasses import dataclass, field
from typing import List, Optional

from aiogram.types import Message

from picar.utils.arguments import split_command

UNKNOWN_UPLOADER = "unknown user"


@dataclass
class CommandSession:
    """
    Narrow view of the invoking message.

    Keeps command logic independent from aiogram so it can run against
    plain values in tests.
    """

    user_id: Optional[str] = None
    username: Optional[str] = None
    args: List[str] = field(default_factory=list)
    attachments: List[str] = field(default_factory=list)
    quote_attachments: List[str] = field(default_factory=list)

    @property
    def uploader(self) -> str:
        return self.username or UNKNOWN_UPLOADER

    @property
    def uploader_id(self) -> int:
        """Numeric user id, 0 when it cannot be parsed."""
        try:
            return int(self.user_id)
        except (TypeError, ValueError):
            return 0

    def arg(self, index: int) -> Optional[str]:
        return self.args[index] if index < len(self.args) else None

    @classmethod
    def from_message(cls, message: Message, skip: int = 0) -> "CommandSession":
        """
        Build a session from an aiogram message.

        Args:
            message: The invoking message
            skip: Number of leading arguments to drop (e.g. a subcommand name)
        """
        user = message.from_user
        username = None
        if user:
            username = user.username or user.full_name or None

        return cls(
            user_id=str(user.id) if user else None,
            username=username,
            args=split_command(message.text or message.caption)[skip:],
            attachments=photo_refs(message),
            quote_attachments=photo_refs(message.reply_to_message) if message.reply_to_message else [],
        )


def photo_refs(message: Optional[Message]) -> List[str]:
    """file_id of the largest size of every photo on a message."""
    if message is None or not message.photo:
        return []
    # Telegram sends one photo per message in several sizes; the last is the largest.
    return [message.photo[-1].file_id]
