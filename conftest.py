"""Shared fixtures: throwaway SQLite database, services and plugins wired without Telegram."""
import pytest

from database.db import Database
from picar.config import Config
from picar.plugins.gallery import GalleryPlugin
from picar.services.tag_store import TagStoreService


class FakeChat:
    def __init__(self, chat_id: int = -100123):
        self.id = chat_id


class FakeMessage:
    """Records what send_reply delivers."""

    def __init__(self):
        self.chat = FakeChat()
        self.sent = []

    async def answer(self, text, **kwargs):
        self.sent.append(("text", text))

    async def answer_photo(self, photo, **kwargs):
        self.sent.append(("photo", photo))

    async def answer_animation(self, animation, **kwargs):
        self.sent.append(("animation", animation))

    async def answer_media_group(self, media, **kwargs):
        self.sent.append(("album", [item.media for item in media]))


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'picar.db'}")
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def tag_store(database):
    return TagStoreService(database)


@pytest.fixture
def config(tmp_path):
    return Config(bot_token="123:test", base_dir=tmp_path)


@pytest.fixture
def gallery(database, tag_store, config):
    return GalleryPlugin(bot=None, db=database, config=config, services={"tag_store": tag_store})


@pytest.fixture
def fake_message():
    return FakeMessage()
