"""
Tests for configuration, plugin wiring and reply delivery.
Exercises the bot plumbing without a live Telegram connection.
"""
from datetime import datetime

import pytest
from aiogram import Dispatcher
from aiogram.types import BufferedInputFile, Chat, Message, PhotoSize, User

from database.db import Database
from picar.config import Config, ConfigItem, parse_picture_commands
from picar.container import ServiceContainer
from picar.core.bot import PicarBot
from picar.core.plugin_manager import PluginManager
from picar.core.session import CommandSession
from picar.plugins import GalleryPlugin, PictureCommandsPlugin
from picar.utils.arguments import is_missing_argument, parse_page, split_command
from picar.utils.elements import (
    Author, Forward, Image, Message as SubMessage, Text, inline_image, parse_inline,
)
from picar.utils.sender import send_reply


class FakeImageSource:
    def __init__(self):
        self.calls = []

    async def resolve_template(self, template, source):
        self.calls.append((template, source))
        return f"resolved:{template}@{source}"


# Configuration

def test_picture_commands_defaults():
    items = parse_picture_commands('[{}, {"command": "cat", "url": "pics/cats"}]')

    assert items == [
        ConfigItem("picar", "https://example.com", "{pict}"),
        ConfigItem("cat", "pics/cats", "{pict}"),
    ]


def test_picture_commands_accepts_config_object():
    items = parse_picture_commands({"config": [{"command": "dog", "template": "woof {pict}"}]})

    assert items == [ConfigItem("dog", "https://example.com", "woof {pict}")]


@pytest.mark.parametrize("raw", ["", None, "[]"])
def test_picture_commands_empty(raw):
    assert parse_picture_commands(raw) == []


@pytest.mark.parametrize("raw", ['"just a string"', "[1, 2]"])
def test_picture_commands_invalid(raw):
    with pytest.raises(ValueError):
        parse_picture_commands(raw)


def test_config_rejects_blank_command(tmp_path):
    with pytest.raises(ValueError):
        Config(bot_token="t", base_dir=tmp_path, picture_commands=[ConfigItem(command="  ")])


def test_config_from_env(monkeypatch, tmp_path):
    commands_file = tmp_path / "commands.json"
    commands_file.write_text('[{"command": "cat", "url": "cats"}]', encoding="utf-8")
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("PICAR_COMMANDS_FILE", str(commands_file))
    monkeypatch.setenv("PICAR_BASE_DIR", str(tmp_path))
    monkeypatch.delenv("PICAR_DATA_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = Config.from_env()

    assert config.picture_commands == [ConfigItem("cat", "cats", "{pict}")]
    assert config.base_dir == tmp_path
    assert config.data_dir == tmp_path / "data"
    assert config.log_level == "DEBUG"


def test_config_requires_token(monkeypatch):
    monkeypatch.delenv("BOT_TOKEN", raising=False)

    with pytest.raises(RuntimeError, match="BOT_TOKEN"):
        Config.from_env()


# Arguments

@pytest.mark.parametrize("arg,missing", [
    (None, True), ("", True), ("  \t", True), ("<tag>", True), ("<", True),
    ("cats", False), ("a<b", False), (" cats", False),
])
def test_missing_argument_heuristic(arg, missing):
    assert is_missing_argument(arg) is missing


def test_parse_page_and_split_command():
    assert parse_page("3") == 3
    assert parse_page(" 2 ") == 2
    assert parse_page("x") == 1
    assert split_command("/goodpic@picar_bot view cats 2") == ["view", "cats", "2"]
    assert split_command(None) == []


# Sessions

def test_session_from_message_collects_quote_first():
    chat = Chat(id=-100, type="supergroup")
    quoted = Message(
        message_id=1,
        date=datetime.now(),
        chat=chat,
        photo=[
            PhotoSize(file_id="quoted-small", file_unique_id="qs", width=90, height=90),
            PhotoSize(file_id="quoted-large", file_unique_id="ql", width=900, height=900),
        ],
    )
    message = Message(
        message_id=2,
        date=datetime.now(),
        chat=chat,
        from_user=User(id=42, is_bot=False, first_name="Alice", username="alice"),
        caption="/goodpic add cats",
        photo=[PhotoSize(file_id="own-large", file_unique_id="ol", width=800, height=800)],
        reply_to_message=quoted,
    )

    session = CommandSession.from_message(message, skip=1)

    assert session.args == ["cats"]
    assert session.quote_attachments == ["quoted-large"]
    assert session.attachments == ["own-large"]
    assert session.uploader == "alice"
    assert session.uploader_id == 42


# Elements

def test_parse_inline_splits_text_and_images():
    image = inline_image(b"abc", "image/png")

    segments = parse_inline(f"hello {image} world{image}")

    assert segments[0] == Text("hello ")
    assert segments[1].mime == "image/png" and segments[1].decode() == b"abc"
    assert segments[2] == Text(" world")
    assert segments[3].is_inline
    assert parse_inline("") == []


# Plugins

async def test_picture_commands_plugin_registers_each_item(tmp_path):
    config = Config(
        bot_token="t",
        base_dir=tmp_path,
        picture_commands=[ConfigItem("cat", "cats", "meow {pict}"), ConfigItem("dog", "https://x.example.com/d.json")],
    )
    image_source = FakeImageSource()
    plugin = PictureCommandsPlugin(bot=None, db=None, config=config, services={"image_source": image_source})

    await plugin.on_load()

    assert len(plugin.router.message.handlers) == 2
    assert [c["command"] for c in plugin.get_commands()] == ["/cat", "/dog"]
    assert await plugin.run(config.picture_commands[0]) == "resolved:meow {pict}@cats"
    assert image_source.calls == [("meow {pict}", "cats")]


async def test_picture_command_handler_sends_resolved_reply(tmp_path, monkeypatch):
    config = Config(bot_token="t", base_dir=tmp_path, picture_commands=[ConfigItem("cat", "cats", "meow {pict}")])
    plugin = PictureCommandsPlugin(bot=None, db=None, config=config, services={"image_source": FakeImageSource()})
    sent = []

    async def record(message, reply):
        sent.append((message, reply))

    monkeypatch.setattr("picar.plugins.picture_commands.send_reply", record)
    await plugin.on_load()
    message = Message(
        message_id=3,
        date=datetime.now(),
        chat=Chat(id=-100, type="supergroup"),
        from_user=User(id=42, is_bot=False, first_name="Alice"),
        text="/cat",
    )

    await plugin.router.message.handlers[0].callback(message)

    assert sent == [(message, "resolved:meow {pict}@cats")]


async def test_plugin_manager_loads_plugins(tmp_path, database):
    config = Config(bot_token="t", base_dir=tmp_path, picture_commands=[ConfigItem("cat", "cats")])
    container = await ServiceContainer.create(config, database)
    manager = PluginManager(bot=None, dispatcher=Dispatcher(), db=database, config=config)
    for name, service in container.services().items():
        manager.register_service(name, service)

    await manager.load_all_plugins([GalleryPlugin, PictureCommandsPlugin, GalleryPlugin])

    assert sorted(p.name for p in manager.get_all_plugins()) == ["gallery", "picture_commands"]
    assert [c["command"] for c in manager.get_all_commands()] == ["/goodpic", "/cat"]

    await manager.unload_all_plugins()
    await container.cleanup()
    assert manager.get_all_plugins() == []


# Delivery

async def test_send_reply_text_and_inline_images(fake_message):
    await send_reply(fake_message, f"hi {inline_image(b'png', 'image/png')} {inline_image(b'gif', 'image/gif')}")

    kinds = [kind for kind, _ in fake_message.sent]
    assert kinds == ["text", "photo", "animation"]
    assert isinstance(fake_message.sent[1][1], BufferedInputFile)
    assert fake_message.sent[1][1].filename == "picar.png"


async def test_send_reply_skips_empty(fake_message):
    await send_reply(fake_message, "")
    await send_reply(fake_message, None)

    assert fake_message.sent == []


async def test_send_reply_stored_image(fake_message):
    await send_reply(fake_message, Image(src="AgACAgIAAxkBAAI"))

    assert fake_message.sent == [("photo", "AgACAgIAAxkBAAI")]


async def test_send_reply_forward_uses_albums(fake_message):
    author = Author(id="42", nickname="alice")
    bundle = [SubMessage([author, Image(src=f"file-{i}")]) for i in range(11)]
    bundle.append(SubMessage([author, Text("page 1/1")]))

    await send_reply(fake_message, Forward(bundle))

    assert fake_message.sent == [
        ("album", [f"file-{i}" for i in range(10)]),
        ("photo", "file-10"),
        ("text", "page 1/1"),
    ]


# Database

async def test_database_health_check(database):
    assert await database.health_check() is True


async def test_database_health_check_unreachable(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'picar.db'}")

    assert await db.health_check() is False
    await db.close()


async def test_initialize_refuses_unreachable_database(tmp_path):
    config = Config(
        bot_token="123:test",
        base_dir=tmp_path,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'picar.db'}",
        auto_create_tables=True,
    )
    bot = PicarBot(config)

    with pytest.raises(RuntimeError, match="not reachable"):
        await bot.initialize()

    assert bot.container is None
    await bot.db.close()
