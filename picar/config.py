"""Configuration loader for the bot with validation."""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_COMMAND = "picar"
DEFAULT_URL = "https://example.com"
DEFAULT_TEMPLATE = "{pict}"


@dataclass(frozen=True)
class ConfigItem:
    """One picture command: command name, image source and reply template."""

    command: str = DEFAULT_COMMAND
    url: str = DEFAULT_URL  # directory path or remote JSON list URL
    template: str = DEFAULT_TEMPLATE

    @classmethod
    def from_dict(cls, data: dict) -> "ConfigItem":
        """Build an item from a config mapping, filling missing fields with defaults."""
        if not isinstance(data, dict):
            raise ValueError(f"Picture command entry must be an object, got {type(data).__name__}")
        return cls(
            command=data.get("command", DEFAULT_COMMAND),
            url=data.get("url", DEFAULT_URL),
            template=data.get("template", DEFAULT_TEMPLATE),
        )


def parse_picture_commands(raw: Any) -> List[ConfigItem]:
    """
    Parse the picture command list.

    Args:
        raw: JSON text or an already decoded list of mappings

    Returns:
        List of ConfigItem (empty when raw is empty)
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        raw = json.loads(raw)
    if isinstance(raw, dict):
        # Accept the {"config": [...]} shape as well as a bare list
        raw = raw.get("config", [])
    if not isinstance(raw, list):
        raise ValueError("Picture commands must be a JSON array of {command, url, template} objects")
    return [ConfigItem.from_dict(entry) for entry in raw]


@dataclass
class Config:
    """
    Bot configuration from environment variables.

    All settings are validated on load to fail fast if misconfigured.
    """

    # Telegram Bot
    bot_token: str

    # Database
    database_url: str = ""
    auto_create_tables: bool = False

    # Picture commands
    picture_commands: List[ConfigItem] = field(default_factory=list)

    # Filesystem
    base_dir: Path = field(default_factory=Path.cwd)
    data_dir: Optional[Path] = None

    # Logging
    log_level: str = "INFO"
    log_file: str = "picar.log"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.base_dir = Path(self.base_dir)
        if self.data_dir is None:
            self.data_dir = self.base_dir / "data"
        else:
            self.data_dir = Path(self.data_dir)

        for item in self.picture_commands:
            if not isinstance(item.command, str) or not item.command.strip():
                raise ValueError("Every picture command needs a non-empty command name")
            if not isinstance(item.url, str) or not isinstance(item.template, str):
                raise ValueError(f"Picture command '{item.command}' needs string url and template")

        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Raises:
            RuntimeError: If required environment variables are missing
            ValueError: If configuration values are invalid
        """
        bot_token = os.getenv("BOT_TOKEN")
        if not bot_token:
            raise RuntimeError("BOT_TOKEN environment variable is required")

        commands_file = os.getenv("PICAR_COMMANDS_FILE")
        if commands_file:
            try:
                raw_commands = Path(commands_file).read_text(encoding="utf-8")
            except OSError as e:
                raise RuntimeError(f"Cannot read PICAR_COMMANDS_FILE {commands_file}: {e}") from e
        else:
            raw_commands = os.getenv("PICAR_COMMANDS", "")

        try:
            picture_commands = parse_picture_commands(raw_commands)
        except json.JSONDecodeError as e:
            raise ValueError(f"Picture commands are not valid JSON: {e}") from e

        base_dir = os.getenv("PICAR_BASE_DIR")
        data_dir = os.getenv("PICAR_DATA_DIR")

        return cls(
            bot_token=bot_token,
            database_url=os.getenv("DATABASE_URL", ""),
            auto_create_tables=os.getenv("PICAR_AUTO_CREATE_TABLES", "false").lower() == "true",
            picture_commands=picture_commands,
            base_dir=Path(base_dir) if base_dir else Path.cwd(),
            data_dir=Path(data_dir) if data_dir else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "picar.log"),
        )
