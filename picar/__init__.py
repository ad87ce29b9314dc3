"""picar - Telegram bot replying with images from configured sources and a tagged gallery."""

__version__ = "1.0.0"
