"""Run the picar bot in polling mode: `python bot.py`."""
from picar.main import run


if __name__ == "__main__":
    run()
