"""Command argument helpers."""
from typing import List, Optional


def is_missing_argument(arg: Optional[str]) -> bool:
    """
    Treat an argument as missing.

    Missing means None, empty or whitespace-only, or starting with "<"
    (an unresolved placeholder such as "<tag>" copied from a usage line).
    """
    if arg is None:
        return True
    arg = str(arg)
    return arg.strip() == "" or arg.startswith("<")


def parse_page(page: Optional[str]) -> int:
    """Parse a 1-indexed page number; anything unparsable or below 1 becomes 1."""
    try:
        number = int(str(page).strip())
    except (TypeError, ValueError):
        return 1
    return max(1, number)


def split_command(text: Optional[str]) -> List[str]:
    """
    Split a command line into its arguments, dropping the command itself.

    "/goodpic@picar_bot view cats 2" -> ["view", "cats", "2"]
    """
    if not text:
        return []
    return text.split()[1:]
