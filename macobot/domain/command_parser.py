"""Command recognition — pure Python, no framework dependencies."""

import re
from functools import lru_cache
from typing import Optional, Pattern

from macobot.domain.models import ParsedCommand

UPTIME_COMMAND = "uptime"


@lru_cache(maxsize=8)
def command_pattern(sigil: str = "=") -> Pattern:
    """Regex for ``<sigil><word>[<whitespace><remainder>]`` anchored at both ends."""
    return re.compile(
        rf"{re.escape(sigil)}([A-Za-z0-9_]+)(?:\s+(.*\S.*))?\s*",
        re.DOTALL,
    )


COMMAND_RE = command_pattern("=")


def parse_command(text: str, sigil: str = "=") -> Optional[ParsedCommand]:
    """Return the command in ``text`` or None when it is not an invocation."""
    if not text:
        return None
    m = command_pattern(sigil).fullmatch(text)
    if not m:
        return None
    return ParsedCommand(name=m.group(1), remainder=m.group(2))
