from __future__ import annotations

import re
from enum import StrEnum

_ANSI_ESCAPE_REGEX = re.compile(r"\x1b\[[0-9;]*m")


class TerminalStyle(StrEnum):
    RESET = "\033[0m"
    DIM = "\033[2m"
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[0;33m"
    CYAN = "\033[0;36m"

    def apply(self, text: str, enabled: bool = True) -> str:
        if not enabled or not text:
            return text
        return f"{self.value}{text}{TerminalStyle.RESET.value}"


def strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE_REGEX.sub("", text)


def visible_length(text: str) -> int:
    return len(strip_ansi(text))
