from __future__ import annotations

import typing

from rich import control as rich_control
from rich import segment as rich_segment

SYNC_UPDATE_START: typing.Final[str] = "\x1b[?2026h"
SYNC_UPDATE_END: typing.Final[str] = "\x1b[?2026l"
CURSOR_HOME: typing.Final[str] = "\x1b[H"
ERASE_DOWN: typing.Final[str] = "\x1b[J"
CURSOR_POSITION_FMT: typing.Final[str] = "\x1b[{};{}H"


class CustomControl(rich_control.Control):
    __slots__ = ("segment",)

    def __init__(self, text: str) -> None:
        self.segment = rich_segment.Segment(text)

    @classmethod
    def sync_update_start(cls) -> "CustomControl":
        return cls(SYNC_UPDATE_START)

    @classmethod
    def sync_update_end(cls) -> "CustomControl":
        return cls(SYNC_UPDATE_END)

    @classmethod
    def cursor_home(cls) -> "CustomControl":
        return cls(CURSOR_HOME)

    @classmethod
    def erase_down(cls) -> "CustomControl":
        return cls(ERASE_DOWN)

    @classmethod
    def cursor_position(cls, x: int, y: int) -> "CustomControl":
        # 0-based cell coordinates; the escape sequence itself is 1-based.
        return cls(CURSOR_POSITION_FMT.format(y + 1, x + 1))
