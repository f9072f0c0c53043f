from __future__ import annotations

import enum
import typing


NEWLINE: typing.Final[str] = "\n"


class Direction(str, enum.Enum):
    left = "left"
    down = "down"
    up = "up"
    right = "right"


class Buffer:
    """Document text plus a (col, row) cursor.

    Lines are ``text.split("\\n")`` so a trailing newline opens a final empty
    line the cursor can reach. Every operation clamps instead of raising.
    """

    def __init__(self, text: str = "") -> None:
        self._lines: list[str] = text.split(NEWLINE)
        self._cursor_col = 0
        self._cursor_row = 0

    @property
    def text(self) -> str:
        return NEWLINE.join(self._lines)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def cursor_col(self) -> int:
        return self._cursor_col

    @property
    def cursor_row(self) -> int:
        return self._cursor_row

    @property
    def cursor(self) -> tuple[int, int]:
        return self._cursor_col, self._cursor_row

    def current_line(self) -> str:
        return self._lines[self._cursor_row]

    def offset(self) -> int:
        """Absolute index into ``text`` for the cursor position."""
        before = sum(len(line) + 1 for line in self._lines[: self._cursor_row])
        return before + self._cursor_col

    def set_cursor(self, col: int, row: int) -> None:
        row = max(0, min(row, len(self._lines) - 1))
        col = max(0, min(col, len(self._lines[row])))
        self._cursor_row = row
        self._cursor_col = col

    def move(self, direction: Direction, clamp_column: bool = True) -> None:
        col, row = self._cursor_col, self._cursor_row
        if direction is Direction.left:
            col = max(col - 1, 0)
        elif direction is Direction.right:
            last_index = max(len(self._lines[row]) - 1, 0)
            col = last_index if col >= last_index else col + 1
        elif direction is Direction.up:
            row = max(row - 1, 0)
        elif direction is Direction.down:
            row = min(row + 1, len(self._lines) - 1)

        # Vertical moves keep the column; shorter destination lines pull it back.
        if clamp_column and row != self._cursor_row:
            col = min(col, len(self._lines[row]))

        self._cursor_col = col
        self._cursor_row = row

    def insert_char(self, ch: str) -> None:
        if not ch:
            return
        if ch == NEWLINE:
            self._break_line()
            return
        line = self._lines[self._cursor_row]
        col = min(self._cursor_col, len(line))
        self._lines[self._cursor_row] = line[:col] + ch + line[col:]
        self._cursor_col = col + len(ch)

    def _break_line(self) -> None:
        line = self._lines[self._cursor_row]
        split_index = min(self._cursor_col, len(line))
        self._lines[self._cursor_row] = line[:split_index]
        insert_row = self._cursor_row + 1
        self._lines.insert(insert_row, line[split_index:])
        self._cursor_row = insert_row
        self._cursor_col = 0

    def delete_before_cursor(self) -> None:
        row = self._cursor_row
        line = self._lines[row]
        col = min(self._cursor_col, len(line))
        if col > 0:
            self._lines[row] = line[: col - 1] + line[col:]
            self._cursor_col = col - 1
            return
        if row == 0:
            return
        prev_line = self._lines[row - 1]
        self._lines[row - 1] = prev_line + line
        del self._lines[row]
        self._cursor_row = row - 1
        self._cursor_col = len(prev_line)
