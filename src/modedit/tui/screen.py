from __future__ import annotations

import typing

from rich import box as rich_box
from rich import console as rich_console
from rich import panel as rich_panel
from rich import segment as rich_segment
from rich import text as rich_text

from modedit.editor.session import RenderState
from modedit.tui import controls as tui_controls


Lines = typing.List[typing.List[rich_segment.Segment]]

# One border cell on each side of the text pane.
BORDER: typing.Final[int] = 1
MIN_PANE_HEIGHT: typing.Final[int] = 3


class Screen:
    """Draws a RenderState: a titled, bordered text pane over a status area."""

    def __init__(
        self,
        console: rich_console.Console | None = None,
        status_height_ratio: float = 0.1,
        alt_screen: bool = True,
    ) -> None:
        self._console: rich_console.Console = (
            console if console is not None else rich_console.Console()
        )
        self._status_height_ratio = status_height_ratio
        self._alt_screen = alt_screen
        self._top = 0

    @property
    def top(self) -> int:
        return self._top

    def __enter__(self) -> "Screen":
        if self._alt_screen:
            self._console.set_alt_screen(True)
        return self

    def __exit__(self, *exc_info: typing.Any) -> None:
        if self._alt_screen:
            self._console.set_alt_screen(False)
        self._console.show_cursor(True)

    def layout(self) -> tuple[int, int]:
        """Return (pane_height, status_height) for the current console size."""
        height = self._console.size.height
        status_height = max(1, int(height * self._status_height_ratio))
        pane_height = max(MIN_PANE_HEIGHT, height - status_height)
        return pane_height, status_height

    def _scroll_to(self, row: int, visible_rows: int) -> int:
        if row < self._top:
            self._top = row
        elif row >= self._top + visible_rows:
            self._top = row - visible_rows + 1
        return self._top

    def render(self, state: RenderState) -> Lines:
        width = self._console.size.width
        pane_height, status_height = self.layout()
        visible_rows = max(1, pane_height - 2 * BORDER)
        top = self._scroll_to(state.cursor_row, visible_rows)

        rows = state.full_text.split("\n")[top : top + visible_rows]
        body = rich_text.Text(
            "\n".join(rows),
            no_wrap=True,
            overflow="crop",
        )
        pane = rich_panel.Panel(
            body,
            title=rich_text.Text(state.title),
            box=rich_box.SQUARE,
            padding=0,
            height=pane_height,
        )
        status = rich_text.Text(state.status_line, no_wrap=True, overflow="crop")

        options = self._console.options.update(width=width)
        lines: Lines = []
        lines.extend(
            self._console.render_lines(pane, options.update(height=pane_height))
        )
        lines.extend(
            self._console.render_lines(status, options.update(height=status_height))
        )
        return lines

    def caret(self, state: RenderState) -> tuple[int, int]:
        return state.cursor_col + BORDER, state.cursor_row - self._top + BORDER

    def draw(self, state: RenderState) -> None:
        lines = self.render(state)

        batched: typing.List[rich_segment.Segment] = []
        for index, line in enumerate(lines):
            if index:
                batched.append(rich_segment.Segment.line())
            batched.extend(line)

        x, y = self.caret(state)
        self._console.control(
            tui_controls.CustomControl.sync_update_start(),
            tui_controls.CustomControl.cursor_home(),
        )
        self._console.print(rich_segment.Segments(batched), end="")
        self._console.control(
            tui_controls.CustomControl.erase_down(),
            tui_controls.CustomControl.cursor_position(x, y),
            tui_controls.CustomControl.sync_update_end(),
        )
