from __future__ import annotations

import typing
from dataclasses import dataclass
from pathlib import Path

from modedit import files
from modedit.editor import commands as cmd
from modedit.editor import mode as mode_mod
from modedit.editor import parser
from modedit.editor.buffer import Buffer, Direction
from modedit.editor.commands import Command
from modedit.logger import logger
from modedit.settings import EditorSettings
from modedit.tui.input import base as input_base


Saver = typing.Callable[[Path, str], int]

# Arrow keys are routed through the h/j/k/l tokens so Insert mode moves with
# the same clamping rules as Normal mode.
ARROW_TOKENS: typing.Final[dict[str, str]] = {
    "left": "h",
    "down": "j",
    "up": "k",
    "right": "l",
}

_DIRECTIONS: typing.Final[dict[Command, Direction]] = {
    Command.move_left: Direction.left,
    Command.move_down: Direction.down,
    Command.move_up: Direction.up,
    Command.move_right: Direction.right,
}

CONFIRM_HINT: typing.Final[str] = "[Enter] confirm  [Esc] cancel"


@dataclass(frozen=True)
class RenderState:
    full_text: str
    status_line: str
    cursor_col: int
    cursor_row: int
    title: str
    mode_name: str


def _printable(token: str) -> str:
    return "".join(ch for ch in token if ch.isprintable())


class Session:
    """Single editing session: buffer, mode and pending token.

    ``step`` is one loop iteration: route the key (if any), parse the
    token, apply the resulting command.
    """

    def __init__(
        self,
        text: str = "",
        path: Path | None = None,
        settings: EditorSettings | None = None,
        saver: Saver = files.save_text,
    ) -> None:
        self.settings = settings if settings is not None else EditorSettings()
        self.buffer = Buffer(text)
        self.mode: mode_mod.Mode = mode_mod.NORMAL
        self.token = ""
        self.path = path
        self.exit_requested = False
        self.status_message: str | None = None
        self._saver = saver

    @property
    def title(self) -> str:
        if self.path is None:
            return self.settings.default_title
        return str(self.path)

    @property
    def target_path(self) -> Path:
        if self.path is None:
            return Path(self.settings.default_title)
        return self.path

    def step(self, event: input_base.KeyEvent | None = None) -> RenderState:
        if event is not None:
            self.handle_key(event)
        command = parser.parse(
            self.token,
            self.mode,
            cancel_on_unknown=self.settings.cancel_confirm_on_unknown_key,
        )
        if command is not None:
            self.apply(command)
        elif isinstance(self.mode, mode_mod.Normal) and self.token:
            # Unrecognized Normal-mode input is dropped.
            self.token = ""
        return self.snapshot()

    def handle_key(self, event: input_base.KeyEvent) -> None:
        self.status_message = None
        if isinstance(self.mode, mode_mod.Waiting):
            self._handle_waiting_key(self.mode, event)
        elif isinstance(self.mode, mode_mod.Insert):
            self._handle_insert_key(event)
        else:
            self._handle_normal_key(event)

    def _handle_normal_key(self, event: input_base.KeyEvent) -> None:
        if event.is_char:
            self.token += typing.cast(str, event.text)
        elif event.key == "enter":
            self.token += cmd.ENTER
        elif event.key == "esc":
            self.token = cmd.ESCAPE
        elif event.key in ARROW_TOKENS:
            self.token = ARROW_TOKENS[event.key]

    def _handle_waiting_key(
        self, waiting: mode_mod.Waiting, event: input_base.KeyEvent
    ) -> None:
        if event.is_char:
            self.mode = waiting.with_pending(typing.cast(str, event.text))
        elif event.key == "enter":
            self.mode = waiting.with_pending(cmd.ENTER)
        elif event.key == "esc":
            self.mode = waiting.with_pending(cmd.ESCAPE)

    def _handle_insert_key(self, event: input_base.KeyEvent) -> None:
        if event.is_char:
            self.buffer.insert_char(typing.cast(str, event.text))
        elif event.key == "enter":
            self.buffer.insert_char(cmd.ENTER)
        elif event.key == "backspace":
            self.buffer.delete_before_cursor()
        elif event.key == "esc":
            self.token = cmd.ESCAPE
        elif event.key in ARROW_TOKENS:
            self.token = ARROW_TOKENS[event.key]

    def apply(self, command: Command) -> None:
        previous = self.mode
        trigger = self.token[:1] or None
        self.mode = mode_mod.transition(self.mode, command, trigger=trigger)
        logger.debug("Command applied", command=command.value, mode=self.mode.name)
        if self.mode != previous:
            logger.debug(
                "Mode changed",
                command=command.value,
                previous=previous.name,
                current=self.mode.name,
            )

        if command in _DIRECTIONS:
            self.buffer.move(
                _DIRECTIONS[command],
                clamp_column=self.settings.clamp_column_on_vertical_move,
            )
            self.token = ""
        elif command is Command.request_confirm:
            return
        elif command is Command.save:
            self.token = ""
            self._save()
        elif command is Command.quit:
            self.token = ""
            self.exit_requested = True
            logger.info("Quit confirmed", path=self.title)
        else:
            self.token = ""

    def _save(self) -> None:
        path = self.target_path
        try:
            written = self._saver(path, self.buffer.text)
        except files.SaveError as exc:
            logger.error("Save failed", path=str(path), error=exc.reason)
            self.status_message = f"error writing {path}: {exc.reason}"
            return
        self.status_message = f'"{path}" written, {written} chars'

    def status_line(self) -> str:
        if self.status_message is not None:
            return self.status_message
        token = _printable(self.token)
        if isinstance(self.mode, mode_mod.Waiting):
            return f"{token}  {CONFIRM_HINT}"
        return token

    def snapshot(self) -> RenderState:
        return RenderState(
            full_text=self.buffer.text,
            status_line=self.status_line(),
            cursor_col=self.buffer.cursor_col,
            cursor_row=self.buffer.cursor_row,
            title=self.title,
            mode_name=self.mode.name,
        )
