from __future__ import annotations

import enum
import typing


ESCAPE: typing.Final[str] = "\x1b"
ENTER: typing.Final[str] = "\n"


class Command(str, enum.Enum):
    move_left = "move_left"
    move_down = "move_down"
    move_up = "move_up"
    move_right = "move_right"
    enter_insert = "enter_insert"
    exit_to_normal = "exit_to_normal"
    request_confirm = "request_confirm"
    save = "save"
    quit = "quit"


MOVES: typing.Final[frozenset[Command]] = frozenset(
    {Command.move_left, Command.move_down, Command.move_up, Command.move_right}
)

MOVE_KEYS: typing.Final[dict[str, Command]] = {
    "h": Command.move_left,
    "j": Command.move_down,
    "k": Command.move_up,
    "l": Command.move_right,
}

# Keys whose action must be confirmed with Enter before it runs.
CONFIRM_KEYS: typing.Final[dict[str, Command]] = {
    "q": Command.quit,
    "w": Command.save,
}
