from __future__ import annotations

import typing
from dataclasses import dataclass, replace

from modedit.editor.commands import MOVES, Command


class InvalidTransition(ValueError):
    def __init__(self, mode: "Mode", command: Command) -> None:
        super().__init__(f"{command.value} is not allowed in {mode.name} mode")
        self.mode = mode
        self.command = command


@dataclass(frozen=True)
class Normal:
    name: typing.ClassVar[str] = "NORMAL"


@dataclass(frozen=True)
class Insert:
    name: typing.ClassVar[str] = "INSERT"


@dataclass(frozen=True)
class Waiting:
    """Armed destructive action awaiting a second keystroke.

    ``trigger`` is the Normal-mode key that armed it ('q' or 'w');
    ``pending`` is the latest key captured since arming, if any.
    """

    trigger: str
    pending: str | None = None
    name: typing.ClassVar[str] = "WAITING"

    @property
    def armed(self) -> bool:
        return self.pending is None

    def with_pending(self, ch: str) -> "Waiting":
        return replace(self, pending=ch)


Mode = typing.Union[Normal, Insert, Waiting]

NORMAL: typing.Final[Normal] = Normal()
INSERT: typing.Final[Insert] = Insert()


def transition(mode: Mode, command: Command, trigger: str | None = None) -> Mode:
    """Return the mode that follows ``command`` in ``mode``.

    ``trigger`` is the arming key and is required when Normal receives
    ``request_confirm``. Waiting only ever resolves back to Normal.
    """
    if isinstance(mode, Normal):
        if command is Command.enter_insert:
            return INSERT
        if command is Command.request_confirm:
            if not trigger:
                raise InvalidTransition(mode, command)
            return Waiting(trigger=trigger)
        if command is Command.exit_to_normal or command in MOVES:
            return mode
        raise InvalidTransition(mode, command)

    if isinstance(mode, Insert):
        if command is Command.exit_to_normal:
            return NORMAL
        if command in MOVES:
            return mode
        raise InvalidTransition(mode, command)

    if command is Command.request_confirm:
        return mode
    if command in (Command.exit_to_normal, Command.save, Command.quit):
        return NORMAL
    raise InvalidTransition(mode, command)
