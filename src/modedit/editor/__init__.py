from .buffer import Buffer, Direction
from .commands import Command
from .mode import INSERT, NORMAL, Insert, InvalidTransition, Mode, Normal, Waiting
from .parser import parse

__all__ = [
    "Buffer",
    "Direction",
    "Command",
    "Mode",
    "Normal",
    "Insert",
    "Waiting",
    "NORMAL",
    "INSERT",
    "InvalidTransition",
    "parse",
]
