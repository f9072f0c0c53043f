from __future__ import annotations

from modedit.editor import commands as cmd
from modedit.editor import mode as mode_mod
from modedit.editor.commands import Command


def parse_normal_key(ch: str | None, confirmed: bool = False) -> Command | None:
    if ch is None:
        return None
    if ch in cmd.MOVE_KEYS:
        return cmd.MOVE_KEYS[ch]
    if ch == "i":
        return Command.enter_insert
    if ch == cmd.ESCAPE:
        return Command.exit_to_normal
    if ch in cmd.CONFIRM_KEYS:
        return cmd.CONFIRM_KEYS[ch] if confirmed else Command.request_confirm
    return None


def parse(
    token: str,
    mode: mode_mod.Mode,
    cancel_on_unknown: bool = False,
) -> Command | None:
    """Map the pending token to a command under ``mode``.

    Normal looks at the first character of the token. Waiting ignores the
    token and resolves its own pending key against the arming key. Insert
    only produces exits and moves; literal text never reaches the parser.
    """
    if isinstance(mode, mode_mod.Waiting):
        pending = mode.pending
        if pending is None:
            return Command.request_confirm
        if pending == cmd.ENTER:
            return parse_normal_key(mode.trigger, confirmed=True)
        if pending == cmd.ESCAPE:
            return Command.exit_to_normal
        if cancel_on_unknown:
            return Command.exit_to_normal
        return None

    if isinstance(mode, mode_mod.Insert):
        if cmd.ESCAPE in token:
            return Command.exit_to_normal
        return cmd.MOVE_KEYS.get(token[:1])

    return parse_normal_key(token[:1] or None)
