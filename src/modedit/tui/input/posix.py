from __future__ import annotations

import os
import select
import sys
import time
import typing
from dataclasses import dataclass

from . import base as input_base
from modedit.logger import logger


@dataclass(frozen=True)
class KeyMapping:
    name: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    text: str | None = None


def _build_key_sequence_map() -> dict[bytes, KeyMapping]:
    mapping: dict[bytes, KeyMapping] = {}
    mapping[b"\t"] = KeyMapping(name="tab", text="\t")
    mapping[b"\r"] = KeyMapping(name="enter", text="\n")
    mapping[b"\n"] = KeyMapping(name="enter", text="\n")
    mapping[b"\x7f"] = KeyMapping(name="backspace")
    mapping[b"\x08"] = KeyMapping(name="backspace")
    mapping[b"\x1b[A"] = KeyMapping(name="up")
    mapping[b"\x1b[B"] = KeyMapping(name="down")
    mapping[b"\x1b[C"] = KeyMapping(name="right")
    mapping[b"\x1b[D"] = KeyMapping(name="left")
    mapping[b"\x1bOA"] = KeyMapping(name="up")
    mapping[b"\x1bOB"] = KeyMapping(name="down")
    mapping[b"\x1bOC"] = KeyMapping(name="right")
    mapping[b"\x1bOD"] = KeyMapping(name="left")
    for final, name in ((b"A", "up"), (b"B", "down"), (b"C", "right"), (b"D", "left")):
        mapping[b"\x1b[1;2" + final] = KeyMapping(name=name, shift=True)
        mapping[b"\x1b[1;3" + final] = KeyMapping(name=name, alt=True)
        mapping[b"\x1b[1;5" + final] = KeyMapping(name=name, ctrl=True)
    mapping[b"\x1b[H"] = KeyMapping(name="home")
    mapping[b"\x1b[F"] = KeyMapping(name="end")
    mapping[b"\x1b[1~"] = KeyMapping(name="home")
    mapping[b"\x1b[4~"] = KeyMapping(name="end")
    mapping[b"\x1b[7~"] = KeyMapping(name="home")
    mapping[b"\x1b[8~"] = KeyMapping(name="end")
    mapping[b"\x1bOH"] = KeyMapping(name="home")
    mapping[b"\x1bOF"] = KeyMapping(name="end")
    mapping[b"\x1b[2~"] = KeyMapping(name="insert")
    mapping[b"\x1b[3~"] = KeyMapping(name="delete")
    mapping[b"\x1b[5~"] = KeyMapping(name="page_up")
    mapping[b"\x1b[6~"] = KeyMapping(name="page_down")
    mapping[b"\x1b[Z"] = KeyMapping(name="tab", shift=True, text="\t")
    mapping[b"\x1bOP"] = KeyMapping(name="f1")
    mapping[b"\x1bOQ"] = KeyMapping(name="f2")
    mapping[b"\x1bOR"] = KeyMapping(name="f3")
    mapping[b"\x1bOS"] = KeyMapping(name="f4")
    for number, name in (
        (11, "f1"),
        (12, "f2"),
        (13, "f3"),
        (14, "f4"),
        (15, "f5"),
        (17, "f6"),
        (18, "f7"),
        (19, "f8"),
        (20, "f9"),
        (21, "f10"),
        (23, "f11"),
        (24, "f12"),
    ):
        mapping[b"\x1b[%d~" % number] = KeyMapping(name=name)
    for index in range(1, 27):
        if index in (8, 9, 10, 13):
            continue
        code = bytes([index])
        name = chr(ord("a") + index - 1)
        mapping[code] = KeyMapping(name=name, ctrl=True)
    return mapping


_KEY_SEQUENCE_MAP: typing.Final[dict[bytes, KeyMapping]] = _build_key_sequence_map()
_KEY_SEQUENCES: typing.Final[list[bytes]] = sorted(
    _KEY_SEQUENCE_MAP.keys(), key=len, reverse=True
)
_KEY_PREFIXES: typing.Final[set[bytes]] = set()
for _seq in _KEY_SEQUENCE_MAP:
    if len(_seq) <= 1:
        continue
    for _i in range(1, len(_seq)):
        _KEY_PREFIXES.add(_seq[:_i])


ESC_SEQUENCE_TIMEOUT: typing.Final[float] = 0.05
ESC_EVENT: typing.Final[input_base.KeyEvent] = input_base.KeyEvent(key="esc")


class PosixInputDecoder:
    def __init__(self) -> None:
        self._buffer: bytes = b""

    @property
    def pending(self) -> bytes:
        return self._buffer

    def _try_consume_mapped_sequence(self, events: list[input_base.KeyEvent]) -> bool:
        # Match fixed sequences (arrows, function keys, control bytes).
        for seq in _KEY_SEQUENCES:
            if not self._buffer.startswith(seq):
                continue
            mapping = _KEY_SEQUENCE_MAP[seq]
            self._buffer = self._buffer[len(seq) :]
            events.append(
                input_base.KeyEvent(
                    key=mapping.name,
                    ctrl=mapping.ctrl,
                    alt=mapping.alt,
                    shift=mapping.shift,
                    text=mapping.text,
                )
            )
            return True
        return False

    def _try_consume_control_sequence(self) -> tuple[bool, bool]:
        # Drop CSI and SS3 sequences with no mapping so their tails never
        # reach the editor as typed text.
        # CSI: ESC [ <params 0x30-0x3F>* <intermediates 0x20-0x2F>* <final 0x40-0x7E>
        if self._buffer.startswith(b"\x1bO"):
            if len(self._buffer) < 3:
                return False, True
            end = 3
        elif self._buffer.startswith(b"\x1b["):
            idx = 2
            while idx < len(self._buffer) and 0x30 <= self._buffer[idx] <= 0x3F:
                idx += 1
            while idx < len(self._buffer) and 0x20 <= self._buffer[idx] <= 0x2F:
                idx += 1
            if idx >= len(self._buffer):
                return False, True
            if not 0x40 <= self._buffer[idx] <= 0x7E:
                return False, False
            end = idx + 1
        else:
            return False, False

        logger.debug("Unmapped key sequence", sequence=repr(self._buffer[:end]))
        self._buffer = self._buffer[end:]
        return True, False

    def _try_consume_escape(self, events: list[input_base.KeyEvent]) -> bool:
        # ESC not starting a known sequence is a real Escape press; the next
        # byte is decoded on its own.
        if not self._buffer or self._buffer[0] != 0x1B or len(self._buffer) < 2:
            return False

        head = self._buffer[:2]
        if head in _KEY_PREFIXES or head in _KEY_SEQUENCE_MAP:
            return False

        self._buffer = self._buffer[1:]
        events.append(ESC_EVENT)
        return True

    def _try_consume_utf8(self, events: list[input_base.KeyEvent]) -> tuple[bool, bool]:
        byte = self._buffer[0]
        if byte < 0x80:
            return False, False
        if byte >= 0xF0:
            width = 4
        elif byte >= 0xE0:
            width = 3
        elif byte >= 0xC0:
            width = 2
        else:
            self._buffer = self._buffer[1:]
            return True, False
        if len(self._buffer) < width:
            return False, True
        chunk = self._buffer[:width]
        self._buffer = self._buffer[width:]
        ch = chunk.decode(errors="replace")
        if ch.isprintable():
            events.append(input_base.char_key(ch))
        return True, False

    def _consume_one_byte(self, events: list[input_base.KeyEvent]) -> None:
        # Fallback: consume one byte; emit a KeyEvent only for printable ASCII.
        byte = self._buffer[0]
        self._buffer = self._buffer[1:]
        if 32 <= byte <= 126:
            events.append(input_base.char_key(chr(byte)))

    def feed(self, data: bytes) -> list[input_base.KeyEvent]:
        if not data:
            return []
        self._buffer += data
        events: list[input_base.KeyEvent] = []

        while self._buffer:
            if self._try_consume_mapped_sequence(events):
                continue

            consumed, need_more = self._try_consume_control_sequence()
            if need_more:
                break
            if consumed:
                continue

            # If we have an escape-sequence prefix, wait for more bytes.
            if self._buffer in _KEY_PREFIXES:
                break

            if self._try_consume_escape(events):
                continue

            consumed, need_more = self._try_consume_utf8(events)
            if need_more:
                break
            if consumed:
                continue

            self._consume_one_byte(events)
        return events

    def flush(self) -> list[input_base.KeyEvent]:
        """Resolve bytes held back as an incomplete sequence."""
        data = self._buffer
        self._buffer = b""
        if not data:
            return []
        if data[:1] != b"\x1b":
            return []
        if len(data) > 2 and data[1:2] in (b"[", b"O"):
            # Truncated control sequence.
            logger.debug("Dropped incomplete key sequence", sequence=repr(data))
            return []
        return [ESC_EVENT, *self.feed(data[1:])]


class PosixKeyReader:
    def __init__(
        self,
        fd: int | None = None,
        esc_sequence_timeout: float = ESC_SEQUENCE_TIMEOUT,
    ) -> None:
        if fd is None:
            fd = sys.stdin.fileno()
        self._fd = fd
        self._decoder = PosixInputDecoder()
        self._orig_termios: typing.Any | None = None
        self._esc_time: float | None = None
        self._esc_sequence_timeout = esc_sequence_timeout

    def __enter__(self) -> "PosixKeyReader":
        if sys.platform == "win32":
            raise RuntimeError("PosixKeyReader is not supported on Windows")
        self._setup_terminal()
        return self

    def __exit__(self, *exc_info: typing.Any) -> None:
        self._teardown_terminal()

    def _setup_terminal(self) -> None:
        import termios
        import tty

        self._orig_termios = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)

    def _teardown_terminal(self) -> None:
        if self._orig_termios is None:
            return
        import termios

        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._orig_termios)
        self._orig_termios = None

    def poll(self, timeout: float) -> list[input_base.KeyEvent]:
        """Wait at most ``timeout`` seconds and return the decoded keys.

        An empty list means the wait timed out.
        """
        if self._esc_time is not None:
            remaining = self._esc_sequence_timeout - (time.monotonic() - self._esc_time)
            if remaining <= 0:
                self._esc_time = None
                return self._decoder.flush()
            timeout = min(timeout, max(0.0, remaining))

        rlist, _, _ = select.select([self._fd], [], [], timeout)
        if not rlist:
            return []

        data = os.read(self._fd, 1024)
        if not data:
            raise EOFError("input closed")

        events = self._decoder.feed(data)
        if self._decoder.pending.startswith(b"\x1b"):
            if self._esc_time is None:
                self._esc_time = time.monotonic()
        else:
            self._esc_time = None
        if events:
            logger.debug("keys", keys=[event.key for event in events])
        return events
