from __future__ import annotations

import os

import pytest

from modedit.tui.input import base
from modedit.tui.input import posix


def test_decoder_simple_character() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"a")
    assert len(events) == 1
    event = events[0]
    assert isinstance(event, base.KeyEvent)
    assert event.key == "a"
    assert event.text == "a"
    assert event.is_char
    assert not event.ctrl
    assert not event.alt
    assert not event.shift


def test_decoder_uppercase_sets_shift() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"Q")
    assert events == [base.KeyEvent(key="q", shift=True, text="Q")]


def test_decoder_enter_and_backspace() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"\r\n\x7f\x08")
    assert [e.key for e in events] == ["enter", "enter", "backspace", "backspace"]
    assert events[0].text == "\n"
    assert not events[0].is_char


def test_decoder_arrow_keys() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1bOA")
    assert [e.key for e in events] == ["up", "down", "right", "left", "up"]


def test_decoder_modified_arrows_and_function_keys() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"\x1b[1;5C\x1b[1;3A\x1b[1;2D\x1b[15~\x1b[24~")
    assert [(e.key, e.ctrl, e.alt, e.shift) for e in events] == [
        ("right", True, False, False),
        ("up", False, True, False),
        ("left", False, False, True),
        ("f5", False, False, False),
        ("f12", False, False, False),
    ]
    assert not any(e.is_char for e in events)
    assert decoder.pending == b""


@pytest.mark.parametrize(
    "sequence",
    [b"\x1b[1;6C", b"\x1b[200~", b"\x1b[?25h", b"\x1b[99;7u", b"\x1bOX", b"\x1b[ q"],
)
def test_decoder_drops_unmapped_sequences(sequence: bytes) -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(sequence + b"a")
    assert [e.text for e in events] == ["a"]
    assert decoder.pending == b""


def test_decoder_waits_for_unmapped_sequence_final_byte() -> None:
    decoder = posix.PosixInputDecoder()
    assert decoder.feed(b"\x1b[1;6") == []
    assert decoder.pending == b"\x1b[1;6"
    assert decoder.feed(b"Cx") == [base.char_key("x")]


def test_decoder_flush_drops_truncated_sequence() -> None:
    decoder = posix.PosixInputDecoder()
    assert decoder.feed(b"\x1b[1;") == []
    assert decoder.flush() == []


def test_decoder_control_keys() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"\x01\x13")
    assert [(e.key, e.ctrl) for e in events] == [("a", True), ("s", True)]
    assert not any(e.is_char for e in events)


def test_decoder_escape_followed_by_key() -> None:
    decoder = posix.PosixInputDecoder()
    events = decoder.feed(b"\x1bj")
    assert [e.key for e in events] == ["esc", "j"]


def test_decoder_waits_for_split_sequence() -> None:
    decoder = posix.PosixInputDecoder()
    assert decoder.feed(b"\x1b[") == []
    assert decoder.pending == b"\x1b["
    events = decoder.feed(b"D")
    assert [e.key for e in events] == ["left"]
    assert decoder.pending == b""


def test_decoder_flush_resolves_lone_escape() -> None:
    decoder = posix.PosixInputDecoder()
    assert decoder.feed(b"\x1b") == []
    events = decoder.flush()
    assert [e.key for e in events] == ["esc"]
    assert decoder.flush() == []


def test_decoder_utf8_character() -> None:
    decoder = posix.PosixInputDecoder()
    data = "é".encode("utf-8")
    assert decoder.feed(data[:1]) == []
    events = decoder.feed(data[1:])
    assert [e.text for e in events] == ["é"]
    assert events[0].is_char


def test_reader_poll_times_out_without_input() -> None:
    read_fd, write_fd = os.pipe()
    try:
        reader = posix.PosixKeyReader(fd=read_fd)
        assert reader.poll(0.01) == []
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_reader_poll_decodes_keys() -> None:
    read_fd, write_fd = os.pipe()
    try:
        reader = posix.PosixKeyReader(fd=read_fd)
        os.write(write_fd, b"iab\x1b[C")
        events = reader.poll(1.0)
        assert [e.key for e in events] == ["i", "a", "b", "right"]
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_reader_emits_escape_after_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    now = [100.0]
    monkeypatch.setattr(posix.time, "monotonic", lambda: now[0])
    read_fd, write_fd = os.pipe()
    try:
        reader = posix.PosixKeyReader(fd=read_fd, esc_sequence_timeout=0.05)
        os.write(write_fd, b"\x1b")
        assert reader.poll(1.0) == []
        now[0] += 0.1
        events = reader.poll(1.0)
        assert [e.key for e in events] == ["esc"]
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_reader_shortens_timeout_while_escape_pending(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    reader = posix.PosixKeyReader(fd=0, esc_sequence_timeout=0.05)
    timeouts: list[float] = []

    def fake_select(rlist, wlist, xlist, timeout):
        timeouts.append(timeout)
        return [], [], []

    monkeypatch.setattr(posix.select, "select", fake_select)
    monkeypatch.setattr(posix.time, "monotonic", lambda: 100.0)

    reader.poll(10.0)
    reader._esc_time = 100.0
    reader.poll(10.0)
    assert timeouts[0] == 10.0
    assert timeouts[1] <= 0.05


def test_reader_raises_eof_when_input_closes() -> None:
    read_fd, write_fd = os.pipe()
    os.close(write_fd)
    try:
        reader = posix.PosixKeyReader(fd=read_fd)
        with pytest.raises(EOFError):
            reader.poll(1.0)
    finally:
        os.close(read_fd)


def test_reader_context_manages_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(
        posix.PosixKeyReader, "_setup_terminal", lambda self: calls.append("setup")
    )
    monkeypatch.setattr(
        posix.PosixKeyReader, "_teardown_terminal", lambda self: calls.append("teardown")
    )
    reader = posix.PosixKeyReader(fd=0)
    with pytest.raises(RuntimeError):
        with reader:
            raise RuntimeError("boom")
    assert calls == ["setup", "teardown"]
