from __future__ import annotations

import typing
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    text: typing.Optional[str] = None

    @property
    def is_char(self) -> bool:
        return (
            self.text is not None
            and len(self.text) == 1
            and self.text.isprintable()
            and not self.ctrl
            and not self.alt
        )


class KeyReader(typing.Protocol):
    def __enter__(self) -> "KeyReader":
        ...

    def __exit__(self, *exc_info: typing.Any) -> None:
        ...

    def poll(self, timeout: float) -> list[KeyEvent]:
        ...


def char_key(ch: str) -> KeyEvent:
    # Printable-key events normalize uppercase letters to lowercase key names.
    alpha_shift = ch.isalpha() and ch.isupper()
    key_name = ch.lower() if alpha_shift else ch
    return KeyEvent(key=key_name, shift=alpha_shift, text=ch)
