from __future__ import annotations

from . import base as _base
from . import posix as _posix

KeyEvent = _base.KeyEvent
KeyReader = _base.KeyReader
char_key = _base.char_key
PosixInputDecoder = _posix.PosixInputDecoder
PosixKeyReader = _posix.PosixKeyReader
