from __future__ import annotations

from pathlib import Path

from modedit.logger import logger


class SaveError(OSError):
    def __init__(self, path: Path, cause: OSError) -> None:
        reason = cause.strerror or str(cause)
        super().__init__(cause.errno, reason, str(path))
        self.path = path
        self.reason = reason


def load_text(path: Path | None) -> str:
    """Return the file contents, or an empty document when it can't be read."""
    if path is None:
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("File does not exist, starting empty", path=str(path))
        return ""
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to load file", path=str(path), error=str(exc))
        return ""


def save_text(path: Path, text: str) -> int:
    # newline="" keeps "\n" as-is on every platform.
    try:
        with path.open("w", encoding="utf-8", newline="") as fp:
            written = fp.write(text)
    except OSError as exc:
        raise SaveError(path, exc) from exc
    logger.info("File written", path=str(path), chars=written)
    return written
