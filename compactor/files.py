from __future__ import annotations

import re

from .errors import FileReadError, FileWriteError


_LINE = re.compile(r"[^\n]*\n|[^\n]+\Z")


def read_text_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError as exc:
        raise FileReadError(f"file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise FileReadError(f"file is not valid UTF-8: {path}") from exc
    except OSError as exc:
        raise FileReadError(f"cannot read {path}: {exc.strerror or exc}") from exc


def document_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` only, keeping each line's terminator.

    Other characters ``str.splitlines`` treats as breaks (form feed, ``\\x85``,
    ``\\u2028`` and the like) stay inside their line, and a ``\\r\\n`` pair ends
    one line. Joining the result with ``""`` gives back ``text``.
    """
    return _LINE.findall(text)


def write_text_file(path: str, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise FileWriteError(f"cannot write {path}: {exc.strerror or exc}") from exc
