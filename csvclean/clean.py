"""
Core cleaning logic.

Responsibilities:
- printable filter
- line reading / CRLF rewrite into a temporary sibling file
- atomic swap of the temporary file over the original
- in-memory variant for the HTTP surface
"""

from __future__ import annotations

import base64
import hashlib
import io
import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .errors import CleanError, ReplaceError
from .models import CleanReport, DiffBlock
from .rules import EOL, REPLACEMENT, TMP_SUFFIX

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def replace_non_printable(line: str) -> str:
    # isprintable() is False for Unicode Other/Separator, ASCII space excepted
    return "".join(ch if ch.isprintable() else REPLACEMENT for ch in line)


def iter_clean(lines: List[str]) -> Iterator[Tuple[str, Optional[DiffBlock]]]:
    """Yield each cleaned line with its diff block, or None when it is unchanged."""
    for i, line in enumerate(lines):
        clean = replace_non_printable(line)
        diff = DiffBlock(line=i + 1, before=line, after=clean) if clean != line else None
        yield clean, diff


def clean_lines(lines: List[str]) -> Tuple[List[str], List[DiffBlock]]:
    cleaned: List[str] = []
    diffs: List[DiffBlock] = []

    for clean, diff in iter_clean(lines):
        cleaned.append(clean)
        if diff is not None:
            diffs.append(diff)

    return cleaned, diffs


def split_lines(fh: io.TextIOBase) -> List[str]:
    """
    Read every line of a text stream opened with universal newlines.

    Only \\n, \\r\\n and \\r end a line; the terminator is dropped and a
    final terminator does not produce an empty trailing line.
    """
    return [line[:-1] if line.endswith("\n") else line for line in fh]


def read_lines(path: PathLike, encoding: str) -> List[str]:
    with open(path, "r", encoding=encoding, newline=None) as fh:
        return split_lines(fh)


def temp_path(path: PathLike, now: Optional[float] = None) -> Path:
    millis = int((time.time() if now is None else now) * 1000)
    return Path(f"{path}.{millis}{TMP_SUFFIX}")


def clean_file(path: PathLike, encoding: str) -> Tuple[Path, CleanReport]:
    """
    Write a cleaned copy of ``path`` next to it and return the copy's path.

    Every line is filtered, written with a CRLF terminator in ``encoding``
    and, when it changed, echoed to stdout as a diff block.
    """
    tmp = temp_path(path)
    logger.debug("writing cleaned copy to %s", tmp)
    diffs: List[DiffBlock] = []

    try:
        lines = read_lines(path, encoding)

        with open(tmp, "w", encoding=encoding, newline="") as out:
            for clean, diff in iter_clean(lines):
                out.write(clean + EOL)
                if diff is not None:
                    diffs.append(diff)
                    print(diff.render())
    except (OSError, UnicodeError) as e:
        raise CleanError(f"failed to clean {path}: {e}") from e

    report = CleanReport(
        encoding=encoding,
        lines=len(lines),
        changed_lines=len(diffs),
        diffs=diffs,
    )
    return tmp, report


def replace_file(tmp: PathLike, original: PathLike) -> None:
    try:
        os.replace(tmp, original)
    except OSError as e:
        raise ReplaceError(f"failed to replace {original} with {tmp}: {e}") from e


def clean_csv_bytes(raw: bytes, encoding: str) -> Dict[str, Any]:
    """
    In-memory counterpart of clean_file.
    Returns a dict matching the API's response envelope.
    """
    try:
        text = raw.decode(encoding)
    except UnicodeError as e:
        raise CleanError(f"failed to decode payload as {encoding}: {e}") from e

    lines = split_lines(io.StringIO(text, newline=None))
    cleaned, diffs = clean_lines(lines)
    out = "".join(clean + EOL for clean in cleaned).encode(encoding)

    report = CleanReport(
        encoding=encoding,
        lines=len(lines),
        changed_lines=len(diffs),
        diffs=diffs,
    )
    return {
        "cleaned_csv": {
            "sha256": _sha256_hex(out),
            "encoding": encoding,
            "content_b64": base64.b64encode(out).decode("ascii"),
        },
        "report": report.model_dump(),
    }
