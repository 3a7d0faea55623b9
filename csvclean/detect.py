"""
Encoding detection.

The detector itself is charset-normalizer; this module only turns its
matches into one canonical codec name, or a DetectionError.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Union

from charset_normalizer import CharsetMatch, from_bytes
from charset_normalizer.utils import is_multi_byte_encoding

from .errors import DetectionError, EncodingMismatchError
from .rules import REQUIRED_ENCODING

logger = logging.getLogger(__name__)


def canonical_name(name: str) -> str:
    """Map a codec alias to Python's canonical codec name (windows-1252 -> cp1252)."""
    try:
        return codecs.lookup(name).name
    except LookupError:
        return name.lower()


def _is_unicode_reading(match: CharsetMatch, raw: bytes) -> bool:
    # a BOM-less UTF-16/32 reading of NUL-free bytes is an even-length coincidence
    if match.bom or match.encoding in ("utf_8", "utf_8_sig"):
        return True
    return match.encoding.startswith(("utf_16", "utf_32")) and b"\x00" in raw


def _is_legacy_multi_byte(match: CharsetMatch) -> bool:
    return not match.encoding.startswith("utf") and is_multi_byte_encoding(match.encoding)


def _decodes_as(raw: bytes, encoding: str) -> bool:
    try:
        raw.decode(encoding)
    except UnicodeDecodeError:
        return False
    return True


def detect_bytes(raw: bytes) -> str:
    """
    Detect the encoding of an in-memory payload.

    Rules, in order:
    - If any charset-normalizer match is the required encoding, or lists it
      in could_be_from_charset (same decoded text), report it.
    - A 7-bit clean payload is reported as the required encoding: it decodes
      identically there, whichever ASCII-compatible page the detector picked.
    - If the bytes decode strictly as the required encoding, no match is a
      Unicode reading (BOM, UTF-8, UTF-16/32 over NUL-bearing bytes) and the
      best match is not a legacy multi-byte page, report the required encoding.
    - Otherwise report the best match as is; no match at all is a DetectionError.
    """
    matches = from_bytes(raw)
    best = matches.best()
    required = canonical_name(REQUIRED_ENCODING)

    for match in matches:
        candidates = [canonical_name(enc) for enc in match.could_be_from_charset]
        logger.debug("detector match: %s (candidates: %s)", match.encoding, ", ".join(candidates))
        if required in candidates:
            return required

    if raw.isascii():
        return required

    if (
        _decodes_as(raw, required)
        and not any(_is_unicode_reading(match, raw) for match in matches)
        and not (best is not None and _is_legacy_multi_byte(best))
    ):
        logger.debug("no detector match for %s, but the payload decodes strictly as it", required)
        return required

    if best is None:
        raise DetectionError("no plausible encoding found")
    return canonical_name(best.encoding)


def check_encoding(encoding: str) -> None:
    if canonical_name(encoding) != canonical_name(REQUIRED_ENCODING):
        raise EncodingMismatchError(f"File encoding: {encoding}. Must be: {REQUIRED_ENCODING}")


def detect_encoding(path: Union[str, Path]) -> str:
    try:
        with open(path, "rb") as fp:
            raw = fp.read()
    except OSError as e:
        raise DetectionError(f"cannot read {path}: {e}") from e
    return detect_bytes(raw)
