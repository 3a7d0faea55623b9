"""
Command line entry point.

    csvclean <csv-file-path> [-v]

Exit status is 0 when the file was cleaned and replaced, 1 on any failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .clean import clean_file, replace_file
from .detect import check_encoding, detect_encoding
from .errors import CsvCleanError, ExtensionError, NotFoundError, UsageError
from .rules import CSV_SUFFIX

logger = logging.getLogger("csvclean")


def setup_logging(verbose: bool = False) -> None:
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    ap = ArgumentParser(
        prog="csvclean",
        description="Replace non-printable characters in a windows-1252 CSV file and normalize line endings to CRLF.",
    )
    # optional here so a missing path is reported as a usage error with exit status 1
    ap.add_argument("path", nargs="?", help="CSV file to clean in place")
    ap.add_argument("-v", "--verbose", action="store_true", help="log detection details")
    return ap


def parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    """
    Only the first path counts; anything after it is ignored with a warning.
    A path starting with "-" is taken as is, with or without a leading "--".
    """
    args, extra = build_parser().parse_known_args(argv)
    if args.path is None and extra:
        args.path = extra.pop(0)
    if extra:
        logger.warning("ignoring extra arguments: %s", " ".join(extra))
    return args


def validate_path(arg: Optional[str]) -> Path:
    if not arg:
        raise UsageError("File argument required.")
    path = Path(arg)
    if not path.is_file():
        raise NotFoundError(f"File not found: {arg}")
    if not path.name.endswith(CSV_SUFFIX):
        raise ExtensionError(f'File does not have "{CSV_SUFFIX}" extension: {arg}')
    return path


def run(argv: Optional[List[str]] = None) -> int:
    setup_logging()

    try:
        args = parse_args(argv)
        if args.verbose:
            logger.setLevel(logging.DEBUG)

        path = validate_path(args.path)

        encoding = detect_encoding(path)
        logger.debug("detected encoding %s for %s", encoding, path)
        check_encoding(encoding)

        tmp, report = clean_file(path, encoding)
        replace_file(tmp, path)
    except CsvCleanError as e:
        logger.error("%s", e)
        return 1

    logger.info("cleaned %s: %d of %d lines changed", path, report.changed_lines, report.lines)
    return 0


def main() -> None:
    raise SystemExit(run(sys.argv[1:]))
