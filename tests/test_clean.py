import os
import re

import pytest

import csvclean.clean as clean
from csvclean.clean import (
    clean_file,
    clean_lines,
    read_lines,
    replace_file,
    replace_non_printable,
    temp_path,
)
from csvclean.errors import CleanError, ReplaceError


def test_replace_non_printable_keeps_graphic_characters():
    line = "Zoë,Montréal,€ 12,50;\"quoted\""
    assert replace_non_printable(line) == line


@pytest.mark.parametrize(
    "ch",
    ["\x00", "\x01", "\t", "\x0b", "\x0c", "\x1b", "\x7f", "\x85", "\xa0", "\xad", "\u2028", "\u200b"],
)
def test_replace_non_printable_marks_controls_and_separators(ch):
    assert replace_non_printable(f"a{ch}b") == "a>b"


def test_clean_lines_reports_changed_lines_only():
    cleaned, diffs = clean_lines(["ok,1", "bad\x02,2", "ok,3", "\tbad,4"])

    assert cleaned == ["ok,1", "bad>,2", "ok,3", ">bad,4"]
    assert [d.line for d in diffs] == [2, 4]
    assert diffs[0].render() == "---\n< bad\x02,2\n> bad>,2"


def test_read_lines_splits_on_any_terminator(tmp_path):
    src = tmp_path / "mixed.csv"
    src.write_bytes(b"a\r\nb\nc\rd\x0ce\n")

    assert read_lines(src, "cp1252") == ["a", "b", "c", "d\x0ce"]


def test_read_lines_without_trailing_terminator(tmp_path):
    src = tmp_path / "last.csv"
    src.write_bytes(b"a\nb")

    assert read_lines(src, "cp1252") == ["a", "b"]


def test_temp_path_uses_epoch_millis(tmp_path):
    src = tmp_path / "data.csv"
    assert temp_path(src, now=1700000000.1234) == tmp_path / "data.csv.1700000000123.tmp"


def test_clean_file_writes_crlf_copy_and_prints_diffs(tmp_path, capsys):
    src = tmp_path / "sample.csv"
    original = "id,name\nA\x01B,Café\r\n3,\x7f€\r".encode("cp1252")
    src.write_bytes(original)

    tmp, report = clean_file(src, "cp1252")

    assert re.fullmatch(r"sample\.csv\.\d+\.tmp", tmp.name)
    assert tmp.read_bytes() == "id,name\r\nA>B,Café\r\n3,>€\r\n".encode("cp1252")
    assert src.read_bytes() == original

    assert report.lines == 3
    assert report.changed_lines == 2

    out = capsys.readouterr().out
    assert out == "---\n< A\x01B,Café\n> A>B,Café\n---\n< 3,\x7f€\n> 3,>€\n"
    assert out.count("---\n") == report.changed_lines


def test_clean_file_is_idempotent(tmp_path, capsys):
    src = tmp_path / "twice.csv"
    src.write_bytes(b"a\x00,b\nc,d\re\x1f\r\n")

    first, _ = clean_file(src, "cp1252")
    replace_file(first, src)
    once = src.read_bytes()
    capsys.readouterr()

    second, report = clean_file(src, "cp1252")
    replace_file(second, src)

    assert src.read_bytes() == once
    assert report.changed_lines == 0
    assert capsys.readouterr().out == ""


def test_clean_file_output_is_crlf_and_printable(tmp_path):
    src = tmp_path / "noisy.csv"
    src.write_bytes(bytes(range(0x20)) + b",x\n" + bytes(range(0x7f, 0x81)) + b"\r\n")

    tmp, _ = clean_file(src, "cp1252")
    data = tmp.read_bytes()

    assert data.endswith(b"\r\n")
    for line in data.decode("cp1252").split("\r\n")[:-1]:
        assert line.isprintable()


def test_clean_file_decode_error_raises_clean_error(tmp_path):
    src = tmp_path / "bad.csv"
    # 0x81 is unassigned in windows-1252
    src.write_bytes(b"a,\x81\n")

    with pytest.raises(CleanError):
        clean_file(src, "cp1252")


def test_clean_file_missing_source_raises_clean_error(tmp_path):
    with pytest.raises(CleanError):
        clean_file(tmp_path / "gone.csv", "cp1252")


def test_replace_file_swaps_in_cleaned_copy(tmp_path):
    src = tmp_path / "a.csv"
    src.write_bytes(b"old")
    tmp = tmp_path / "a.csv.1.tmp"
    tmp.write_bytes(b"new")

    replace_file(tmp, src)

    assert src.read_bytes() == b"new"
    assert not tmp.exists()


def test_replace_file_failure_raises_replace_error(tmp_path, monkeypatch):
    src = tmp_path / "a.csv"
    src.write_bytes(b"old")
    tmp = tmp_path / "a.csv.1.tmp"
    tmp.write_bytes(b"new")

    def fail(*args):
        raise PermissionError("read-only")

    monkeypatch.setattr(os, "replace", fail)

    with pytest.raises(ReplaceError):
        replace_file(tmp, src)
    assert src.read_bytes() == b"old"
    assert tmp.read_bytes() == b"new"


def test_clean_file_prints_diffs_as_lines_are_written(tmp_path, capsys, monkeypatch):
    src = tmp_path / "partial.csv"
    src.write_bytes(b"a\x01,1\nstop,2\nc\x02,3\n")

    real = clean.replace_non_printable

    def stop_on_second_line(line):
        if line.startswith("stop"):
            raise OSError("disk full")
        return real(line)

    monkeypatch.setattr(clean, "replace_non_printable", stop_on_second_line)

    with pytest.raises(CleanError, match="disk full"):
        clean_file(src, "cp1252")

    assert capsys.readouterr().out == "---\n< a\x01,1\n> a>,1\n"
