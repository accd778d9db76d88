"""Tests for src/utils/log_combiner.py"""

import gzip

import pytest

from src.utils.log_combiner import (
    LogCombineError,
    combine_gzip_files,
    count_lines,
    get_gzip_files,
)


def write_gz(path, text):
    with gzip.open(path, 'wt') as f:
        f.write(text)
    return path


def test_get_gzip_files_sorted(tmp_path):
    write_gz(tmp_path / "b.log.gz", "b\n")
    write_gz(tmp_path / "a.log.gz", "a\n")
    (tmp_path / "notes.txt").write_text("ignored")
    assert [p.name for p in get_gzip_files(tmp_path)] == ['a.log.gz', 'b.log.gz']


def test_get_gzip_files_missing_directory(tmp_path):
    assert get_gzip_files(tmp_path / "nope") == []


def test_combine_in_order(tmp_path):
    files = [
        write_gz(tmp_path / "01.log.gz", "first\nsecond\n"),
        write_gz(tmp_path / "02.log.gz", "third\n\n"),
    ]
    output = tmp_path / "out" / "combined.log"

    assert combine_gzip_files(files, output) == 3
    assert output.read_text() == "first\nsecond\nthird\n\n"


def test_existing_output_is_reused(tmp_path):
    output = tmp_path / "combined.log"
    output.write_text("kept\n")
    files = [write_gz(tmp_path / "01.log.gz", "new\nlines\n")]

    assert combine_gzip_files(files, output) == 1
    assert output.read_text() == "kept\n"


def test_corrupt_gzip_leaves_no_partial_file(tmp_path):
    bad = tmp_path / "bad.log.gz"
    bad.write_bytes(b"definitely not gzip")
    output = tmp_path / "combined.log"

    with pytest.raises(LogCombineError):
        combine_gzip_files([bad], output)
    assert not output.exists()


def test_count_lines_skips_blank(tmp_path):
    path = tmp_path / "x.log"
    path.write_text("a\n\n  \nb\n")
    assert count_lines(path) == 2
