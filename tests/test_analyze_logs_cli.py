"""Tests for scripts/analyze_logs.py"""

import argparse
import gzip
import importlib.util
import io
import json
import subprocess
import sys
from pathlib import Path

import pytest

SCRIPT = Path(__file__).parent.parent / "scripts" / "analyze_logs.py"


@pytest.fixture(scope="module")
def cli():
    loader_spec = importlib.util.spec_from_file_location("analyze_logs", SCRIPT)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


@pytest.fixture
def log_file(tmp_path, sample_lines):
    path = tmp_path / "combined.log.gz"
    with gzip.open(path, 'wt') as f:
        f.write("\n".join(sample_lines) + "\n")
    return path


def test_parse_slow_limit(cli):
    assert cli.parse_slow_limit('all') is None
    assert cli.parse_slow_limit('5') == 5
    for bad in ('0', '-3', 'many'):
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_slow_limit(bad)


def test_prints_report(cli, log_file, capsys):
    assert cli.main([str(log_file)]) == 0
    out = capsys.readouterr().out
    assert "Total requests: 4" in out
    assert "Timeouts: 1 (25.0%)" in out


def test_saves_json_report(cli, log_file, tmp_path, capsys):
    assert cli.main([str(log_file), '--output', str(tmp_path / "analysis"), '--format', 'json']) == 0
    saved = tmp_path / "analysis.json"
    assert json.loads(saved.read_text())['summary']['totalRequests'] == 4
    assert "Report saved to" in capsys.readouterr().out


def test_reads_stdin(cli, sample_lines, monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO("\n".join(sample_lines)))
    assert cli.main([]) == 0
    assert "Total requests: 4" in capsys.readouterr().out


def test_missing_file(cli, tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.log")]) == 1
    assert "Error" in capsys.readouterr().err


def test_empty_input(cli, tmp_path, capsys):
    empty = tmp_path / "empty.log"
    empty.write_text("")
    assert cli.main([str(empty)]) == 0
    assert "No log entries found." in capsys.readouterr().out


def test_corrupt_gzip_reports_error(cli, tmp_path, sample_lines, capsys):
    data = bytearray(gzip.compress(("\n".join(sample_lines) * 50).encode()))
    # Keep the gzip header, garble the deflate stream
    data[10:60] = b'\xff' * 50
    path = tmp_path / "broken.log.gz"
    path.write_bytes(bytes(data))

    assert cli.main([str(path)]) == 1
    assert "Error" in capsys.readouterr().err


def test_malformed_line_warning_reaches_stderr(tmp_path, sample_lines):
    path = tmp_path / "mixed.log"
    path.write_text(sample_lines[0] + "\ninvalid log line\n")

    proc = subprocess.run(
        [sys.executable, str(SCRIPT), str(path)],
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert proc.returncode == 0
    assert "WARNING" in proc.stderr
    assert "Failed to parse log line" in proc.stderr
    assert "Total requests: 2" in proc.stdout
