#!/usr/bin/env python3
"""
ALB Log Parser
Parses AWS Application Load Balancer access log entries into structured records.
"""

import re
import sys
import gzip
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, TextIO


logger = logging.getLogger(__name__)

# A token is a run of non-space characters where a double-quoted span
# (with backslash escapes) counts as one unit, e.g. "GET https://host/ HTTP/1.1"
TOKEN_PATTERN = re.compile(r'(?:[^\s"]|"(?:\\.|[^"\\])*")+')

# Fields 0..18 of the ALB format must be present
MIN_FIELDS = 19

TIMEOUT_STATUS_CODES = ('502', '504')
NOT_MEASURED = -1.0


@dataclass(frozen=True)
class LogEntry:
    """One parsed ALB access log record."""
    raw_line: str
    type: str = ''
    timestamp: str = ''
    elb_name: str = ''
    client_port: str = ''
    target_port: str = ''
    request_processing_time: float = 0.0
    target_processing_time: float = 0.0
    response_processing_time: float = 0.0
    elb_status_code: str = '-'
    target_status_code: str = '-'
    received_bytes: int = 0
    sent_bytes: int = 0
    request_method: str = '-'
    request_url: str = '-'
    request_protocol: str = '-'
    request_path: str = '-'
    user_agent: str = ''
    ssl_cipher: str = ''
    ssl_protocol: str = ''
    target_group_arn: str = ''
    trace_id: str = ''
    domain_name: str = ''
    client_ip: str = '-'
    total_time: float = 0.0
    is_timeout: bool = False
    is_rejected: bool = False
    timestamp_date: Optional[datetime] = None

    @property
    def endpoint(self) -> str:
        return f"{self.request_method} {self.request_path}"

    @property
    def is_error(self) -> bool:
        return self.target_status_code.startswith(('4', '5'))


def tokenize_line(line: str) -> List[str]:
    """Split a log line on whitespace, keeping quoted spans together."""
    return TOKEN_PATTERN.findall(line)


def strip_quotes(value: str) -> str:
    """Remove one leading and one trailing double quote if present."""
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def safe_int(value, default=0):
    """Safely convert value to int, return default if fails."""
    try:
        return int(value) if value else default
    except (ValueError, TypeError):
        return default


def parse_timestamp(timestamp_str: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime, or None."""
    if not timestamp_str:
        return None
    try:
        parsed = datetime.fromisoformat(timestamp_str.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def split_request(request: str):
    """Split 'METHOD URL PROTOCOL' into three parts, defaulting to '-'."""
    parts = request.split(' ')
    method = parts[0] if len(parts) > 0 and parts[0] else '-'
    url = parts[1] if len(parts) > 1 and parts[1] else '-'
    protocol = parts[2] if len(parts) > 2 and parts[2] else '-'
    return method, url, protocol


def extract_path(url: str) -> str:
    """
    Strip scheme and host from a request URL.

    'https://host:443/a/b?x=1' -> '/a/b?x=1'. Query strings stay attached.
    """
    if url == '-':
        return '-'
    segments = url.split('/')
    if len(segments) > 3:
        return '/' + '/'.join(segments[3:])
    return '/'


def classify(request_time: float, target_time: float, response_time: float,
             elb_status_code: str):
    """Return (is_timeout, is_rejected) for the given processing times."""
    is_timeout = (
        (target_time == NOT_MEASURED or response_time == NOT_MEASURED)
        and elb_status_code in TIMEOUT_STATUS_CODES
    )
    is_rejected = NOT_MEASURED in (request_time, target_time, response_time) and not is_timeout
    return is_timeout, is_rejected


def _malformed_entry(line: str) -> LogEntry:
    return LogEntry(raw_line=line)


def parse_log_line(line: str) -> LogEntry:
    """
    Parse a single ALB log line.

    Never raises: a line that cannot be parsed is logged and returned as an
    entry with '-' status codes, method, path and client IP and a total time
    of 0.0.

    Args:
        line: Raw log line string

    Returns:
        LogEntry for the line
    """
    parts = tokenize_line(line)
    if len(parts) < MIN_FIELDS:
        logger.warning("Failed to parse log line: expected %d fields, got %d",
                       MIN_FIELDS, len(parts))
        return _malformed_entry(line)

    try:
        request_time = float(parts[5])
        target_time = float(parts[6])
        response_time = float(parts[7])
    except ValueError as e:
        logger.warning("Failed to parse log line: %s", e)
        return _malformed_entry(line)

    elb_status_code = parts[8]
    is_timeout, is_rejected = classify(request_time, target_time, response_time, elb_status_code)

    method, url, protocol = split_request(strip_quotes(parts[12]))

    client_port = parts[3]
    client_ip = client_port.split(':', 1)[0] if ':' in client_port else client_port

    # Sentinel -1 values count as zero towards the total
    total_time = max(request_time, 0.0) + max(target_time, 0.0) + max(response_time, 0.0)

    return LogEntry(
        raw_line=line,
        type=parts[0],
        timestamp=parts[1],
        elb_name=parts[2],
        client_port=client_port,
        target_port=parts[4],
        request_processing_time=request_time,
        target_processing_time=target_time,
        response_processing_time=response_time,
        elb_status_code=elb_status_code,
        target_status_code=parts[9],
        received_bytes=safe_int(parts[10]),
        sent_bytes=safe_int(parts[11]),
        request_method=method,
        request_url=url,
        request_protocol=protocol,
        request_path=extract_path(url),
        user_agent=strip_quotes(parts[13]),
        ssl_cipher=parts[14],
        ssl_protocol=parts[15],
        target_group_arn=parts[16],
        trace_id=strip_quotes(parts[17]),
        domain_name=strip_quotes(parts[18]),
        client_ip=client_ip,
        total_time=total_time,
        is_timeout=is_timeout,
        is_rejected=is_rejected,
        timestamp_date=parse_timestamp(parts[1]),
    )


def _collect_lines(stream: TextIO) -> List[str]:
    lines = []
    for line in stream:
        line = line.strip()
        if line:
            lines.append(line)
    return lines


def read_log_lines(file_path: Path) -> List[str]:
    """
    Read a log file (compressed or uncompressed) into a list of non-blank lines.

    Args:
        file_path: Path to the log file; '.gz' files are decompressed

    Returns:
        Stripped, non-blank lines in file order
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Log file not found: {file_path}")

    if file_path.suffix == '.gz':
        with gzip.open(file_path, 'rt', encoding='utf-8', errors='replace') as f:
            return _collect_lines(f)
    with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
        return _collect_lines(f)


def read_stdin_lines(stream: TextIO = None) -> List[str]:
    """Read non-blank lines from stdin (or the given text stream)."""
    return _collect_lines(stream if stream is not None else sys.stdin)
