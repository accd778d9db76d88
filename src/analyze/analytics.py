#!/usr/bin/env python3
"""
ALB Log Analytics
Folds parsed ALB log entries into frequency counts, error/timeout sets,
response time statistics and per-minute traffic buckets.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from src.parse.log_parser import LogEntry, parse_log_line


MINUTE_FORMAT = '%Y-%m-%dT%H:%M'


@dataclass(frozen=True)
class Stats:
    min: float
    max: float
    mean: float
    median: float
    std_dev: float


@dataclass(frozen=True)
class TimeAnalysisBucket:
    timestamp: str
    count: int
    avg_response_time: float
    max_response_time: float
    errors: int
    timeouts: int
    status_codes: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate view over one batch of log entries."""
    entries: List[LogEntry]
    status_codes: Dict[str, int]
    endpoints: Dict[str, int]
    client_ips: Dict[str, int]
    methods: Dict[str, int]
    response_times: List[float]
    errors: List[LogEntry]
    timeouts: List[LogEntry]
    rejected_requests: List[LogEntry]
    stats: Optional[Stats]
    time_analysis: List[TimeAnalysisBucket]

    @property
    def total_requests(self) -> int:
        return len(self.entries)


def calculate_stats(numbers: Sequence[float]) -> Optional[Stats]:
    """
    Calculate response time statistics.

    The median is the element at index len // 2 of the sorted values, so an
    even-length list yields its upper-middle element ([1, 2, 3, 4] -> 3).
    Standard deviation is the sample deviation (n - 1 divisor) and 0 for a
    single value.

    Args:
        numbers: Response times in seconds

    Returns:
        Stats, or None when there are no values
    """
    if len(numbers) == 0:
        return None

    values = np.asarray(numbers, dtype=float)
    ordered = np.sort(values)
    std_dev = float(np.std(values, ddof=1)) if len(values) > 1 else 0.0

    return Stats(
        min=float(ordered[0]),
        max=float(ordered[-1]),
        mean=float(values.mean()),
        median=float(ordered[len(ordered) // 2]),
        std_dev=std_dev,
    )


def analyze_by_minute(entries: Iterable[LogEntry]) -> List[TimeAnalysisBucket]:
    """
    Group entries into one-minute buckets keyed by 'YYYY-MM-DDTHH:MM' (UTC).

    Entries without a parseable timestamp are left out. Response times of
    timed out requests are excluded from the bucket averages; rejected
    requests still count.
    """
    rows = [
        {
            'timestamp': entry.timestamp_date,
            'total_time': entry.total_time,
            'is_timeout': entry.is_timeout,
            'is_error': entry.is_error,
            'status_code': entry.target_status_code,
        }
        for entry in entries
        if entry.timestamp_date is not None
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df['timestamp'] = pd.to_datetime(df['timestamp'], utc=True, errors='coerce')
    df = df[df['timestamp'].notna()].copy()
    if len(df) == 0:
        return []

    df['minute'] = df['timestamp'].dt.floor('min').dt.strftime(MINUTE_FORMAT)

    buckets = []
    for minute, group in df.groupby('minute', sort=True):
        times = group.loc[~group['is_timeout'], 'total_time']
        buckets.append(TimeAnalysisBucket(
            timestamp=str(minute),
            count=int(len(group)),
            avg_response_time=float(times.mean()) if len(times) > 0 else 0.0,
            max_response_time=float(times.max()) if len(times) > 0 else 0.0,
            errors=int(group['is_error'].sum()),
            timeouts=int(group['is_timeout'].sum()),
            status_codes={str(k): int(v) for k, v in group['status_code'].value_counts().items()},
        ))

    return sorted(buckets, key=lambda b: b.timestamp)


def analyze_entries(entries: Iterable[LogEntry]) -> AnalysisResult:
    """Fold already-parsed entries into an AnalysisResult."""
    collected: List[LogEntry] = []
    status_codes = Counter()
    endpoints = Counter()
    client_ips = Counter()
    methods = Counter()
    response_times: List[float] = []
    errors: List[LogEntry] = []
    timeouts: List[LogEntry] = []
    rejected: List[LogEntry] = []

    for entry in entries:
        collected.append(entry)

        status_codes[entry.target_status_code] += 1
        endpoints[entry.endpoint] += 1
        client_ips[entry.client_ip] += 1
        methods[entry.request_method] += 1

        if not entry.is_timeout and not entry.is_rejected:
            response_times.append(entry.total_time)

        # A rejection by the load balancer is never counted as an error
        if entry.is_error and not entry.is_rejected:
            errors.append(entry)

        if entry.is_timeout:
            timeouts.append(entry)

        if entry.is_rejected:
            rejected.append(entry)

    return AnalysisResult(
        entries=collected,
        status_codes=dict(status_codes),
        endpoints=dict(endpoints),
        client_ips=dict(client_ips),
        methods=dict(methods),
        response_times=response_times,
        errors=errors,
        timeouts=timeouts,
        rejected_requests=rejected,
        stats=calculate_stats(response_times),
        time_analysis=analyze_by_minute(collected),
    )


def analyze_lines(lines: Iterable[str]) -> AnalysisResult:
    """
    Parse and analyze raw ALB log lines.

    Blank or whitespace-only lines are skipped; every other line becomes one
    entry, malformed lines included.

    Args:
        lines: Raw log lines

    Returns:
        AnalysisResult over all parsed entries
    """
    entries = (parse_log_line(line.strip()) for line in lines if line.strip())
    return analyze_entries(entries)


def sort_by_count(counts: Dict[str, int], limit: Optional[int] = None) -> List[tuple]:
    """Return (key, count) pairs ordered by descending count."""
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit] if limit else ranked


def percentage(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0
