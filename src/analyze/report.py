"""
Report rendering for ALB log analysis results (console text, JSON, CSV).
"""

import io
import json
from pathlib import Path
from typing import Dict, List, Optional

from src.analyze.analytics import AnalysisResult, percentage, sort_by_count
from src.parse.log_parser import LogEntry


DEFAULT_SLOW_THRESHOLD = 1.0
DEFAULT_SLOW_LIMIT = 100
DETAIL_LIMIT = 10
TOP_LIMIT = 10
BOTTLENECK_MIN_SECONDS = 0.1

CSV_HEADER = [
    'Timestamp', 'Method', 'Path', 'Status Code', 'Client IP',
    'Request Processing Time', 'Target Processing Time',
    'Response Processing Time', 'Total Time', 'Is Timeout',
]

FORMAT_EXTENSIONS = {
    'txt': '.txt',
    'json': '.json',
    'csv': '.csv',
}


def find_slow_requests(entries: List[LogEntry],
                       threshold: float = DEFAULT_SLOW_THRESHOLD,
                       limit: Optional[int] = DEFAULT_SLOW_LIMIT) -> List[LogEntry]:
    """
    Find requests slower than threshold, slowest first.

    Args:
        entries: Parsed log entries
        threshold: Minimum total time in seconds (exclusive)
        limit: Maximum number of entries to return, None for all

    Returns:
        Slow entries sorted by descending total time
    """
    slow = sorted(
        (e for e in entries if e.total_time > threshold),
        key=lambda e: e.total_time,
        reverse=True
    )
    return slow[:limit] if limit else slow


def find_bottleneck(entry: LogEntry) -> Optional[tuple]:
    """Return (phase, seconds) of the slowest processing phase, if notable."""
    phases = [
        ('Request processing', entry.request_processing_time),
        ('Target processing', entry.target_processing_time),
        ('Response processing', entry.response_processing_time),
    ]
    name, seconds = max(phases, key=lambda p: p[1])
    if seconds > BOTTLENECK_MIN_SECONDS:
        return name, seconds
    return None


def _entry_summary(entry: LogEntry, status_code: str) -> Dict:
    return {
        'timestamp': entry.timestamp,
        'statusCode': status_code,
        'method': entry.request_method,
        'path': entry.request_path,
        'clientIp': entry.client_ip,
    }


def format_json(result: AnalysisResult) -> Dict:
    """Build the JSON report structure."""
    total = result.total_requests
    slow = find_slow_requests(result.entries, DEFAULT_SLOW_THRESHOLD, None)

    if result.stats:
        stats = {
            'requestsAnalyzed': len(result.response_times),
            'min': result.stats.min,
            'max': result.stats.max,
            'mean': result.stats.mean,
            'median': result.stats.median,
            'stdDev': result.stats.std_dev,
        }
    else:
        stats = None

    return {
        'summary': {
            'totalRequests': total,
            'timeouts': len(result.timeouts),
            'errors': len(result.errors),
            'slowRequests': len(slow),
        },
        'responseTimeStats': stats,
        'statusCodes': dict(result.status_codes),
        'httpMethods': dict(result.methods),
        'topEndpoints': [
            {'endpoint': endpoint, 'count': count, 'percentage': f"{percentage(count, total):.1f}"}
            for endpoint, count in sort_by_count(result.endpoints, TOP_LIMIT)
        ],
        'topClientIPs': [
            {'ip': ip, 'count': count, 'percentage': f"{percentage(count, total):.1f}"}
            for ip, count in sort_by_count(result.client_ips, TOP_LIMIT)
        ],
        'timeouts': [_entry_summary(e, e.elb_status_code) for e in result.timeouts],
        'errors': [_entry_summary(e, e.target_status_code) for e in result.errors],
        'slowRequests': [
            {
                'timestamp': e.timestamp,
                'method': e.request_method,
                'path': e.request_path,
                'statusCode': e.target_status_code,
                'clientIp': e.client_ip,
                'totalTime': e.total_time,
                'requestProcessingTime': e.request_processing_time,
                'targetProcessingTime': e.target_processing_time,
                'responseProcessingTime': e.response_processing_time,
            }
            for e in slow
        ],
        'trafficByMinute': [
            {
                'timestamp': b.timestamp,
                'count': b.count,
                'avgResponseTime': b.avg_response_time,
                'maxResponseTime': b.max_response_time,
                'errors': b.errors,
                'timeouts': b.timeouts,
                'statusCodes': dict(b.status_codes),
            }
            for b in result.time_analysis
        ],
    }


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _csv_field(value: str) -> str:
    # Quote only when the raw token would break the row
    if any(c in value for c in ',"\r\n'):
        return _quote(value)
    return value


def format_csv(result: AnalysisResult) -> str:
    """
    Render one CSV row per entry.

    The path column is always quoted. Other text columns are quoted only
    when they contain a comma, quote or line break.
    """
    buffer = io.StringIO()
    buffer.write(','.join(CSV_HEADER) + '\n')

    for entry in result.entries:
        row = [
            _csv_field(entry.timestamp),
            _csv_field(entry.request_method),
            _quote(entry.request_path),
            _csv_field(entry.target_status_code),
            _csv_field(entry.client_ip),
            _format_number(entry.request_processing_time),
            _format_number(entry.target_processing_time),
            _format_number(entry.response_processing_time),
            _format_number(entry.total_time),
            'true' if entry.is_timeout else 'false',
        ]
        buffer.write(','.join(row) + '\n')

    return buffer.getvalue()


def _format_number(value: float) -> str:
    # Whole numbers render without a trailing '.0' (-1 stays '-1')
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_console(result: AnalysisResult,
                   slow_limit: Optional[int] = DEFAULT_SLOW_LIMIT,
                   slow_threshold: float = DEFAULT_SLOW_THRESHOLD) -> str:
    """Render the plain-text analysis summary."""
    if result.total_requests == 0:
        return "No log entries found."

    total = result.total_requests
    lines = []
    lines.append("=" * 80)
    lines.append("ALB Log Analysis Summary")
    lines.append("=" * 80)
    lines.append("")

    lines.append(f"Total requests: {total:,}")
    if result.timeouts:
        lines.append(f"Timeouts: {len(result.timeouts):,} ({percentage(len(result.timeouts), total):.1f}%)")
    if result.rejected_requests:
        lines.append(f"Rejected requests: {len(result.rejected_requests):,} "
                     f"({percentage(len(result.rejected_requests), total):.1f}%)")
    lines.append("")

    if result.stats:
        lines.append("## Response Time Statistics (seconds)")
        lines.append(f"  Requests analyzed: {len(result.response_times):,} (excluding timeouts and rejections)")
        lines.append(f"  Min:     {result.stats.min:.4f}")
        lines.append(f"  Max:     {result.stats.max:.4f}")
        lines.append(f"  Mean:    {result.stats.mean:.4f}")
        lines.append(f"  Median:  {result.stats.median:.4f}")
        if len(result.response_times) > 1:
            lines.append(f"  Std Dev: {result.stats.std_dev:.4f}")
        lines.append("")

    lines.append("## Status Code Distribution")
    for code, count in sort_by_count(result.status_codes):
        lines.append(f"  {code}: {count:>6} ({percentage(count, total):5.1f}%)")
    lines.append("")

    lines.append("## HTTP Methods")
    for method, count in sort_by_count(result.methods):
        lines.append(f"  {method}: {count:>6} ({percentage(count, total):5.1f}%)")
    lines.append("")

    lines.append(f"## Top {TOP_LIMIT} Endpoints")
    for endpoint, count in sort_by_count(result.endpoints, TOP_LIMIT):
        lines.append(f"  {endpoint}")
        lines.append(f"    Requests: {count:,} ({percentage(count, total):.1f}%)")
    lines.append("")

    lines.append(f"## Top {TOP_LIMIT} Client IPs")
    for ip, count in sort_by_count(result.client_ips, TOP_LIMIT):
        lines.append(f"  {ip}: {count:>6} ({percentage(count, total):5.1f}%)")
    lines.append("")

    if result.timeouts:
        lines.append(f"## Timeouts (502/504): {len(result.timeouts):,}")
        lines.extend(_detail_lines(result.timeouts, use_elb_status=True))
        lines.append("")

    if result.rejected_requests:
        lines.append(f"## Rejected Requests (load balancer): {len(result.rejected_requests):,}")
        lines.extend(_detail_lines(result.rejected_requests, use_elb_status=True))
        lines.append("")

    if result.errors:
        lines.append(f"## Errors: {len(result.errors):,} (first {DETAIL_LIMIT} shown)")
        lines.extend(_detail_lines(result.errors, use_elb_status=False))
        lines.append("")

    lines.extend(_slow_request_lines(result, slow_limit, slow_threshold))
    lines.extend(_traffic_lines(result))

    return "\n".join(lines)


def _detail_lines(entries: List[LogEntry], use_elb_status: bool) -> List[str]:
    lines = []
    for i, entry in enumerate(entries[:DETAIL_LIMIT], 1):
        status = entry.elb_status_code if use_elb_status else entry.target_status_code
        lines.append(f"  {i}. [{entry.timestamp}] {status} - {entry.request_method} {entry.request_path}")
        lines.append(f"     Client: {entry.client_ip}")
    return lines


def _slow_request_lines(result: AnalysisResult, slow_limit: Optional[int],
                        slow_threshold: float) -> List[str]:
    slow_all = find_slow_requests(result.entries, slow_threshold, None)
    if not slow_all:
        return []

    shown = slow_all[:slow_limit] if slow_limit else slow_all
    lines = [f"## Slow Requests (>{slow_threshold:g}s): {len(slow_all):,}"]
    if slow_limit and len(slow_all) > slow_limit:
        lines.append(f"(showing top {slow_limit})")
    lines.append("-" * 80)

    for i, entry in enumerate(shown, 1):
        lines.append("")
        lines.append(f"{i}. Total: {entry.total_time:.3f}s")
        lines.append(f"   Timestamp: {entry.timestamp}")
        lines.append(f"   Request:   {entry.request_method} {entry.request_path}")
        lines.append(f"   Status:    {entry.target_status_code}")
        lines.append(f"   Client IP: {entry.client_ip}")
        lines.append("   Time breakdown:")
        lines.append(f"     - Request processing:  {entry.request_processing_time:.3f}s")
        lines.append(f"     - Target processing:   {entry.target_processing_time:.3f}s")
        lines.append(f"     - Response processing: {entry.response_processing_time:.3f}s")
        bottleneck = find_bottleneck(entry)
        if bottleneck:
            lines.append(f"   Bottleneck: {bottleneck[0]} ({bottleneck[1]:.3f}s)")

    lines.append("")
    lines.append("-" * 80)
    lines.append("")
    return lines


def _traffic_lines(result: AnalysisResult) -> List[str]:
    lines = ["## Requests per Minute", "=" * 80]
    buckets = result.time_analysis
    if not buckets:
        return lines

    lines.append("")
    lines.append("Time   | Requests | Avg (s) | Max (s) | Errors | Timeouts")
    lines.append("-" * 75)
    for bucket in buckets:
        time_of_day = bucket.timestamp[11:]
        avg = f"{bucket.avg_response_time:7.3f}" if bucket.avg_response_time > 0 else "    N/A"
        peak = f"{bucket.max_response_time:7.3f}" if bucket.max_response_time > 0 else "    N/A"
        lines.append(f"{time_of_day}  | {bucket.count:>8} | {avg} | {peak} | {bucket.errors:>6} | {bucket.timeouts:>8}")
    lines.append("")

    lines.append("Peak traffic minutes:")
    by_count = sorted(buckets, key=lambda b: b.count, reverse=True)[:3]
    for i, bucket in enumerate(by_count, 1):
        lines.append(f"  {i}. {bucket.timestamp[11:]} - {bucket.count:,} requests")
    lines.append("")

    lines.append("Slowest minutes (average response time):")
    by_avg = sorted(buckets, key=lambda b: b.avg_response_time, reverse=True)[:3]
    for i, bucket in enumerate(by_avg, 1):
        if bucket.avg_response_time > 0:
            lines.append(f"  {i}. {bucket.timestamp[11:]} - {bucket.avg_response_time:.3f}s avg "
                         f"({bucket.count:,} requests)")
    lines.append("")
    return lines


def render_report(result: AnalysisResult, output_format: str,
                  slow_limit: Optional[int] = DEFAULT_SLOW_LIMIT,
                  slow_threshold: float = DEFAULT_SLOW_THRESHOLD) -> str:
    """Render a result in the given format ('txt', 'json' or 'csv')."""
    if output_format == 'json':
        return json.dumps(format_json(result), indent=2, ensure_ascii=False)
    elif output_format == 'csv':
        return format_csv(result)
    elif output_format == 'txt':
        return format_console(result, slow_limit, slow_threshold)
    else:
        raise ValueError(f"Unsupported output format: {output_format}")


def generate_report(result: AnalysisResult, output_format: str, output_path: Path,
                    slow_limit: Optional[int] = DEFAULT_SLOW_LIMIT,
                    slow_threshold: float = DEFAULT_SLOW_THRESHOLD) -> Path:
    """
    Render a report and save it to disk.

    The format's extension is appended to output_path when missing.

    Returns:
        Path the report was written to
    """
    content = render_report(result, output_format, slow_limit, slow_threshold)

    output_path = Path(output_path)
    extension = FORMAT_EXTENSIONS[output_format]
    if not output_path.name.endswith(extension):
        output_path = output_path.with_name(output_path.name + extension)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)
        if not content.endswith('\n'):
            f.write('\n')

    return output_path
