"""
Log analytics modules
"""

from .analytics import (
    AnalysisResult,
    Stats,
    TimeAnalysisBucket,
    analyze_lines,
    analyze_entries,
    analyze_by_minute,
    calculate_stats,
)
from .report import (
    find_slow_requests,
    format_console,
    format_json,
    format_csv,
    render_report,
    generate_report,
)

__all__ = [
    'AnalysisResult',
    'Stats',
    'TimeAnalysisBucket',
    'analyze_lines',
    'analyze_entries',
    'analyze_by_minute',
    'calculate_stats',
    'find_slow_requests',
    'format_console',
    'format_json',
    'format_csv',
    'render_report',
    'generate_report',
]
