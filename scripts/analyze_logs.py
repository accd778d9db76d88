#!/usr/bin/env python3
"""
ALB Log Analytics
Analyzes an ALB access log file (plain or .gz) or stdin and prints a report.
"""

import argparse
import logging
import sys
import zlib
from pathlib import Path

# Add src to path for imports (go up one level from scripts/ to root)
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.analyze.analytics import analyze_lines
from src.analyze.report import format_console, generate_report
from src.parse.log_parser import read_log_lines, read_stdin_lines

# Colors for output
class Colors:
    RED = '\033[0;31m'
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    BLUE = '\033[0;34m'
    NC = '\033[0m'  # No Color


def parse_slow_limit(value: str):
    """'all' means no limit, otherwise a positive integer."""
    if value == 'all':
        return None
    try:
        limit = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid slow request limit: {value!r} (use a number or 'all')")
    if limit <= 0:
        raise argparse.ArgumentTypeError("slow request limit must be positive")
    return limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Analyze AWS Application Load Balancer access logs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s logs/2025-10-28/combined.log
  %(prog)s combined.log --slow-limit all --output analysis
  %(prog)s combined.log --slow-threshold 0.5 --slow-limit 100
  %(prog)s combined.log --output analysis --format json
  zcat *.log.gz | %(prog)s
        """
    )
    parser.add_argument(
        'file',
        nargs='?',
        help='Log file to analyze (.gz supported); reads stdin when omitted'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Also save the report to this path (extension added from --format)'
    )
    parser.add_argument(
        '--format',
        choices=['txt', 'json', 'csv'],
        default='txt',
        help='Format of the saved report (default: txt)'
    )
    parser.add_argument(
        '--slow-limit',
        type=parse_slow_limit,
        default=100,
        help="Number of slow requests to list, or 'all' (default: 100)"
    )
    parser.add_argument(
        '--slow-threshold',
        type=float,
        default=1.0,
        help='Seconds above which a request counts as slow (default: 1.0)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show debug logging (malformed lines are always reported as warnings)'
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    try:
        if args.file:
            print(f"{Colors.BLUE}Analyzing log file: {args.file}{Colors.NC}\n", file=sys.stderr)
            lines = read_log_lines(Path(args.file))
        else:
            print(f"{Colors.BLUE}Reading from stdin (Ctrl+D to finish)...{Colors.NC}\n", file=sys.stderr)
            lines = read_stdin_lines()
    except (OSError, EOFError, zlib.error) as e:
        print(f"{Colors.RED}Error: {e}{Colors.NC}", file=sys.stderr)
        return 1

    result = analyze_lines(lines)
    print(format_console(result, args.slow_limit, args.slow_threshold))

    if args.output:
        try:
            saved = generate_report(result, args.format, Path(args.output),
                                    args.slow_limit, args.slow_threshold)
        except OSError as e:
            print(f"{Colors.RED}Error: Failed to write report: {e}{Colors.NC}", file=sys.stderr)
            return 1
        print(f"\n{Colors.GREEN}Report saved to {saved}{Colors.NC}")

    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
