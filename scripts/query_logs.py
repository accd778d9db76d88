#!/usr/bin/env python3
"""
ALB Log Query Orchestration Script
Orchestrates the full pipeline: download from S3 -> combine -> analyze
"""

import argparse
import logging
import sys
import zlib
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from botocore.exceptions import BotoCoreError, ClientError

from src.analyze.analytics import analyze_lines
from src.analyze.report import format_console, generate_report
from src.parse.log_parser import read_log_lines
from src.sync.sync_manager import create_sync_instance
from src.utils.config_loader import ConfigError, load_config, get_enabled_sources
from src.utils.date_utils import parse_date_range, output_dir_name
from src.utils.log_combiner import (
    LogCombineError,
    combine_gzip_files,
    get_gzip_files,
    is_already_combined,
)

# Colors for output
class Colors:
    RED = '\033[0;31m'
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    BLUE = '\033[0;34m'
    NC = '\033[0m'  # No Color

COMBINED_LOG_NAME = "combined.log"
ANALYSIS_NAME = "analysis"


def pick_source(sources: dict, source_name: str = None):
    """Return (name, config) of the requested source or the first enabled one."""
    if source_name:
        if source_name not in sources:
            raise ConfigError(f"Source '{source_name}' not found in configuration")
        return source_name, sources[source_name]

    enabled = get_enabled_sources(sources)
    if not enabled:
        raise ConfigError("No enabled sources found in configuration")
    name = next(iter(enabled))
    return name, enabled[name]


def run_sync(source_name: str, source_config: dict, output_dir: Path,
             start_date: str, end_date: str, workers: int) -> bool:
    """Download logs into output_dir unless .gz files are already there."""
    print(f"{Colors.GREEN}[1/3] Downloading logs from S3...{Colors.NC}")

    existing = get_gzip_files(output_dir)
    if existing:
        print(f"{Colors.YELLOW}  Found {len(existing)} existing log file(s), skipping download{Colors.NC}\n")
        return True

    # Downloads for a date range land in their own directory
    config = dict(source_config, local_dir=str(output_dir))
    try:
        downloads, skips, errors = create_sync_instance(source_name, config).sync(
            start_date, end_date, workers
        )
    except (ClientError, BotoCoreError, ValueError) as e:
        print(f"{Colors.RED}Error: Download failed: {e}{Colors.NC}", file=sys.stderr)
        return False

    print(f"  Downloaded {downloads} file(s), skipped {skips}")
    if errors:
        print(f"{Colors.YELLOW}  {errors} file(s) failed to download{Colors.NC}")
    if not get_gzip_files(output_dir):
        print(f"{Colors.RED}Error: No log files found for {start_date} to {end_date}{Colors.NC}", file=sys.stderr)
        return False
    print()
    return True


def run_combine(output_dir: Path) -> bool:
    """Decompress and concatenate downloaded logs."""
    print(f"{Colors.GREEN}[2/3] Combining log files...{Colors.NC}")
    combined_path = output_dir / COMBINED_LOG_NAME

    if is_already_combined(combined_path):
        print(f"{Colors.YELLOW}  Reusing existing combined log: {combined_path}{Colors.NC}")

    try:
        line_count = combine_gzip_files(get_gzip_files(output_dir), combined_path)
    except LogCombineError as e:
        print(f"{Colors.RED}Error: {e}{Colors.NC}", file=sys.stderr)
        return False

    print(f"  {line_count:,} log lines in {combined_path}\n")
    return True


def run_analyze(output_dir: Path, output_format: str, slow_limit, slow_threshold: float) -> bool:
    """Analyze the combined log and save the report next to it."""
    print(f"{Colors.GREEN}[3/3] Analyzing logs...{Colors.NC}")
    combined_path = output_dir / COMBINED_LOG_NAME

    try:
        lines = read_log_lines(combined_path)
    except (OSError, EOFError, zlib.error) as e:
        print(f"{Colors.RED}Error: {e}{Colors.NC}", file=sys.stderr)
        print("Run the download and combine operations first", file=sys.stderr)
        return False

    result = analyze_lines(lines)
    print(format_console(result, slow_limit, slow_threshold))

    report_path = generate_report(result, output_format, output_dir / ANALYSIS_NAME,
                                  slow_limit, slow_threshold)
    print()
    print(f"{Colors.GREEN}{'='*60}{Colors.NC}")
    print(f"Combined log: {combined_path}")
    print(f"Report:       {report_path}")
    print()
    print("Other options:")
    print(f"  python scripts/analyze_logs.py {combined_path} --slow-limit all --output {output_dir}/analysis-full")
    print(f"  python scripts/analyze_logs.py {combined_path} --slow-threshold 0.5 --output {output_dir}/analysis-slow")
    print(f"  python scripts/analyze_logs.py {combined_path} --format csv --output {output_dir}/analysis")
    return True


def main():
    parser = argparse.ArgumentParser(
        description="ALB Log Query Tool - downloads, combines and analyzes ALB access logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --date 2025-10-28
  %(prog)s --start-date 2025/10/27 --end-date 2025/10/31
  %(prog)s --date 2025-10-28 --operation analyze --format json
        """
    )
    parser.add_argument("--start-date", type=str, help="Start date (YYYY-MM-DD or YYYY/MM/DD)")
    parser.add_argument("--end-date", type=str, help="End date (defaults to start date)")
    parser.add_argument("--date", type=str, help="Single day to process (defaults to today UTC)")
    parser.add_argument("--source", type=str, help="Log source from config (default: first enabled)")
    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument(
        "--operation",
        choices=["sync", "combine", "analyze", "all"],
        default="all",
        help="Operation to perform (default: all)"
    )
    parser.add_argument("--logs-dir", type=str, default=None, help="Base directory for downloads (default: source local_dir)")
    parser.add_argument("--format", choices=["txt", "json", "csv"], default="txt", help="Saved report format (default: txt)")
    parser.add_argument("--slow-limit", type=str, default="100", help="Slow requests to list, or 'all' (default: 100)")
    parser.add_argument("--slow-threshold", type=float, default=1.0, help="Slow request threshold in seconds (default: 1.0)")
    parser.add_argument("--workers", type=int, default=10, help="Concurrent download workers (default: 10)")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    try:
        start_date, end_date = parse_date_range(args.start_date, args.end_date, args.date)
    except ValueError as e:
        print(f"{Colors.RED}Error: {e}{Colors.NC}", file=sys.stderr)
        parser.print_help()
        sys.exit(1)

    if args.slow_limit == "all":
        slow_limit = None
    elif args.slow_limit.isdigit() and int(args.slow_limit) > 0:
        slow_limit = int(args.slow_limit)
    else:
        print(f"{Colors.RED}Error: --slow-limit must be a positive number or 'all'{Colors.NC}", file=sys.stderr)
        sys.exit(1)

    try:
        sources = load_config(Path(args.config) if args.config else None)
        source_name, source_config = pick_source(sources, args.source)
    except ConfigError as e:
        print(f"{Colors.RED}Error: {e}{Colors.NC}", file=sys.stderr)
        sys.exit(1)

    base_dir = Path(args.logs_dir or source_config.get('local_dir', 'logs'))
    output_dir = base_dir / output_dir_name(start_date, end_date)

    print(f"{Colors.BLUE}ALB Log Query Tool{Colors.NC}")
    print("=" * 60)
    print(f"Source:     {source_name}")
    print(f"Date range: {start_date} to {end_date}")
    print(f"Output dir: {output_dir}")
    print()

    if args.operation in ["sync", "all"]:
        if not run_sync(source_name, source_config, output_dir, start_date, end_date, args.workers):
            sys.exit(1)

    if args.operation in ["combine", "all"]:
        if not run_combine(output_dir):
            sys.exit(1)

    if args.operation in ["analyze", "all"]:
        if not run_analyze(output_dir, args.format, slow_limit, args.slow_threshold):
            sys.exit(1)

    print(f"\n{Colors.GREEN}All operations completed successfully!{Colors.NC}")


if __name__ == "__main__":
    main()
