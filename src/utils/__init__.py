"""
Utility functions for log processing
"""

from .config_loader import AppConfig, ConfigError, load_config, get_enabled_sources
from .date_utils import validate_date, parse_date_range, iter_dates, output_dir_name
from .log_combiner import LogCombineError, combine_gzip_files, get_gzip_files

__all__ = [
    'AppConfig', 'ConfigError', 'load_config', 'get_enabled_sources',
    'validate_date', 'parse_date_range', 'iter_dates', 'output_dir_name',
    'LogCombineError', 'combine_gzip_files', 'get_gzip_files',
]
