"""
Log parsing modules
"""

from .log_parser import LogEntry, parse_log_line, tokenize_line, read_log_lines, read_stdin_lines

__all__ = ['LogEntry', 'parse_log_line', 'tokenize_line', 'read_log_lines', 'read_stdin_lines']
