"""
Combine downloaded gzip log files into a single plain-text log
"""

import gzip
import logging
import shutil
import zlib
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class LogCombineError(Exception):
    """Raised when gzip files cannot be decompressed and combined."""


def get_gzip_files(directory: Path) -> List[Path]:
    """List .gz files in a directory, sorted by name. Missing directories yield []."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix == '.gz' and p.is_file())


def is_already_combined(output_path: Path) -> bool:
    return Path(output_path).exists()


def count_lines(file_path: Path) -> int:
    """Count non-blank lines in a text file."""
    count = 0
    with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            if line.strip():
                count += 1
    return count


def combine_gzip_files(gzip_files: List[Path], output_path: Path) -> int:
    """
    Decompress gzip files in order and concatenate them into output_path.

    An existing output file is reused as-is.

    Args:
        gzip_files: Files to decompress
        output_path: Combined plain-text log

    Returns:
        Number of non-blank lines in the combined file
    """
    output_path = Path(output_path)
    if is_already_combined(output_path):
        logger.info("Reusing combined log %s", output_path)
        return count_lines(output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(output_path, 'wb') as out:
            for gzip_file in gzip_files:
                logger.debug("Decompressing %s", gzip_file)
                with gzip.open(gzip_file, 'rb') as src:
                    shutil.copyfileobj(src, out)
    except (OSError, EOFError, zlib.error) as e:
        # Leave no partial file behind, or the next run would reuse it
        output_path.unlink(missing_ok=True)
        raise LogCombineError(f"Failed to combine log files: {e}") from e

    return count_lines(output_path)
