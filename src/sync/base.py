"""
Interface shared by ALB access log downloaders
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Tuple


class BaseSync(ABC):
    """Copies one load balancer's access logs into a local directory.

    ALB delivers one object per node every five minutes, partitioned by
    day (``.../elasticloadbalancing/{region}/YYYY/MM/DD/``). Implementations
    fetch whole days and leave the files gzipped; combining happens later.
    """

    def __init__(self, source_name: str, source_config: Dict):
        self.source_name = source_name
        self.config = source_config
        # Without an explicit local_dir each source gets logs/<name>
        self.local_dir = Path(source_config.get('local_dir', f"logs/{source_name}"))

    @abstractmethod
    def sync(self, start_date: str, end_date: str, max_workers: int = 10) -> Tuple[int, int, int]:
        """
        Fetch every log object for the days from start_date to end_date inclusive.

        Args:
            start_date: First day, YYYY-MM-DD
            end_date: Last day, YYYY-MM-DD
            max_workers: Parallel object downloads

        Returns:
            (downloaded, skipped as up to date, failed) object counts
        """

    @abstractmethod
    def test_connection(self) -> bool:
        """True when the log bucket can be reached with the configured credentials."""
