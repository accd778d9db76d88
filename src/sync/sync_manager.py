"""
Sync manager - dispatches ALB log sources to their download implementation
"""

from typing import Dict, Tuple
from .base import BaseSync
from .s3_sync import S3Sync

SYNC_TYPES = {
    's3': S3Sync,
}


def create_sync_instance(source_name: str, source_config: Dict) -> BaseSync:
    """
    Create appropriate sync instance based on source type.

    Args:
        source_name: Name of the log source
        source_config: Configuration dictionary for this source

    Returns:
        BaseSync instance
    """
    source_type = source_config.get('type', '').lower()
    sync_class = SYNC_TYPES.get(source_type)
    if sync_class is None:
        raise ValueError(f"Unsupported source type: {source_type}")
    return sync_class(source_name, source_config)


class SyncManager:
    """Manages synchronization of multiple log sources."""

    def __init__(self, sources: Dict):
        self.sources = sources
        self.sync_instances = {}

    def get_sync_instance(self, source_name: str) -> BaseSync:
        """Get or create sync instance for a source."""
        if source_name not in self.sync_instances:
            if source_name not in self.sources:
                raise ValueError(f"Source '{source_name}' not found in configuration")
            self.sync_instances[source_name] = create_sync_instance(
                source_name, self.sources[source_name]
            )
        return self.sync_instances[source_name]

    def sync_source(self, source_name: str, start_date: str, end_date: str,
                    max_workers: int = 10) -> Tuple[int, int, int]:
        """Sync a specific source."""
        return self.get_sync_instance(source_name).sync(start_date, end_date, max_workers)

    def sync_all(self, start_date: str, end_date: str,
                 max_workers: int = 10) -> Dict[str, Tuple[int, int, int]]:
        """
        Sync all enabled sources.

        Returns:
            Dictionary mapping source names to (downloads, skips, errors) tuples
        """
        return {
            name: self.sync_source(name, start_date, end_date, max_workers)
            for name, config in self.sources.items()
            if config.get('enabled', False)
        }
