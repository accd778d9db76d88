"""
Log synchronization modules
"""

from .base import BaseSync
from .s3_sync import S3Sync
from .sync_manager import SyncManager

__all__ = ['BaseSync', 'S3Sync', 'SyncManager']

