"""
S3-specific sync implementation for ALB access logs
"""

import logging
import os
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Tuple
import boto3
from botocore.exceptions import ClientError, BotoCoreError

from .base import BaseSync
from src.utils.date_utils import iter_dates, to_s3_date_prefix

logger = logging.getLogger(__name__)

LOG_SUFFIXES = ('.log.gz', '.log')

# Outcome of a single object download
DOWNLOADED = 'downloaded'
SKIPPED = 'skipped'
FAILED = 'failed'


class S3Sync(BaseSync):
    """Download ALB access logs from S3.

    ALB writes objects under
    ``{prefix}/{account_id}/elasticloadbalancing/{region}/YYYY/MM/DD/``;
    ``prefix`` usually ends in ``AWSLogs``.
    """

    def __init__(self, source_name: str, source_config: dict, s3_client=None):
        super().__init__(source_name, source_config)
        self.bucket_name = source_config.get('s3_bucket', '').replace('s3://', '').strip('/')
        self.prefix = source_config.get('prefix', '').strip('/')
        self.account_id = str(source_config.get('account_id', ''))
        self.region = source_config.get('region', '')
        self.s3_client = s3_client

    def _create_s3_client(self):
        """Create S3 client with optional profile."""
        profile = self.config.get('credentials', {}).get('profile')

        if profile:
            session = boto3.Session(profile_name=profile, region_name=self.region or None)
            return session.client('s3')
        else:
            return boto3.client('s3', region_name=self.region or None)

    def _client(self):
        if self.s3_client is None:
            self.s3_client = self._create_s3_client()
        return self.s3_client

    def build_prefix(self, day) -> str:
        """Object key prefix holding one day's logs."""
        parts = [self.prefix] if self.prefix else []
        parts += [self.account_id, 'elasticloadbalancing', self.region, to_s3_date_prefix(day)]
        return '/'.join(parts) + '/'

    def test_connection(self) -> bool:
        """Test connection to S3 bucket."""
        try:
            self._client().head_bucket(Bucket=self.bucket_name)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning("Cannot access bucket %s: %s", self.bucket_name, e)
            return False

    def list_log_files(self, prefix: str) -> List[str]:
        """List log object keys under prefix."""
        files = []
        paginator = self._client().get_paginator('list_objects_v2')
        for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
            for obj in page.get('Contents', []):
                key = obj['Key']
                if key.endswith(LOG_SUFFIXES):
                    files.append(key)
        return files

    def _get_s3_object_size(self, key: str) -> Optional[int]:
        """Get the size of an S3 object."""
        try:
            response = self._client().head_object(Bucket=self.bucket_name, Key=key)
            return response.get('ContentLength', 0)
        except ClientError:
            return None

    def _download_file(self, s3_key: str, local_file: Path) -> str:
        """Download one object unless an identical-size local copy exists."""
        if local_file.exists():
            s3_size = self._get_s3_object_size(s3_key)
            if s3_size is not None and s3_size > 0 and s3_size == local_file.stat().st_size:
                logger.debug("Skipped (up to date): %s", local_file.name)
                return SKIPPED

        try:
            self._client().download_file(self.bucket_name, s3_key, str(local_file))
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to download %s: %s", s3_key, e)
            return FAILED
        logger.debug("Downloaded: %s", local_file.name)
        return DOWNLOADED

    def _sync_prefix(self, prefix: str, max_workers: int) -> Tuple[int, int, int]:
        """Download every log object under one prefix."""
        try:
            files = self.list_log_files(prefix)
        except (ClientError, BotoCoreError) as e:
            logger.error("Error listing s3://%s/%s: %s", self.bucket_name, prefix, e)
            return (0, 0, 1)

        if not files:
            logger.info("No files found under s3://%s/%s", self.bucket_name, prefix)
            return (0, 0, 0)

        logger.info("Found %d file(s) under s3://%s/%s", len(files), self.bucket_name, prefix)
        self.local_dir.mkdir(parents=True, exist_ok=True)

        downloads = skips = errors = 0
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(self._download_file, key, self.local_dir / os.path.basename(key)): key
                for key in files
            }
            for future in as_completed(futures):
                outcome = future.result()
                if outcome == DOWNLOADED:
                    downloads += 1
                elif outcome == SKIPPED:
                    skips += 1
                else:
                    errors += 1

        return (downloads, skips, errors)

    def sync(self, start_date: str, end_date: str, max_workers: int = 10) -> Tuple[int, int, int]:
        """Sync logs for the specified date range."""
        self.local_dir.mkdir(parents=True, exist_ok=True)

        total_downloads = 0
        total_skips = 0
        total_errors = 0

        for day in iter_dates(start_date, end_date):
            downloads, skips, errors = self._sync_prefix(self.build_prefix(day), max_workers)
            total_downloads += downloads
            total_skips += skips
            total_errors += errors

        logger.info("Source '%s': %d downloaded, %d skipped, %d errors",
                    self.source_name, total_downloads, total_skips, total_errors)
        return (total_downloads, total_skips, total_errors)
