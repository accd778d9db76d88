"""
Configuration loading utilities
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

# Default config path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "alb_log_sources.yaml"
FALLBACK_CONFIG_NAME = "config.yaml"

DEFAULT_REGION = "ap-northeast-1"
DEFAULT_LOCAL_DIR = "logs"
ENV_SOURCE_NAME = "env"

REQUIRED_ENV_VARS = ("AWS_PROFILE", "S3_BUCKET", "S3_PREFIX", "AWS_ACCOUNT_ID")


class ConfigError(Exception):
    """Raised when no usable configuration can be found."""


@dataclass(frozen=True)
class AppConfig:
    """Resolved settings for downloading one ALB's logs."""
    aws_profile: str
    s3_bucket: str
    s3_prefix: str
    aws_account_id: str
    region: str = DEFAULT_REGION
    local_dir: str = DEFAULT_LOCAL_DIR

    def to_source(self) -> Dict:
        """Express this config as a log source definition for the sync layer."""
        return {
            'type': 's3',
            'description': f"ALB logs from s3://{self.s3_bucket}/{self.s3_prefix}",
            'enabled': True,
            's3_bucket': self.s3_bucket,
            'prefix': self.s3_prefix,
            'account_id': self.aws_account_id,
            'region': self.region,
            'credentials': {'profile': self.aws_profile},
            'local_dir': self.local_dir,
        }

    @classmethod
    def from_source(cls, source: Mapping) -> "AppConfig":
        return cls(
            aws_profile=source.get('credentials', {}).get('profile', ''),
            s3_bucket=source.get('s3_bucket', ''),
            s3_prefix=source.get('prefix', ''),
            aws_account_id=str(source.get('account_id', '')),
            region=source.get('region', DEFAULT_REGION),
            local_dir=source.get('local_dir', DEFAULT_LOCAL_DIR),
        )


def has_env_config(environ: Mapping[str, str] = None) -> bool:
    """True when every required environment variable is set and non-empty."""
    environ = os.environ if environ is None else environ
    return all(environ.get(name) for name in REQUIRED_ENV_VARS)


def load_env_config(environ: Mapping[str, str] = None) -> AppConfig:
    """Build an AppConfig from environment variables."""
    environ = os.environ if environ is None else environ
    return AppConfig(
        aws_profile=environ.get("AWS_PROFILE", ""),
        s3_bucket=environ.get("S3_BUCKET", ""),
        s3_prefix=environ.get("S3_PREFIX", ""),
        aws_account_id=environ.get("AWS_ACCOUNT_ID", ""),
        region=environ.get("AWS_REGION") or DEFAULT_REGION,
        local_dir=environ.get("ALB_LOG_DIR") or DEFAULT_LOCAL_DIR,
    )


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """Return the first existing config file among the known locations."""
    if config_path is not None:
        return config_path if config_path.exists() else None

    for candidate in (DEFAULT_CONFIG_PATH, Path.cwd() / FALLBACK_CONFIG_NAME):
        if candidate.exists():
            return candidate
    return None


def validate_source(name: str, source: Mapping) -> None:
    """Check that an s3 source carries the fields needed to build key prefixes."""
    if source.get('type', '').lower() != 's3':
        return
    for field in ('s3_bucket', 'account_id', 'region'):
        if not source.get(field):
            raise ConfigError(f"Source '{name}' is missing required field '{field}'")


def load_config(config_path: Path = None, environ: Mapping[str, str] = None) -> Dict:
    """
    Load log source definitions.

    Environment variables take precedence over the YAML file: when
    AWS_PROFILE, S3_BUCKET, S3_PREFIX and AWS_ACCOUNT_ID are all set a single
    source named 'env' is returned.

    Args:
        config_path: Explicit YAML file, defaults to config/alb_log_sources.yaml
        environ: Environment mapping, defaults to os.environ

    Returns:
        Mapping of source name to source definition
    """
    if has_env_config(environ):
        return {ENV_SOURCE_NAME: load_env_config(environ).to_source()}

    path = find_config_file(config_path)
    if path is None:
        raise ConfigError(
            f"Configuration file not found: {config_path or DEFAULT_CONFIG_PATH}\n"
            f"Create it with a 'log_sources' mapping, or set the environment variables: "
            f"{', '.join(REQUIRED_ENV_VARS)} (and optionally AWS_REGION)"
        )

    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse configuration file {path}: {e}") from e

    if not config or 'log_sources' not in config or not isinstance(config['log_sources'], dict):
        raise ConfigError(f"Invalid configuration file format: {path} (expected a 'log_sources' mapping)")

    sources = config['log_sources']
    for name, source in sources.items():
        validate_source(name, source)
    return sources


def get_enabled_sources(sources: Dict) -> Dict:
    """Get all enabled log sources."""
    return {name: config for name, config in sources.items()
            if config.get('enabled', False)}
