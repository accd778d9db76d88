"""Tests for src/utils/config_loader.py"""

import pytest

from src.utils.config_loader import (
    AppConfig,
    ConfigError,
    get_enabled_sources,
    has_env_config,
    load_config,
    load_env_config,
)


ENVIRON = {
    'AWS_PROFILE': 'prod',
    'S3_BUCKET': 'my-alb-logs',
    'S3_PREFIX': 'alb/AWSLogs',
    'AWS_ACCOUNT_ID': '123456789012',
}

YAML_CONFIG = """
log_sources:
  prod-alb:
    type: s3
    description: Production ALB
    enabled: true
    s3_bucket: my-alb-logs
    prefix: alb/AWSLogs
    account_id: "123456789012"
    region: us-east-1
    credentials:
      profile: prod
    local_dir: logs/prod-alb
  staging-alb:
    type: s3
    enabled: false
    s3_bucket: staging-alb-logs
    prefix: AWSLogs
    account_id: "210987654321"
    region: ap-northeast-1
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "alb_log_sources.yaml"
    path.write_text(YAML_CONFIG)
    return path


class TestEnvConfig:
    def test_all_vars_required(self):
        assert has_env_config(ENVIRON) is True
        partial = dict(ENVIRON, S3_PREFIX='')
        assert has_env_config(partial) is False
        assert has_env_config({}) is False

    def test_region_defaults(self):
        config = load_env_config(ENVIRON)
        assert config.region == 'ap-northeast-1'
        assert config.local_dir == 'logs'

    def test_region_from_env(self):
        config = load_env_config(dict(ENVIRON, AWS_REGION='eu-west-1', ALB_LOG_DIR='/data/alb'))
        assert config.region == 'eu-west-1'
        assert config.local_dir == '/data/alb'

    def test_env_takes_precedence_over_file(self, config_file):
        sources = load_config(config_file, environ=ENVIRON)
        assert list(sources) == ['env']
        source = sources['env']
        assert source['type'] == 's3'
        assert source['s3_bucket'] == 'my-alb-logs'
        assert source['prefix'] == 'alb/AWSLogs'
        assert source['account_id'] == '123456789012'
        assert source['credentials'] == {'profile': 'prod'}

    def test_env_used_without_file(self, tmp_path):
        sources = load_config(tmp_path / "missing.yaml", environ=ENVIRON)
        assert 'env' in sources


class TestFileConfig:
    def test_loads_sources(self, config_file):
        sources = load_config(config_file, environ={})
        assert set(sources) == {'prod-alb', 'staging-alb'}
        assert sources['prod-alb']['region'] == 'us-east-1'

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Configuration file not found"):
            load_config(tmp_path / "missing.yaml", environ={})

    def test_invalid_format(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("sources:\n  - one\n")
        with pytest.raises(ConfigError, match="Invalid configuration file format"):
            load_config(path, environ={})

    def test_unparseable_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("log_sources: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path, environ={})

    def test_s3_source_requires_account_id(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "log_sources:\n"
            "  broken:\n"
            "    type: s3\n"
            "    s3_bucket: bucket\n"
            "    region: us-east-1\n"
        )
        with pytest.raises(ConfigError, match="account_id"):
            load_config(path, environ={})

    def test_enabled_sources(self, config_file):
        enabled = get_enabled_sources(load_config(config_file, environ={}))
        assert list(enabled) == ['prod-alb']


def test_app_config_round_trips_through_source():
    config = AppConfig(
        aws_profile='prod',
        s3_bucket='bucket',
        s3_prefix='alb/AWSLogs',
        aws_account_id='123456789012',
        region='us-west-2',
    )
    assert AppConfig.from_source(config.to_source()) == config
