"""Shared ALB log line fixtures."""

import pytest


FULL_LOG_LINE = (
    'h2 2025-10-28T01:41:11.673240Z app/my-alb/abc123def456 203.0.113.10:40742 10.0.1.100:3000 '
    '0.002 0.526 0.000 204 204 58 231 '
    '"OPTIONS https://api.example.com:443/v1/services/123/items/456/location HTTP/2.0" "Mozilla/5.0" '
    'ECDHE-RSA-AES128-GCM-SHA256 TLSv1.2 '
    'arn:aws:elasticloadbalancing:ap-northeast-1:123456789012:targetgroup/my-target-group/abc123 '
    '"Root=1-69001f37-621bfadc46ed205510eacd15" "api.example.com" '
    '"arn:aws:acm:ap-northeast-1:123456789012:certificate/abc-123-def-456" 1 2025-10-28T01:41:11.145000Z '
    '"forward" "-" "-" "10.0.1.100:3000" "204" "-" "-" TID_abc123def456 "-" "-" "-"'
)


def make_line(times="0.002 0.526 0.000", elb="200", target="200",
              request="GET https://api.example.com:443/v1/test HTTP/2.0",
              timestamp="2025-10-28T01:41:11.673240Z", client="203.0.113.10:40742",
              user_agent="Mozilla/5.0"):
    """Build an ALB log line with the trailing optional fields set to '-'."""
    return (
        f'h2 {timestamp} app/my-alb/abc123 {client} 10.0.1.100:3000 {times} {elb} {target} 58 231 '
        f'"{request}" "{user_agent}" - - - - - - - - - - - - - -'
    )


SAMPLE_LINES = [
    make_line(times="0.002 0.526 0.000", elb="204", target="204",
              request="OPTIONS https://api.example.com:443/v1/test HTTP/2.0",
              timestamp="2025-10-28T01:41:11.673240Z"),
    make_line(times="0.003 1.234 0.001", elb="200", target="200",
              request="GET https://api.example.com:443/v1/test HTTP/2.0",
              timestamp="2025-10-28T01:41:12.673240Z"),
    make_line(times="0.002 0.100 0.000", elb="500", target="500",
              request="POST https://api.example.com:443/v1/error HTTP/2.0",
              timestamp="2025-10-28T01:41:13.673240Z", client="203.0.113.11:40742"),
    make_line(times="-1 -1 -1", elb="504", target="504",
              request="GET https://api.example.com:443/v1/timeout HTTP/2.0",
              timestamp="2025-10-28T01:41:14.673240Z"),
]


@pytest.fixture
def sample_lines():
    return list(SAMPLE_LINES)
