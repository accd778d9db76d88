"""requirements.txt and pyproject.toml must declare the same runtime stack."""

import re
from pathlib import Path

ROOT = Path(__file__).parent.parent


def _names(lines):
    return {re.split(r'[<>=!~\s]', line, 1)[0].lower() for line in lines}


def test_requirements_match_pyproject():
    requirements = [
        line.strip() for line in (ROOT / "requirements.txt").read_text().splitlines()
        if line.strip() and not line.startswith('#')
    ]
    pyproject = (ROOT / "pyproject.toml").read_text()
    block = re.search(r'^dependencies = \[(.*?)\]', pyproject, re.S | re.M).group(1)
    declared = re.findall(r'"([^"]+)"', block)

    assert _names(requirements) == _names(declared)
    assert 'botocore' in _names(requirements)
