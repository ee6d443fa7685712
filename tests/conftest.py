from __future__ import annotations

import sys
import textwrap
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT / "src", ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest
import structlog

from parawrap.rules.engine import ParameterListWrappingRule


@pytest.fixture(autouse=True)
def _reset_structlog():
    # CLI invocations point structlog at a captured stream that is closed afterwards
    yield
    structlog.reset_defaults()


@pytest.fixture
def rule() -> ParameterListWrappingRule:
    return ParameterListWrappingRule()


@pytest.fixture
def write_kotlin(tmp_path: Path):
    def _write(name: str, source: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
        return path

    return _write
