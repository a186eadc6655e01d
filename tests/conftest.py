"""
Pytest fixtures for the commodity kernel test suite.

Provides:
- A fresh process-wide commodity registry per test
- Default precision settings per test
- Structured log capture
"""

import json
import logging
from io import StringIO

import pytest

from commodity_kernel.config import reset_precision
from commodity_kernel.domain.commodity import reset_registry
from commodity_kernel.logging_config import (
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from commodity_kernel.parsing import parse_amount


# =============================================================================
# Kernel state fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def registry():
    """Each test starts with an empty commodity registry and default precision."""
    reset_precision()
    fresh = reset_registry()
    yield fresh
    reset_precision()
    reset_registry()


@pytest.fixture
def amount():
    """Shorthand for parsing amount literals: ``amount("$100.00")``."""
    return parse_amount


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture
def captured_logs():
    """
    Capture commodity_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            add(a, b)
            logs = captured_logs()
            assert any(r["message"] == "balance_promoted" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("commodity_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)
