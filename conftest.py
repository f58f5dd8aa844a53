"""
Pytest configuration for the IntCode test suite.

    python -m pytest                 # fast tests
    python -m pytest --run-slow      # include the full 100x100 input search

INTCODE_RUN_SLOW=1 in the environment is equivalent to --run-slow.
"""

import os
import pytest


def pytest_addoption(parser):
    parser.addoption("--run-slow", action="store_true", default=False,
                     help="run tests marked slow")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers",
        "slow: exhaustive search tests (deselected unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow") or os.environ.get("INTCODE_RUN_SLOW"):
        return
    skip_slow = pytest.mark.skip(reason="needs --run-slow")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
