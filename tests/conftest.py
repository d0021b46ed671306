"""
Shared fixtures.

The existence index, metrics and the "horizon" logger are process-wide,
so every test starts from a clean slate.
"""

import asyncio
import logging

import pytest

from horizon.bus import create_event_horizon
from horizon.observability import reset_metrics
from horizon.scope import ExistenceIndex, reset_existence_index


def _reset_horizon_logger():
    horizon_logger = logging.getLogger("horizon")
    horizon_logger.handlers.clear()
    horizon_logger.setLevel(logging.NOTSET)
    horizon_logger.propagate = True
    logging.getLogger("horizon.bus").setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clean_globals():
    reset_existence_index()
    reset_metrics()
    yield
    reset_existence_index()
    reset_metrics()
    _reset_horizon_logger()


@pytest.fixture
def bus():
    return create_event_horizon()


@pytest.fixture
def index():
    """Private existence index for tests that inject one."""
    return ExistenceIndex()


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run
