"""
Pytest configuration and shared fixtures for logmask tests.

Provides a default masking policy and a logger wired to an in-memory
handler, so tests can assert on exactly what a sink would receive.
"""

import logging
import os
import sys

import pytest

# Add parent directory to path for package imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logmask import MaskingRewritePolicy  # noqa: E402
from logmask.stdlib import install  # noqa: E402

SSN = "123-45-6789"


class ListHandler(logging.Handler):
    """Collects records and their final formatted text."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []
        self.messages = []

    def emit(self, record):
        self.records.append(record)
        self.messages.append(record.getMessage())


@pytest.fixture
def ssn():
    return SSN


@pytest.fixture
def policy():
    """Masking policy with the default configuration."""
    return MaskingRewritePolicy()


@pytest.fixture
def list_handler():
    """In-memory handler with a MaskingFilter installed."""
    handler = ListHandler()
    install(handler)
    return handler


@pytest.fixture
def masked_logger(list_handler):
    """Logger that only emits to the masking list handler."""
    log = logging.getLogger("logmask.tests.app")
    log.setLevel(logging.DEBUG)
    log.propagate = False
    log.addHandler(list_handler)
    yield log
    log.removeHandler(list_handler)
