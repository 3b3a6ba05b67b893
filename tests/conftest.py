"""
Global pytest fixtures for strbuf tests.

This module provides:
- Module import fixture
- Environment isolation for STRBUF_* variables
- Invariant checking helper
"""

import pytest

from tests.fixtures import assert_invariants as _assert_invariants


@pytest.fixture(scope="session")
def strbuf():
    """Import and return the strbuf module."""
    import strbuf

    return strbuf


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without STRBUF_INITIAL_CAPACITY from the outer environment."""
    monkeypatch.delenv("STRBUF_INITIAL_CAPACITY", raising=False)


@pytest.fixture
def invariants():
    """Return the buffer invariant checker."""
    return _assert_invariants
