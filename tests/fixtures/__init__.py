"""
Shared test helpers for strbuf.

Maps to: N/A (shared test fixtures)
"""

from .buffers import assert_invariants, buffer_of

__all__ = [
    "assert_invariants",
    "buffer_of",
]
