"""
Buffer defaults.

Environment::

    STRBUF_INITIAL_CAPACITY=<int > 0> (default: 16)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from ._logging import scoped_logger
from .allocator import Allocator, get_default_allocator

__all__ = ["DEFAULT_INITIAL_CAPACITY", "BufferConfig", "get_initial_capacity"]

DEFAULT_INITIAL_CAPACITY = 16

_ENV_INITIAL_CAPACITY = "STRBUF_INITIAL_CAPACITY"

log = scoped_logger("config")


def get_initial_capacity() -> int:
    """Initial capacity for buffers created without an explicit one.

    Reads ``STRBUF_INITIAL_CAPACITY``; a value that is not a positive integer
    is ignored with a warning.
    """
    raw = os.environ.get(_ENV_INITIAL_CAPACITY)
    if raw is None or not raw.strip():
        return DEFAULT_INITIAL_CAPACITY
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        log.warning(
            "Ignoring invalid initial capacity",
            extra={"variable": _ENV_INITIAL_CAPACITY, "value": raw},
        )
        return DEFAULT_INITIAL_CAPACITY
    return value


@dataclass
class BufferConfig:
    """
    Creation settings for a Buffer.

    Attributes:
        initial_capacity: Starting capacity in bytes, terminator included.
            Must be positive for initialization to succeed.
        allocator: Strategy that provides storage. Defaults to the
            process-wide default allocator at the time the config is built.

    Example:
        >>> config = BufferConfig(initial_capacity=256)
        >>> small = config.override(initial_capacity=8)
        >>> buf = Buffer.from_config(small)
    """

    initial_capacity: int = field(default_factory=get_initial_capacity)
    allocator: Allocator = field(default_factory=get_default_allocator)

    @classmethod
    def from_env(cls) -> BufferConfig:
        """Build a config from the environment and the default allocator."""
        return cls(initial_capacity=get_initial_capacity())

    def override(self, **kwargs) -> BufferConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)
