"""
Identifier generation for newly created records.

The store never calls ``uuid4()`` itself; an ``IdGenerator`` is injected
alongside the ``Clock`` so tests can supply predictable ids.
"""

from abc import ABC, abstractmethod
from uuid import uuid4


class IdGenerator(ABC):
    """Produces globally-unique opaque string identifiers."""

    @abstractmethod
    def next_id(self) -> str:
        ...


class UuidIdGenerator(IdGenerator):
    """Random UUID4 identifiers (production default)."""

    def next_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator(IdGenerator):
    """
    Deterministic identifiers ``<prefix>-1``, ``<prefix>-2``, ...

    Unique per instance only; intended for tests and replay.
    """

    def __init__(self, prefix: str = "id", start: int = 1):
        self._prefix = prefix
        self._next = start

    def next_id(self) -> str:
        value = f"{self._prefix}-{self._next}"
        self._next += 1
        return value

    def peek(self) -> str:
        """Return the id the next call will produce, without consuming it."""
        return f"{self._prefix}-{self._next}"
