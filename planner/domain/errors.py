"""Domain errors raised by the planner services."""

from __future__ import annotations

from typing import Any


class InvalidRecurrence(ValueError):
    """A repeat rule with a non-positive interval or an unknown type."""


class ScheduleConflict(Exception):
    """Raised when a commit would overlap entries already in the collection."""

    def __init__(self, conflicts: list[Any]) -> None:
        self.conflicts = conflicts
        super().__init__(f"{len(conflicts)} conflicting item(s)")


class CatalogFetchError(RuntimeError):
    """The catalog provider could not deliver a resource."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Failed to fetch catalog resource {key!r}: {reason}")
