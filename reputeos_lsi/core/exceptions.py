"""
Application-level exceptions.

Scoring functions are total over numeric input and do not raise; these
exceptions mark contract violations at the boundary (missing component
fields, malformed snapshots) and persistence failures.
"""

from __future__ import annotations


class LSIError(Exception):
    """Base error with a stable code for API responses and logs."""

    code = "lsi_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, str | None]:
        return {"code": self.code, "message": self.message, "field": self.field}


class ComponentInputError(LSIError, ValueError):
    """A component input record is missing a required field or has a non-numeric value."""

    code = "invalid_component_input"


class SnapshotError(LSIError, ValueError):
    """A discovery snapshot is not well-formed."""

    code = "invalid_snapshot"


class RunStoreError(LSIError):
    """The LSI run store could not read or append."""

    code = "run_store_error"
