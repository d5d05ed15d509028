"""
Core shared utilities: exception hierarchy.
"""

from reputeos_lsi.core.exceptions import (
    ComponentInputError,
    LSIError,
    RunStoreError,
    SnapshotError,
)

__all__ = [
    "ComponentInputError",
    "LSIError",
    "RunStoreError",
    "SnapshotError",
]
