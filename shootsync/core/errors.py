"""Error types raised by the reconciliation engine.

- PersistenceError: the final commit failed; the whole operation was rolled back.
- DiffValidationError: a diff document could not be resolved against the
  scene graph. Raised at the load boundary, never by the reconciler itself.
"""


class ShootSyncError(RuntimeError):
    """Base class for shootsync errors."""


class PersistenceError(ShootSyncError):
    """Raised when committing a schedule change fails.

    Attributes:
        operation: Name of the operation that was rolled back
        original: Underlying database exception
    """

    def __init__(self, operation: str, original: Exception | None = None):
        self.operation = operation
        self.original = original
        detail = f": {original}" if original is not None else ""
        super().__init__(f"{operation} failed to commit{detail}")


class DiffValidationError(ShootSyncError):
    """Raised when a diff document references unknown or conflicting scenes.

    Attributes:
        details: List of error detail strings
    """

    def __init__(self, details: list[str]):
        self.details = details
        super().__init__(f"Invalid diff: {'; '.join(details)}")
