"""
Error taxonomy: not-found (no state change), remote-call failure (rollback or nothing applied),
corrupt snapshot (recovered by falling back to the default dataset).
"""


class SheetSyncError(Exception):
    """Base class for all sheetsync errors."""


class EntityNotFoundError(SheetSyncError):
    """A mutation or lookup targeted an id absent from its expected map."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")


class RemoteCallError(SheetSyncError):
    """The persistence service rejected or could not complete a call."""

    def __init__(self, operation: str, cause: BaseException | str | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{operation} failed{detail}")


class SnapshotCorruptError(SheetSyncError):
    """A stored snapshot record could not be parsed."""
