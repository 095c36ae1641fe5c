"""
Shared dependencies: the persistence service behind the API, and 404 mapping for not-found errors.
"""
import logging
from functools import lru_cache

from fastapi import HTTPException, status

from sheetsync.errors import EntityNotFoundError
from sheetsync.persistence.local_impl import LocalSheetPersistence
from sheetsync.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


@lru_cache
def get_service() -> LocalSheetPersistence:
    """One in-process service per app, persisted to the configured snapshot database."""
    return LocalSheetPersistence(snapshot_store=SnapshotStore())


def not_found(e: EntityNotFoundError) -> HTTPException:
    logger.debug("404: %s", e)
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": str(e), "kind": e.kind, "id": e.entity_id},
    )
