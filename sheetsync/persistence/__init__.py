"""
Persistence layer: SheetPersistence contract, in-process service, HTTP client.
Backend chosen by PERSISTENCE_BACKEND ("local" or "http").
"""
import logging

from sheetsync.config import settings
from sheetsync.persistence.base import SheetPersistence

logger = logging.getLogger(__name__)


def get_persistence(backend: str | None = None) -> SheetPersistence:
    """Return the configured persistence service; local (with durable snapshot) unless HTTP is asked for."""
    backend = (backend or settings.persistence_backend or "local").strip().lower()
    if backend == "http":
        from sheetsync.persistence.http_impl import HttpSheetPersistence
        logger.info("Persistence: HTTP at %s", settings.remote_base_url)
        return HttpSheetPersistence()
    if backend != "local":
        logger.warning("Unknown PERSISTENCE_BACKEND %r; using local", backend)
    from sheetsync.persistence.local_impl import LocalSheetPersistence
    from sheetsync.snapshot_store import SnapshotStore
    return LocalSheetPersistence(snapshot_store=SnapshotStore())


__all__ = ["SheetPersistence", "get_persistence"]
