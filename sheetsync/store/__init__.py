"""
Client-side state: Entity Store, UrlIndex, mutation commands, the optimistic engine and reorders.
"""
from sheetsync.store.engine import MutationFailure, SheetSyncEngine
from sheetsync.store.entity_store import EntityStore
from sheetsync.store.url_index import UrlIndex, build_url_index

__all__ = ["EntityStore", "MutationFailure", "SheetSyncEngine", "UrlIndex", "build_url_index"]
