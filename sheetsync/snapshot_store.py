"""
Durable local snapshot: one serializable SheetData record per key, kept in a small SQL table.
Works on SQLite (default, file next to the app) and PostgreSQL.
Written after every successful mutation, read once at startup. A corrupt record is dropped so the
caller can fall back to the default dataset.
"""
import logging
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy import DateTime, String, create_engine, delete, select
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, sessionmaker
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from sheetsync.config import settings
from sheetsync.errors import SnapshotCorruptError
from sheetsync.models import SheetData

logger = logging.getLogger(__name__)

Base = declarative_base()


class SnapshotRecord(Base):
    __tablename__ = "sheet_snapshots"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


def _parse_payload(payload) -> SheetData:
    if not isinstance(payload, dict):
        raise SnapshotCorruptError(f"snapshot payload is {type(payload).__name__}, expected object")
    try:
        return SheetData.model_validate(payload)
    except ValidationError as e:
        raise SnapshotCorruptError(str(e)) from e


class SnapshotStore:
    """Load/save/clear the snapshot row for one key."""

    def __init__(self, database_url: str | None = None, key: str | None = None):
        self.database_url = database_url or settings.snapshot_database_url
        self.key = key or settings.snapshot_key
        _is_sqlite = "sqlite" in self.database_url
        self.engine = create_engine(
            self.database_url,
            pool_pre_ping=not _is_sqlite,
            connect_args={"check_same_thread": False} if _is_sqlite else {},
            echo=False,
        )
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def load(self) -> SheetData | None:
        """Stored snapshot, or None if absent or corrupt (corrupt rows are deleted)."""
        db = self._session_factory()
        try:
            try:
                row = db.execute(
                    select(SnapshotRecord).where(SnapshotRecord.key == self.key)
                ).scalar_one_or_none()
            except ValueError as e:
                # payload column is not valid JSON at all
                logger.warning("Snapshot %s is unreadable, discarding: %s", self.key, e)
                db.rollback()
                db.execute(delete(SnapshotRecord).where(SnapshotRecord.key == self.key))
                db.commit()
                return None
            if row is None:
                return None
            try:
                return _parse_payload(row.payload)
            except SnapshotCorruptError as e:
                logger.warning("Snapshot %s is corrupt, discarding: %s", self.key, e)
                db.delete(row)
                db.commit()
                return None
        finally:
            db.close()

    def save(self, data: SheetData) -> None:
        db = self._session_factory()
        try:
            payload = data.to_wire()
            row = db.get(SnapshotRecord, self.key)
            if row is None:
                db.add(SnapshotRecord(key=self.key, payload=payload))
            else:
                row.payload = payload
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def clear(self) -> None:
        db = self._session_factory()
        try:
            row = db.get(SnapshotRecord, self.key)
            if row is not None:
                db.delete(row)
                db.commit()
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
