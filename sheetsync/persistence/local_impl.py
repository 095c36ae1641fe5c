"""
In-process persistence service: the remote of record when no HTTP server is used, and the backing
service of the FastAPI app.

State is loaded once (durable snapshot if present and readable, else the bundled default dataset)
and the snapshot is rewritten after every successful mutation. Returned entities are copies.
"""
import asyncio
import logging

from sheetsync.config import settings
from sheetsync.models import Question, QuestionCreate, QuestionUpdate, SheetData, SubTopic, Topic
from sheetsync.persistence.dataset import generate_id, load_default_dataset
from sheetsync.snapshot_store import SnapshotStore
from sheetsync.store.entity_store import EntityStore

logger = logging.getLogger(__name__)


class LocalSheetPersistence:
    """SheetPersistence backed by an EntityStore and an optional SnapshotStore."""

    def __init__(
        self,
        snapshot_store: SnapshotStore | None = None,
        delay_ms: int | None = None,
        default_data: SheetData | None = None,
    ):
        self._snapshots = snapshot_store
        self._delay = (settings.remote_delay_ms if delay_ms is None else delay_ms) / 1000.0
        self._default_data = default_data
        self._store: EntityStore | None = None

    def _defaults(self) -> SheetData:
        if self._default_data is not None:
            return self._default_data.model_copy(deep=True)
        return load_default_dataset()

    def _data(self) -> EntityStore:
        if self._store is None:
            saved = self._snapshots.load() if self._snapshots is not None else None
            if saved is None:
                logger.info("No usable snapshot; building from the default dataset")
                saved = self._defaults()
            self._store = EntityStore(saved)
            self._save()
        return self._store

    def _save(self) -> None:
        if self._snapshots is not None and self._store is not None:
            self._snapshots.save(self._store.to_data())

    async def _latency(self) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)

    async def get_sheet(self) -> SheetData:
        await self._latency()
        return self._data().to_data()

    async def create_topic(self, name: str) -> Topic:
        await self._latency()
        store = self._data()
        topic = Topic(id=generate_id("topic"), name=name)
        store.insert_topic(topic)
        self._save()
        return topic.model_copy(deep=True)

    async def update_topic(self, topic_id: str, name: str) -> Topic:
        await self._latency()
        store = self._data()
        topic = store.get_topic(topic_id).model_copy(update={"name": name})
        store.put_topic(topic)
        self._save()
        return topic.model_copy(deep=True)

    async def delete_topic(self, topic_id: str) -> None:
        await self._latency()
        if self._data().remove_topic(topic_id) is not None:
            self._save()

    async def create_sub_topic(self, topic_id: str, name: str) -> SubTopic:
        await self._latency()
        store = self._data()
        st = SubTopic(id=generate_id("st"), name=name)
        store.insert_sub_topic(topic_id, st)
        self._save()
        return st.model_copy(deep=True)

    async def update_sub_topic(self, sub_topic_id: str, name: str) -> SubTopic:
        await self._latency()
        store = self._data()
        st = store.get_sub_topic(sub_topic_id).model_copy(update={"name": name})
        store.put_sub_topic(st)
        self._save()
        return st.model_copy(deep=True)

    async def delete_sub_topic(self, topic_id: str, sub_topic_id: str) -> None:
        await self._latency()
        if self._data().remove_sub_topic(topic_id, sub_topic_id) is not None:
            self._save()

    async def create_question(self, sub_topic_id: str, data: QuestionCreate) -> Question:
        await self._latency()
        store = self._data()
        q = Question(
            id=generate_id("q"),
            title=data.title,
            question_name=data.title,
            difficulty=data.difficulty,
            problem_url=data.problem_url,
            resource=data.resource,
        )
        store.insert_question(sub_topic_id, q)
        self._save()
        return q.model_copy(deep=True)

    async def update_question(self, question_id: str, updates: QuestionUpdate) -> Question:
        await self._latency()
        store = self._data()
        q = store.get_question(question_id).model_copy(update=updates.changes())
        store.put_question(q)
        self._save()
        return q.model_copy(deep=True)

    async def delete_question(self, sub_topic_id: str, question_id: str) -> None:
        await self._latency()
        if self._data().remove_question(sub_topic_id, question_id) is not None:
            self._save()

    async def reorder_topics(self, order: list[str]) -> None:
        await self._latency()
        self._data().replace_topic_order(order)
        self._save()

    async def reorder_sub_topics(self, topic_id: str, order: list[str]) -> None:
        await self._latency()
        store = self._data()
        if topic_id in store.topics:
            store.replace_sub_topic_order(topic_id, order)
            self._save()

    async def reorder_questions(self, sub_topic_id: str, order: list[str]) -> None:
        await self._latency()
        store = self._data()
        if sub_topic_id in store.sub_topics:
            store.replace_question_order(sub_topic_id, order)
            self._save()

    async def reset_data(self) -> SheetData:
        if self._snapshots is not None:
            self._snapshots.clear()
        self._store = None
        logger.info("Persistence reset to the default dataset")
        return self._data().to_data()
