"""
Optimistic Mutation Engine: the only writer of the Entity Store.

Create-class (add_topic, add_sub_topic, add_question): remote call first, link the returned entity only
on success; a failure leaves the store untouched.
Mutate-class (renames, update_question, toggle_solved, deletes, reorders): apply a command synchronously
(before the first await, so readers see it immediately), await the remote call, undo on failure.

Every failure is recovered locally and then surfaced once through the notifier. Nothing is retried.
Snapshots are captured at dispatch, so two overlapping operations on the same entity can clobber each
other when the earlier one rolls back later; there is no per-entity version check.

Typical use from an event loop:
    engine = SheetSyncEngine(LocalSheetPersistence(), notifier=show_toast)
    await engine.load_sheet()
    asyncio.create_task(engine.toggle_solved(qid))  # optimistic state visible once the task starts
"""
import logging
from collections.abc import Awaitable, Callable
from typing import NamedTuple

from sheetsync.errors import EntityNotFoundError
from sheetsync.models import Question, QuestionCreate, QuestionUpdate, SubTopic, Topic
from sheetsync.persistence.base import SheetPersistence
from sheetsync.store.entity_store import EntityStore
from sheetsync.store.mutations import (
    DeleteQuestion,
    DeleteSubTopic,
    DeleteTopic,
    Mutation,
    RenameSubTopic,
    RenameTopic,
    UpdateQuestion,
)
from sheetsync.store.reorder import ReorderEngine

logger = logging.getLogger(__name__)


class MutationFailure(NamedTuple):
    """Failure signal for the notification layer."""

    operation: str
    message: str  # user-facing, e.g. "Failed to delete topic"
    error: BaseException | None = None


Notifier = Callable[[MutationFailure], None]


def _log_only(failure: MutationFailure) -> None:
    logger.info("Notification: %s", failure.message)


class SheetSyncEngine:
    """Explicit state container: owns one EntityStore and talks to one persistence service."""

    def __init__(
        self,
        persistence: SheetPersistence,
        notifier: Notifier | None = None,
        store: EntityStore | None = None,
    ):
        self._remote = persistence
        self._notify = notifier or _log_only
        self._store = store if store is not None else EntityStore()
        self._reorder = ReorderEngine(persistence, self._run_optimistic)
        self.is_loading = False

    @property
    def store(self) -> EntityStore:
        """Read access for rendering, search and duplicate lookup. Do not write through it."""
        return self._store

    def _fail(self, operation: str, message: str, error: BaseException | None = None) -> None:
        self._notify(MutationFailure(operation, message, error))

    async def _run_optimistic(
        self, mutation: Mutation, remote_call: Callable[[], Awaitable[object]]
    ) -> bool:
        try:
            mutation.apply(self._store)
        except EntityNotFoundError as e:
            logger.warning("%s aborted: %s", mutation.operation, e)
            self._fail(mutation.operation, mutation.failure_message, e)
            return False
        try:
            await remote_call()
        except Exception as e:
            logger.warning("%s: remote call failed, rolling back: %s", mutation.operation, e)
            mutation.undo(self._store)
            self._fail(mutation.operation, mutation.failure_message, e)
            return False
        return True

    # --- load / reset ---

    async def load_sheet(self) -> bool:
        self.is_loading = True
        try:
            data = await self._remote.get_sheet()
        except Exception as e:
            logger.warning("load_sheet failed: %s", e)
            self._fail("load_sheet", "Failed to load sheet", e)
            return False
        finally:
            self.is_loading = False
        self._store.load(data)
        logger.info("Sheet loaded: %s topics", len(self._store.topics))
        return True

    async def reset_data(self) -> bool:
        """Full replace from the service's default dataset."""
        self.is_loading = True
        try:
            data = await self._remote.reset_data()
        except Exception as e:
            logger.warning("reset_data failed: %s", e)
            self._fail("reset_data", "Failed to reset data", e)
            return False
        finally:
            self.is_loading = False
        self._store.load(data)
        logger.info("Sheet reset to default dataset")
        return True

    # --- create-class ---

    async def add_topic(self, name: str) -> Topic | None:
        try:
            topic = await self._remote.create_topic(name)
        except Exception as e:
            logger.warning("add_topic failed: %s", e)
            self._fail("add_topic", "Failed to add topic", e)
            return None
        self._store.insert_topic(topic)
        return topic

    async def add_sub_topic(self, topic_id: str, name: str) -> SubTopic | None:
        if topic_id not in self._store.topics:
            self._fail("add_sub_topic", "Failed to add sub-topic", EntityNotFoundError("Topic", topic_id))
            return None
        try:
            st = await self._remote.create_sub_topic(topic_id, name)
            # Parent may have been deleted locally while the call was in flight
            self._store.insert_sub_topic(topic_id, st)
        except Exception as e:
            logger.warning("add_sub_topic failed: %s", e)
            self._fail("add_sub_topic", "Failed to add sub-topic", e)
            return None
        return st

    async def add_question(self, sub_topic_id: str, data: QuestionCreate | dict) -> Question | None:
        if not isinstance(data, QuestionCreate):
            data = QuestionCreate.model_validate(data)
        if sub_topic_id not in self._store.sub_topics:
            self._fail(
                "add_question", "Failed to add question", EntityNotFoundError("SubTopic", sub_topic_id)
            )
            return None
        try:
            q = await self._remote.create_question(sub_topic_id, data)
            self._store.insert_question(sub_topic_id, q)
        except Exception as e:
            logger.warning("add_question failed: %s", e)
            self._fail("add_question", "Failed to add question", e)
            return None
        return q

    # --- mutate-class ---

    async def update_topic(self, topic_id: str, name: str) -> bool:
        return await self._run_optimistic(
            RenameTopic(topic_id, name), lambda: self._remote.update_topic(topic_id, name)
        )

    async def update_sub_topic(self, sub_topic_id: str, name: str) -> bool:
        return await self._run_optimistic(
            RenameSubTopic(sub_topic_id, name),
            lambda: self._remote.update_sub_topic(sub_topic_id, name),
        )

    async def update_question(self, question_id: str, updates: QuestionUpdate | dict) -> bool:
        if not isinstance(updates, QuestionUpdate):
            updates = QuestionUpdate.model_validate(updates)
        changes = updates.changes()
        if not changes:
            return True
        payload = QuestionUpdate(**changes)
        return await self._run_optimistic(
            UpdateQuestion(question_id, changes),
            lambda: self._remote.update_question(question_id, payload),
        )

    async def toggle_solved(self, question_id: str) -> bool:
        q = self._store.questions.get(question_id)
        if q is None:
            self._fail(
                "toggle_solved", "Failed to update question", EntityNotFoundError("Question", question_id)
            )
            return False
        solved = not q.is_solved
        return await self._run_optimistic(
            UpdateQuestion(question_id, {"is_solved": solved}),
            lambda: self._remote.update_question(question_id, QuestionUpdate(is_solved=solved)),
        )

    async def delete_topic(self, topic_id: str) -> bool:
        return await self._run_optimistic(
            DeleteTopic(topic_id), lambda: self._remote.delete_topic(topic_id)
        )

    async def delete_sub_topic(self, topic_id: str, sub_topic_id: str) -> bool:
        return await self._run_optimistic(
            DeleteSubTopic(topic_id, sub_topic_id),
            lambda: self._remote.delete_sub_topic(topic_id, sub_topic_id),
        )

    async def delete_question(self, sub_topic_id: str, question_id: str) -> bool:
        return await self._run_optimistic(
            DeleteQuestion(sub_topic_id, question_id),
            lambda: self._remote.delete_question(sub_topic_id, question_id),
        )

    # --- reorder ---

    async def reorder_topics(self, order: list[str]) -> bool:
        return await self._reorder.reorder_topics(order)

    async def reorder_sub_topics(self, topic_id: str, order: list[str]) -> bool:
        return await self._reorder.reorder_sub_topics(topic_id, order)

    async def reorder_questions(self, sub_topic_id: str, order: list[str]) -> bool:
        return await self._reorder.reorder_questions(sub_topic_id, order)
