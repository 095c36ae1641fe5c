"""
Reorder Engine: Mutate-class protocol specialised for the three ordered-id sequences.

Input is a full replacement permutation of the current sequence. The permutation is the caller's
responsibility and is not re-validated here. On remote failure the previous order is restored.
"""
import logging
from collections.abc import Awaitable, Callable

from sheetsync.persistence.base import SheetPersistence
from sheetsync.store.entity_store import EntityStore
from sheetsync.store.mutations import Mutation

logger = logging.getLogger(__name__)


def reconcile_order(previous: list[str], current: list[str]) -> list[str]:
    """
    Previous order restricted to ids still present, then ids that appeared since, in current order.
    Equals `previous` exactly when nothing else touched the sequence in between.
    """
    present = set(current)
    restored = [i for i in previous if i in present]
    seen = set(restored)
    return restored + [i for i in current if i not in seen]


class _ReplaceOrder(Mutation):
    def __init__(self, order: list[str]):
        self.order = list(order)
        self._prev: list[str] = []


class ReorderTopics(_ReplaceOrder):
    operation = "reorder_topics"
    failure_message = "Failed to reorder topics"

    def apply(self, store: EntityStore) -> None:
        self._prev = store.replace_topic_order(self.order)

    def undo(self, store: EntityStore) -> None:
        store.replace_topic_order(reconcile_order(self._prev, store.topic_order))


class ReorderSubTopics(_ReplaceOrder):
    operation = "reorder_sub_topics"
    failure_message = "Failed to reorder sub-topics"

    def __init__(self, topic_id: str, order: list[str]):
        super().__init__(order)
        self.topic_id = topic_id

    def apply(self, store: EntityStore) -> None:
        self._prev = store.replace_sub_topic_order(self.topic_id, self.order)

    def undo(self, store: EntityStore) -> None:
        topic = store.topics.get(self.topic_id)
        if topic is None:
            logger.warning("Undo %s: topic %s is gone", self.operation, self.topic_id)
            return
        store.replace_sub_topic_order(self.topic_id, reconcile_order(self._prev, topic.sub_topic_ids))


class ReorderQuestions(_ReplaceOrder):
    operation = "reorder_questions"
    failure_message = "Failed to reorder questions"

    def __init__(self, sub_topic_id: str, order: list[str]):
        super().__init__(order)
        self.sub_topic_id = sub_topic_id

    def apply(self, store: EntityStore) -> None:
        self._prev = store.replace_question_order(self.sub_topic_id, self.order)

    def undo(self, store: EntityStore) -> None:
        st = store.sub_topics.get(self.sub_topic_id)
        if st is None:
            logger.warning("Undo %s: sub-topic %s is gone", self.operation, self.sub_topic_id)
            return
        store.replace_question_order(self.sub_topic_id, reconcile_order(self._prev, st.question_ids))


Runner = Callable[[Mutation, Callable[[], Awaitable[object]]], Awaitable[bool]]


class ReorderEngine:
    """Builds reorder commands and hands them to the engine's optimistic runner."""

    def __init__(self, persistence: SheetPersistence, run: Runner):
        self._remote = persistence
        self._run = run

    async def reorder_topics(self, order: list[str]) -> bool:
        order = list(order)
        return await self._run(ReorderTopics(order), lambda: self._remote.reorder_topics(order))

    async def reorder_sub_topics(self, topic_id: str, order: list[str]) -> bool:
        order = list(order)
        return await self._run(
            ReorderSubTopics(topic_id, order),
            lambda: self._remote.reorder_sub_topics(topic_id, order),
        )

    async def reorder_questions(self, sub_topic_id: str, order: list[str]) -> bool:
        order = list(order)
        return await self._run(
            ReorderQuestions(sub_topic_id, order),
            lambda: self._remote.reorder_questions(sub_topic_id, order),
        )
