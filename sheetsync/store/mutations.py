"""
Mutate-class commands: apply() changes the store synchronously and captures what undo() needs.

Undo payloads are scoped to what the command touched: a rename keeps the previous name, a question
update keeps the previous values of the changed fields, a delete keeps every removed record plus its
position in the parent sequence. Only cascading deletes carry more than one record.
"""
import logging

from sheetsync.errors import EntityNotFoundError
from sheetsync.store.entity_store import EntityStore, RemovedSubTopic, RemovedTopic

logger = logging.getLogger(__name__)


class Mutation:
    """Base command. Subclasses set operation/failure_message and implement apply/undo."""

    operation = "mutation"
    failure_message = "Operation failed"

    def apply(self, store: EntityStore) -> None:
        raise NotImplementedError

    def undo(self, store: EntityStore) -> None:
        raise NotImplementedError


class RenameTopic(Mutation):
    operation = "update_topic"
    failure_message = "Failed to update topic"

    def __init__(self, topic_id: str, name: str):
        self.topic_id = topic_id
        self.name = name
        self._prev_name: str | None = None

    def apply(self, store: EntityStore) -> None:
        topic = store.get_topic(self.topic_id)
        self._prev_name = topic.name
        store.put_topic(topic.model_copy(update={"name": self.name}))

    def undo(self, store: EntityStore) -> None:
        topic = store.topics.get(self.topic_id)
        if topic is None:
            logger.warning("Undo %s: topic %s is gone", self.operation, self.topic_id)
            return
        store.put_topic(topic.model_copy(update={"name": self._prev_name}))


class RenameSubTopic(Mutation):
    operation = "update_sub_topic"
    failure_message = "Failed to update sub-topic"

    def __init__(self, sub_topic_id: str, name: str):
        self.sub_topic_id = sub_topic_id
        self.name = name
        self._prev_name: str | None = None

    def apply(self, store: EntityStore) -> None:
        st = store.get_sub_topic(self.sub_topic_id)
        self._prev_name = st.name
        store.put_sub_topic(st.model_copy(update={"name": self.name}))

    def undo(self, store: EntityStore) -> None:
        st = store.sub_topics.get(self.sub_topic_id)
        if st is None:
            logger.warning("Undo %s: sub-topic %s is gone", self.operation, self.sub_topic_id)
            return
        store.put_sub_topic(st.model_copy(update={"name": self._prev_name}))


class UpdateQuestion(Mutation):
    """Field update (also used for the solved toggle). The store keeps UrlIndex in step on apply and undo."""

    operation = "update_question"
    failure_message = "Failed to update question"

    def __init__(self, question_id: str, changes: dict):
        self.question_id = question_id
        self.changes = {k: v for k, v in changes.items() if k != "id"}
        self._prev_values: dict = {}

    def apply(self, store: EntityStore) -> None:
        q = store.get_question(self.question_id)
        self._prev_values = {k: getattr(q, k) for k in self.changes}
        store.put_question(q.model_copy(update=self.changes))

    def undo(self, store: EntityStore) -> None:
        q = store.questions.get(self.question_id)
        if q is None:
            logger.warning("Undo %s: question %s is gone", self.operation, self.question_id)
            return
        store.put_question(q.model_copy(update=self._prev_values))


class DeleteQuestion(Mutation):
    operation = "delete_question"
    failure_message = "Failed to delete question"

    def __init__(self, sub_topic_id: str, question_id: str):
        self.sub_topic_id = sub_topic_id
        self.question_id = question_id
        self._removed = None

    def apply(self, store: EntityStore) -> None:
        st = store.get_sub_topic(self.sub_topic_id)
        store.get_question(self.question_id)
        if self.question_id not in st.question_ids:
            raise EntityNotFoundError("Question", self.question_id)
        self._removed = store.remove_question(self.sub_topic_id, self.question_id)

    def undo(self, store: EntityStore) -> None:
        if self._removed is None:
            return
        question, position = self._removed
        store.restore_question(self.sub_topic_id, question, position)


class DeleteSubTopic(Mutation):
    operation = "delete_sub_topic"
    failure_message = "Failed to delete sub-topic"

    def __init__(self, topic_id: str, sub_topic_id: str):
        self.topic_id = topic_id
        self.sub_topic_id = sub_topic_id
        self._removed: RemovedSubTopic | None = None

    def apply(self, store: EntityStore) -> None:
        topic = store.get_topic(self.topic_id)
        store.get_sub_topic(self.sub_topic_id)
        if self.sub_topic_id not in topic.sub_topic_ids:
            raise EntityNotFoundError("SubTopic", self.sub_topic_id)
        self._removed = store.remove_sub_topic(self.topic_id, self.sub_topic_id)

    def undo(self, store: EntityStore) -> None:
        if self._removed is not None:
            store.restore_sub_topic(self.topic_id, self._removed)


class DeleteTopic(Mutation):
    operation = "delete_topic"
    failure_message = "Failed to delete topic"

    def __init__(self, topic_id: str):
        self.topic_id = topic_id
        self._removed: RemovedTopic | None = None

    def apply(self, store: EntityStore) -> None:
        store.get_topic(self.topic_id)
        self._removed = store.remove_topic(self.topic_id)

    def undo(self, store: EntityStore) -> None:
        if self._removed is not None:
            store.restore_topic(self._removed)
