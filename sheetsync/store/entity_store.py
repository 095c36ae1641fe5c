"""
Entity Store: normalized maps (topics, sub-topics, questions keyed by id), the ordered-id sequences
(topic order, per-topic sub-topic ids, per-sub-topic question ids) and the UrlIndex derived from questions.

Pure data plus structural primitives. Each primitive runs to completion synchronously, so readers never
see a partially updated graph. Records are replaced, never mutated in place.
"""
import logging
from collections.abc import Iterator, Mapping
from typing import NamedTuple

from sheetsync.errors import EntityNotFoundError
from sheetsync.models import Question, Sheet, SheetData, SubTopic, Topic
from sheetsync.store.url_index import UrlIndex

logger = logging.getLogger(__name__)


class RemovedSubTopic(NamedTuple):
    sub_topic: SubTopic
    position: int  # index in the owner's sub_topic_ids before removal
    questions: list[Question]


class RemovedTopic(NamedTuple):
    topic: Topic
    position: int  # index in topic_order before removal
    sub_topics: list[SubTopic]
    questions: list[Question]


def _without(ids: list[str], target: str) -> list[str]:
    return [i for i in ids if i != target]


def _insert_at(ids: list[str], target: str, position: int) -> list[str]:
    out = _without(ids, target)
    out.insert(max(0, min(position, len(out))), target)
    return out


class EntityStore:
    """Normalized checklist graph. Only the mutation engine calls the write primitives."""

    def __init__(self, data: SheetData | None = None):
        self.sheet: Sheet | None = None
        self._topics: dict[str, Topic] = {}
        self._sub_topics: dict[str, SubTopic] = {}
        self._questions: dict[str, Question] = {}
        self._topic_order: list[str] = []
        self.url_index = UrlIndex()
        if data is not None:
            self.load(data)

    # --- read access ---

    @property
    def topics(self) -> Mapping[str, Topic]:
        return self._topics

    @property
    def sub_topics(self) -> Mapping[str, SubTopic]:
        return self._sub_topics

    @property
    def questions(self) -> Mapping[str, Question]:
        return self._questions

    @property
    def topic_order(self) -> list[str]:
        return list(self._topic_order)

    def get_topic(self, topic_id: str) -> Topic:
        try:
            return self._topics[topic_id]
        except KeyError:
            raise EntityNotFoundError("Topic", topic_id) from None

    def get_sub_topic(self, sub_topic_id: str) -> SubTopic:
        try:
            return self._sub_topics[sub_topic_id]
        except KeyError:
            raise EntityNotFoundError("SubTopic", sub_topic_id) from None

    def get_question(self, question_id: str) -> Question:
        try:
            return self._questions[question_id]
        except KeyError:
            raise EntityNotFoundError("Question", question_id) from None

    def iter_tree(self) -> Iterator[tuple[Topic, SubTopic, Question]]:
        """Yield (topic, sub_topic, question) in topic -> sub-topic -> question order."""
        for topic_id in self._topic_order:
            topic = self._topics.get(topic_id)
            if topic is None:
                continue
            for st_id in topic.sub_topic_ids:
                st = self._sub_topics.get(st_id)
                if st is None:
                    continue
                for q_id in st.question_ids:
                    q = self._questions.get(q_id)
                    if q is not None:
                        yield topic, st, q

    def owner_of_sub_topic(self, sub_topic_id: str) -> str | None:
        for topic_id in self._topic_order:
            topic = self._topics.get(topic_id)
            if topic is not None and sub_topic_id in topic.sub_topic_ids:
                return topic_id
        return None

    def owner_of_question(self, question_id: str) -> str | None:
        for st_id, st in self._sub_topics.items():
            if question_id in st.question_ids:
                return st_id
        return None

    # --- whole-graph load / export ---

    def load(self, data: SheetData) -> None:
        """Full replace from a freshly loaded sheet; the index is rebuilt with one scan."""
        data = data.model_copy(deep=True)
        self.sheet = data.sheet
        self._topics = dict(data.topics)
        self._sub_topics = dict(data.sub_topics)
        self._questions = dict(data.questions)
        self._topic_order = list(data.topic_order)
        self.url_index.rebuild(self._questions.values())
        logger.debug(
            "Store loaded: %s topics, %s sub-topics, %s questions",
            len(self._topics), len(self._sub_topics), len(self._questions),
        )

    def to_data(self) -> SheetData:
        return SheetData(
            sheet=self.sheet,
            topics=self._topics,
            sub_topics=self._sub_topics,
            questions=self._questions,
            topic_order=self._topic_order,
        ).model_copy(deep=True)

    # --- insert-and-link ---

    def insert_topic(self, topic: Topic) -> None:
        self._topics[topic.id] = topic
        self._topic_order = _without(self._topic_order, topic.id) + [topic.id]

    def insert_sub_topic(self, topic_id: str, sub_topic: SubTopic) -> None:
        topic = self.get_topic(topic_id)
        self._sub_topics[sub_topic.id] = sub_topic
        self._topics[topic_id] = topic.model_copy(
            update={"sub_topic_ids": _without(topic.sub_topic_ids, sub_topic.id) + [sub_topic.id]}
        )

    def insert_question(self, sub_topic_id: str, question: Question) -> None:
        st = self.get_sub_topic(sub_topic_id)
        old = self._questions.get(question.id)
        self._questions[question.id] = question
        self.url_index.apply_delta(old, question)
        self._sub_topics[sub_topic_id] = st.model_copy(
            update={"question_ids": _without(st.question_ids, question.id) + [question.id]}
        )

    # --- replace records ---

    def put_topic(self, topic: Topic) -> None:
        self.get_topic(topic.id)
        self._topics[topic.id] = topic

    def put_sub_topic(self, sub_topic: SubTopic) -> None:
        self.get_sub_topic(sub_topic.id)
        self._sub_topics[sub_topic.id] = sub_topic

    def put_question(self, question: Question) -> None:
        old = self.get_question(question.id)
        self._questions[question.id] = question
        self.url_index.apply_delta(old, question)

    # --- unlink-and-remove (cascading) ---

    def remove_question(self, sub_topic_id: str, question_id: str) -> tuple[Question, int] | None:
        """
        Unlink from the sub-topic and drop the record. Returns (question, position), or None and changes
        nothing when the sub-topic does not list the question.
        """
        st = self._sub_topics.get(sub_topic_id)
        if st is None or question_id not in st.question_ids:
            if question_id in self._questions:
                logger.warning(
                    "remove_question: %s is owned by %s, not %s; nothing removed",
                    question_id, self.owner_of_question(question_id), sub_topic_id,
                )
            return None
        position = st.question_ids.index(question_id)
        self._sub_topics[sub_topic_id] = st.model_copy(
            update={"question_ids": _without(st.question_ids, question_id)}
        )
        q = self._questions.pop(question_id, None)
        if q is None:
            return None
        self.url_index.apply_delta(q, None)
        return q, position

    def _drop_sub_topic_tree(self, sub_topic_id: str) -> tuple[SubTopic | None, list[Question]]:
        st = self._sub_topics.pop(sub_topic_id, None)
        removed: list[Question] = []
        if st is None:
            return None, removed
        for q_id in st.question_ids:
            q = self._questions.pop(q_id, None)
            if q is not None:
                self.url_index.apply_delta(q, None)
                removed.append(q)
        return st, removed

    def remove_sub_topic(self, topic_id: str, sub_topic_id: str) -> RemovedSubTopic | None:
        """
        Unlink from the topic, drop the sub-topic and every question it owns. Returns None and changes
        nothing when the topic does not list the sub-topic.
        """
        topic = self._topics.get(topic_id)
        if topic is None or sub_topic_id not in topic.sub_topic_ids:
            if sub_topic_id in self._sub_topics:
                logger.warning(
                    "remove_sub_topic: %s is owned by %s, not %s; nothing removed",
                    sub_topic_id, self.owner_of_sub_topic(sub_topic_id), topic_id,
                )
            return None
        position = topic.sub_topic_ids.index(sub_topic_id)
        self._topics[topic_id] = topic.model_copy(
            update={"sub_topic_ids": _without(topic.sub_topic_ids, sub_topic_id)}
        )
        st, questions = self._drop_sub_topic_tree(sub_topic_id)
        if st is None:
            return None
        return RemovedSubTopic(st, position, questions)

    def remove_topic(self, topic_id: str) -> RemovedTopic | None:
        """Drop the topic, its sub-topics and all their questions; unlink from topic order."""
        topic = self._topics.pop(topic_id, None)
        if topic is None:
            return None
        position = self._topic_order.index(topic_id) if topic_id in self._topic_order else -1
        self._topic_order = _without(self._topic_order, topic_id)
        sub_topics: list[SubTopic] = []
        questions: list[Question] = []
        for st_id in topic.sub_topic_ids:
            st, qs = self._drop_sub_topic_tree(st_id)
            if st is not None:
                sub_topics.append(st)
                questions.extend(qs)
        return RemovedTopic(topic, position, sub_topics, questions)

    # --- restore (undo of removals) ---

    def restore_question(self, sub_topic_id: str, question: Question, position: int) -> bool:
        st = self._sub_topics.get(sub_topic_id)
        if st is None:
            logger.warning("Restore skipped: sub-topic %s no longer exists", sub_topic_id)
            return False
        self._questions[question.id] = question
        self.url_index.apply_delta(None, question)
        self._sub_topics[sub_topic_id] = st.model_copy(
            update={"question_ids": _insert_at(st.question_ids, question.id, position)}
        )
        return True

    def _restore_tree(self, sub_topics: list[SubTopic], questions: list[Question]) -> None:
        for st in sub_topics:
            self._sub_topics[st.id] = st
        for q in questions:
            self._questions[q.id] = q
            self.url_index.apply_delta(None, q)

    def restore_sub_topic(self, topic_id: str, removed: RemovedSubTopic) -> bool:
        topic = self._topics.get(topic_id)
        if topic is None:
            logger.warning("Restore skipped: topic %s no longer exists", topic_id)
            return False
        self._restore_tree([removed.sub_topic], removed.questions)
        self._topics[topic_id] = topic.model_copy(
            update={"sub_topic_ids": _insert_at(topic.sub_topic_ids, removed.sub_topic.id, removed.position)}
        )
        return True

    def restore_topic(self, removed: RemovedTopic) -> None:
        self._restore_tree(removed.sub_topics, removed.questions)
        self._topics[removed.topic.id] = removed.topic
        self._topic_order = _insert_at(self._topic_order, removed.topic.id, removed.position)

    # --- replace-order ---

    def replace_topic_order(self, order: list[str]) -> list[str]:
        """Set topic order; returns the previous order."""
        prev = list(self._topic_order)
        self._topic_order = list(order)
        return prev

    def replace_sub_topic_order(self, topic_id: str, order: list[str]) -> list[str]:
        topic = self.get_topic(topic_id)
        self._topics[topic_id] = topic.model_copy(update={"sub_topic_ids": list(order)})
        return list(topic.sub_topic_ids)

    def replace_question_order(self, sub_topic_id: str, order: list[str]) -> list[str]:
        st = self.get_sub_topic(sub_topic_id)
        self._sub_topics[sub_topic_id] = st.model_copy(update={"question_ids": list(order)})
        return list(st.question_ids)

    # --- invariants ---

    def check_integrity(self) -> list[str]:
        """Return human-readable invariant violations; empty list when the graph is consistent."""
        problems: list[str] = []
        if len(set(self._topic_order)) != len(self._topic_order):
            problems.append("topic order contains duplicate ids")
        if set(self._topic_order) != set(self._topics):
            problems.append("topic order is not a permutation of the topic keys")
        owned_sub_topics: set[str] = set()
        for topic in self._topics.values():
            if len(set(topic.sub_topic_ids)) != len(topic.sub_topic_ids):
                problems.append(f"topic {topic.id} lists a sub-topic twice")
            for st_id in topic.sub_topic_ids:
                if st_id not in self._sub_topics:
                    problems.append(f"topic {topic.id} references missing sub-topic {st_id}")
                owned_sub_topics.add(st_id)
        owned_questions: set[str] = set()
        for st in self._sub_topics.values():
            if st.id not in owned_sub_topics:
                problems.append(f"sub-topic {st.id} has no owning topic")
            if len(set(st.question_ids)) != len(st.question_ids):
                problems.append(f"sub-topic {st.id} lists a question twice")
            for q_id in st.question_ids:
                if q_id not in self._questions:
                    problems.append(f"sub-topic {st.id} references missing question {q_id}")
                owned_questions.add(q_id)
        for q_id in self._questions:
            if q_id not in owned_questions:
                problems.append(f"question {q_id} has no owning sub-topic")
        expected = UrlIndex()
        expected.rebuild(self._questions.values())
        if expected != self.url_index:
            problems.append("url index does not match the question map")
        return problems
