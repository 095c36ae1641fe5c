"""
Search filter: case-insensitive substring match on topic name, sub-topic name and question title.

Matches propagate: a matching topic or sub-topic shows everything beneath it, a matching sub-topic or
question shows its ancestors. Visibility and direct matches are kept as separate sets per tier;
total_matches counts direct matches only.
"""
import re

from pydantic import BaseModel, Field

from sheetsync.store.entity_store import EntityStore


class SearchResult(BaseModel):
    visible_topic_ids: set[str] = Field(default_factory=set)
    visible_sub_topic_ids: set[str] = Field(default_factory=set)
    visible_question_ids: set[str] = Field(default_factory=set)
    topic_direct_match: set[str] = Field(default_factory=set)
    sub_topic_direct_match: set[str] = Field(default_factory=set)
    question_direct_match: set[str] = Field(default_factory=set)

    @property
    def total_matches(self) -> int:
        return len(self.topic_direct_match) + len(self.sub_topic_direct_match) + len(self.question_direct_match)


def filter_by_search(store: EntityStore, query: str | None) -> SearchResult | None:
    """None when the trimmed query is empty (no filtering active)."""
    q = (query or "").strip().lower()
    if not q:
        return None

    result = SearchResult()
    for topic_id in store.topic_order:
        topic = store.topics.get(topic_id)
        if topic is None:
            continue

        if q in topic.name.lower():
            result.topic_direct_match.add(topic_id)
            result.visible_topic_ids.add(topic_id)
            for st_id in topic.sub_topic_ids:
                result.visible_sub_topic_ids.add(st_id)
                st = store.sub_topics.get(st_id)
                if st is not None:
                    result.visible_question_ids.update(st.question_ids)

        # Lower tiers are scanned even under a matching topic: direct matches still count
        for st_id in topic.sub_topic_ids:
            st = store.sub_topics.get(st_id)
            if st is None:
                continue

            if q in st.name.lower():
                result.sub_topic_direct_match.add(st_id)
                result.visible_topic_ids.add(topic_id)
                result.visible_sub_topic_ids.add(st_id)
                result.visible_question_ids.update(st.question_ids)

            for q_id in st.question_ids:
                question = store.questions.get(q_id)
                if question is None:
                    continue
                if q in question.title.lower():
                    result.question_direct_match.add(q_id)
                    result.visible_topic_ids.add(topic_id)
                    result.visible_sub_topic_ids.add(st_id)
                    result.visible_question_ids.add(q_id)
    return result


def highlight_segments(text: str, query: str | None) -> list[tuple[str, bool]]:
    """
    Split text into (segment, matched) pairs for highlighting. The query is matched literally and
    case-insensitively; an empty query yields the whole text unmatched.
    """
    q = (query or "").strip()
    if not q or not text:
        return [(text, False)] if text else []
    parts = re.split(f"({re.escape(q)})", text, flags=re.IGNORECASE)
    q_lower = q.lower()
    return [(p, p.lower() == q_lower) for p in parts if p]
