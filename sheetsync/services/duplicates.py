"""
Duplicate Locator: other questions sharing a problem link, with their topic/sub-topic location.

Two equivalent implementations: a plain graph walk (reference behaviour) and an index-accelerated one
that consults UrlIndex first and only resolves locations for the ids it lists. Both return locations
in topic -> sub-topic -> question traversal order.
"""
from pydantic import BaseModel

from sheetsync.store.entity_store import EntityStore


class DuplicateLocation(BaseModel):
    question_id: str
    title: str
    topic_name: str
    sub_topic_name: str


class DuplicateStatus(BaseModel):
    """Link duplicates plus the user-set override, as shown when editing a question."""

    locations: list[DuplicateLocation]
    marked_duplicate: bool

    @property
    def is_duplicate(self) -> bool:
        return bool(self.locations) or self.marked_duplicate


def find_duplicate_locations(
    store: EntityStore, problem_url: str | None, exclude_id: str | None = None
) -> list[DuplicateLocation]:
    """Walk the whole graph; every question other than exclude_id whose problem_url equals problem_url."""
    if not problem_url:
        return []
    results: list[DuplicateLocation] = []
    for topic, st, q in store.iter_tree():
        if q.id == exclude_id:
            continue
        if q.problem_url and q.problem_url == problem_url:
            results.append(
                DuplicateLocation(
                    question_id=q.id, title=q.title, topic_name=topic.name, sub_topic_name=st.name
                )
            )
    return results


def find_duplicate_locations_indexed(
    store: EntityStore, problem_url: str | None, exclude_id: str | None = None
) -> list[DuplicateLocation]:
    """Same output as find_duplicate_locations; skips the walk when the index has no other holder."""
    if not problem_url:
        return []
    candidates = store.url_index.ids_for(problem_url) - {exclude_id}
    if not candidates:
        return []
    results: list[DuplicateLocation] = []
    for topic_id in store.topic_order:
        topic = store.topics.get(topic_id)
        if topic is None:
            continue
        for st_id in topic.sub_topic_ids:
            st = store.sub_topics.get(st_id)
            if st is None:
                continue
            for q_id in st.question_ids:
                if q_id not in candidates:
                    continue
                q = store.questions[q_id]
                results.append(
                    DuplicateLocation(
                        question_id=q_id, title=q.title, topic_name=topic.name, sub_topic_name=st.name
                    )
                )
                candidates = candidates - {q_id}
                if not candidates:
                    return results
    return results


def duplicate_status(store: EntityStore, question_id: str, problem_url: str | None = None) -> DuplicateStatus:
    """
    Duplicate state of an existing question. problem_url defaults to the stored link, or pass the
    value being edited to check a link before it is saved.
    """
    q = store.get_question(question_id)
    url = q.problem_url if problem_url is None else problem_url.strip()
    return DuplicateStatus(
        locations=find_duplicate_locations_indexed(store, url, exclude_id=question_id),
        marked_duplicate=q.is_duplicate,
    )
