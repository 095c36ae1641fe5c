"""Unit tests for EntityStore primitives: linking, cascades, restore, invariants."""
import pytest

from conftest import TWO_SUM_URL
from sheetsync.errors import EntityNotFoundError
from sheetsync.models import Question, SubTopic, Topic
from sheetsync.store.entity_store import EntityStore
from sheetsync.store.url_index import build_url_index


@pytest.fixture
def store(sample_data) -> EntityStore:
    return EntityStore(sample_data)


def test_load_builds_consistent_graph(store):
    assert store.check_integrity() == []
    assert store.url_index.ids_for(TWO_SUM_URL) == {"q-two-sum", "q-two-sum-hash", "q-pair-sum"}


def test_load_copies_input(sample_data):
    store = EntityStore(sample_data)
    sample_data.topics["t-arrays"].sub_topic_ids.append("st-ghost")
    assert store.topics["t-arrays"].sub_topic_ids == ["st-window", "st-hash"]


def test_get_missing_raises_not_found(store):
    with pytest.raises(EntityNotFoundError) as exc:
        store.get_question("nope")
    assert exc.value.kind == "Question"
    assert exc.value.entity_id == "nope"


def test_iter_tree_order(store):
    ids = [q.id for _, _, q in store.iter_tree()]
    assert ids == ["q-two-sum", "q-window-max", "q-two-sum-hash", "q-no-link", "q-reverse", "q-pair-sum"]


def test_insert_links_child_and_indexes(store):
    store.insert_topic(Topic(id="t-new", name="Graphs"))
    store.insert_sub_topic("t-new", SubTopic(id="st-new", name="BFS"))
    store.insert_question("st-new", Question(id="q-new", title="Rotting Oranges", problem_url="u-rot"))
    assert store.topic_order[-1] == "t-new"
    assert store.topics["t-new"].sub_topic_ids == ["st-new"]
    assert store.sub_topics["st-new"].question_ids == ["q-new"]
    assert store.url_index.ids_for("u-rot") == {"q-new"}
    assert store.check_integrity() == []


def test_insert_under_missing_parent_raises(store):
    with pytest.raises(EntityNotFoundError):
        store.insert_sub_topic("t-missing", SubTopic(id="st-x", name="x"))
    assert "st-x" not in store.sub_topics


def test_remove_topic_cascades(store):
    removed = store.remove_topic("t-arrays")
    assert removed.position == 0
    assert [st.id for st in removed.sub_topics] == ["st-window", "st-hash"]
    assert {q.id for q in removed.questions} == {"q-two-sum", "q-window-max", "q-two-sum-hash", "q-no-link"}
    assert set(store.topics) == {"t-ll"}
    assert set(store.sub_topics) == {"st-basics"}
    assert set(store.questions) == {"q-reverse", "q-pair-sum"}
    assert store.url_index.ids_for(TWO_SUM_URL) == {"q-pair-sum"}
    assert store.check_integrity() == []


def test_restore_topic_is_exact(store, sample_data):
    removed = store.remove_topic("t-arrays")
    store.restore_topic(removed)
    assert store.to_data() == sample_data
    assert store.url_index == build_url_index(sample_data.questions.values())


def test_remove_sub_topic_keeps_sibling_order(store):
    store.insert_sub_topic("t-arrays", SubTopic(id="st-third", name="Third"))
    store.remove_sub_topic("t-arrays", "st-hash")
    assert store.topics["t-arrays"].sub_topic_ids == ["st-window", "st-third"]
    assert "q-no-link" not in store.questions
    assert store.check_integrity() == []


def test_restore_sub_topic_returns_to_position(store):
    removed = store.remove_sub_topic("t-arrays", "st-window")
    assert removed.position == 0
    assert store.restore_sub_topic("t-arrays", removed)
    assert store.topics["t-arrays"].sub_topic_ids == ["st-window", "st-hash"]
    assert store.check_integrity() == []


def test_restore_sub_topic_skipped_when_owner_gone(store):
    removed = store.remove_sub_topic("t-arrays", "st-window")
    store.remove_topic("t-arrays")
    assert not store.restore_sub_topic("t-arrays", removed)
    assert store.check_integrity() == []


def test_remove_question_missing_returns_none(store):
    assert store.remove_question("st-window", "q-nope") is None
    assert store.check_integrity() == []


def test_put_question_updates_index(store):
    q = store.get_question("q-two-sum")
    store.put_question(q.model_copy(update={"problem_url": "u-other"}))
    assert "q-two-sum" not in store.url_index.ids_for(TWO_SUM_URL)
    assert store.url_index.ids_for("u-other") == {"q-two-sum"}


def test_records_are_replaced_not_mutated(store):
    before = store.get_topic("t-arrays")
    store.put_topic(before.model_copy(update={"name": "Arrays II"}))
    assert before.name == "Arrays"
    assert store.get_topic("t-arrays").name == "Arrays II"


def test_check_integrity_reports_dangling_ids(store):
    store.replace_question_order("st-window", ["q-two-sum", "q-ghost"])
    problems = store.check_integrity()
    assert any("q-ghost" in p for p in problems)
    assert any("q-window-max" in p for p in problems)


def test_to_data_roundtrip(store, sample_data):
    assert store.to_data() == sample_data
    assert EntityStore(store.to_data()).check_integrity() == []


def test_remove_question_under_wrong_sub_topic_changes_nothing(store, sample_data):
    assert store.remove_question("st-hash", "q-two-sum") is None
    assert store.to_data() == sample_data
    assert store.check_integrity() == []


def test_remove_sub_topic_under_wrong_topic_changes_nothing(store, sample_data):
    assert store.remove_sub_topic("t-ll", "st-window") is None
    assert store.to_data() == sample_data
    assert store.owner_of_sub_topic("st-window") == "t-arrays"
    assert store.check_integrity() == []


def test_owner_lookups(store):
    assert store.owner_of_question("q-pair-sum") == "st-basics"
    assert store.owner_of_question("q-nope") is None
    assert store.owner_of_sub_topic("st-hash") == "t-arrays"
    assert store.owner_of_sub_topic("st-nope") is None
