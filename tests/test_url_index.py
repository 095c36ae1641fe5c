"""Unit tests for UrlIndex: the delta rule in isolation and rebuild equivalence."""
from sheetsync.models import Question
from sheetsync.store.url_index import UrlIndex, build_url_index


def _q(qid: str, url: str = "") -> Question:
    return Question(id=qid, title=qid, problem_url=url)


def test_create_adds_id_under_link():
    index = UrlIndex()
    index.apply_delta(None, _q("a", "u1"))
    index.apply_delta(None, _q("b", "u1"))
    assert index.as_dict() == {"u1": {"a", "b"}}


def test_create_without_link_is_ignored():
    index = UrlIndex()
    index.apply_delta(None, _q("a", ""))
    assert len(index) == 0


def test_update_moves_id_and_drops_empty_key():
    index = UrlIndex({"u1": {"a"}})
    index.apply_delta(_q("a", "u1"), _q("a", "u2"))
    assert index.as_dict() == {"u2": {"a"}}
    assert "u1" not in index


def test_update_with_same_link_leaves_index_untouched():
    index = UrlIndex({"u1": {"a", "b"}})
    before = index.as_dict()
    index.apply_delta(_q("a", "u1"), Question(id="a", title="renamed", problem_url="u1"))
    assert index.as_dict() == before


def test_clearing_link_removes_entry():
    index = UrlIndex({"u1": {"a", "b"}})
    index.apply_delta(_q("a", "u1"), _q("a", ""))
    assert index.as_dict() == {"u1": {"b"}}


def test_delete_removes_id():
    index = UrlIndex({"u1": {"a"}, "u2": {"b"}})
    index.apply_delta(_q("a", "u1"), None)
    assert index.as_dict() == {"u2": {"b"}}


def test_rebuild_matches_incremental():
    questions = [_q("a", "u1"), _q("b", "u1"), _q("c", ""), _q("d", "u2")]
    incremental = UrlIndex()
    for q in questions:
        incremental.apply_delta(None, q)
    incremental.apply_delta(questions[1], _q("b", "u2"))
    incremental.apply_delta(questions[3], None)
    final = [questions[0], _q("b", "u2"), questions[2]]
    assert incremental == build_url_index(final)


def test_ids_for_empty_link():
    index = UrlIndex({"u1": {"a"}})
    assert index.ids_for("") == frozenset()
    assert index.ids_for("u1") == frozenset({"a"})


def test_as_dict_is_a_copy():
    index = UrlIndex({"u1": {"a"}})
    index.as_dict()["u1"].add("zzz")
    assert index.ids_for("u1") == frozenset({"a"})
