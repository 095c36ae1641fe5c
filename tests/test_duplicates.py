"""Tests for the duplicate locator (graph walk and index-accelerated) and duplicate status."""
import asyncio

import pytest

from conftest import REVERSE_URL, TWO_SUM_URL
from sheetsync.services.duplicates import (
    duplicate_status,
    find_duplicate_locations,
    find_duplicate_locations_indexed,
)
from sheetsync.store.entity_store import EntityStore

LOCATORS = [find_duplicate_locations, find_duplicate_locations_indexed]


@pytest.fixture
def store(sample_data) -> EntityStore:
    return EntityStore(sample_data)


@pytest.mark.parametrize("locate", LOCATORS)
def test_excludes_self(store, locate):
    out = locate(store, TWO_SUM_URL, "q-two-sum")
    assert [loc.question_id for loc in out] == ["q-two-sum-hash", "q-pair-sum"]
    assert len(out) == 2


@pytest.mark.parametrize("locate", LOCATORS)
def test_traversal_order_and_locations(store, locate):
    out = locate(store, TWO_SUM_URL)
    assert [(loc.question_id, loc.topic_name, loc.sub_topic_name) for loc in out] == [
        ("q-two-sum", "Arrays", "Sliding Window"),
        ("q-two-sum-hash", "Arrays", "Hashing"),
        ("q-pair-sum", "Linked List", "Basics"),
    ]
    assert out[0].title == "Two Sum"


@pytest.mark.parametrize("locate", LOCATORS)
@pytest.mark.parametrize("url", ["", None])
def test_empty_link_returns_nothing(store, locate, url):
    assert locate(store, url) == []


@pytest.mark.parametrize("locate", LOCATORS)
def test_single_holder_excluded_is_empty(store, locate):
    assert locate(store, REVERSE_URL, "q-reverse") == []
    assert locate(store, "https://nowhere.example/") == []


def test_indexed_matches_walk_after_mutations(engine):
    asyncio.run(engine.update_question("q-reverse", {"problem_url": TWO_SUM_URL}))
    asyncio.run(engine.reorder_topics(["t-ll", "t-arrays"]))
    asyncio.run(engine.add_question("st-hash", {"title": "Another", "problem_url": TWO_SUM_URL}))
    asyncio.run(engine.delete_question("st-window", "q-two-sum"))
    for exclude in (None, "q-pair-sum", "q-missing"):
        assert find_duplicate_locations_indexed(engine.store, TWO_SUM_URL, exclude) == find_duplicate_locations(
            engine.store, TWO_SUM_URL, exclude
        )


def test_duplicate_status_combines_override(store):
    status = duplicate_status(store, "q-no-link")
    assert status.locations == []
    assert status.is_duplicate is False

    store.put_question(store.get_question("q-no-link").model_copy(update={"is_duplicate": True}))
    status = duplicate_status(store, "q-no-link")
    assert status.marked_duplicate is True
    assert status.is_duplicate is True


def test_duplicate_status_for_link_being_edited(store):
    status = duplicate_status(store, "q-no-link", problem_url=f"  {REVERSE_URL} ")
    assert [loc.question_id for loc in status.locations] == ["q-reverse"]
    assert status.is_duplicate is True


def test_edited_link_is_trimmed_before_indexing(engine):
    assert asyncio.run(engine.update_question("q-no-link", {"problem_url": f"  {TWO_SUM_URL} "}))
    assert engine.store.get_question("q-no-link").problem_url == TWO_SUM_URL
    status = duplicate_status(engine.store, "q-two-sum")
    assert "q-no-link" in [loc.question_id for loc in status.locations]
