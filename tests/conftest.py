"""
Shared fixtures: a small deterministic sheet, a persistence service that can be told to fail or to
hold calls open, and an engine loaded from it.
"""
import asyncio

import pytest

from sheetsync.errors import RemoteCallError
from sheetsync.models import Difficulty, Question, Sheet, SheetData, SubTopic, Topic
from sheetsync.persistence.local_impl import LocalSheetPersistence
from sheetsync.store.engine import SheetSyncEngine

TWO_SUM_URL = "https://leetcode.com/problems/two-sum/"
WINDOW_MAX_URL = "https://leetcode.com/problems/sliding-window-maximum/"
REVERSE_URL = "https://leetcode.com/problems/reverse-linked-list/"


def make_sample_data() -> SheetData:
    """
    t-arrays "Arrays"
        st-window "Sliding Window": q-two-sum (TWO_SUM_URL), q-window-max (WINDOW_MAX_URL)
        st-hash "Hashing": q-two-sum-hash (TWO_SUM_URL), q-no-link
    t-ll "Linked List"
        st-basics "Basics": q-reverse (REVERSE_URL), q-pair-sum (TWO_SUM_URL)
    """
    questions = [
        Question(id="q-two-sum", title="Two Sum", difficulty=Difficulty.EASY, problem_url=TWO_SUM_URL),
        Question(id="q-window-max", title="Sliding Window Maximum", difficulty=Difficulty.HARD,
                 problem_url=WINDOW_MAX_URL),
        Question(id="q-two-sum-hash", title="Pair With Target (hash map)", problem_url=TWO_SUM_URL),
        Question(id="q-no-link", title="Count Frequencies"),
        Question(id="q-reverse", title="Reverse Linked List", problem_url=REVERSE_URL),
        Question(id="q-pair-sum", title="Pair Sum in List", problem_url=TWO_SUM_URL),
    ]
    return SheetData(
        sheet=Sheet(id="sheet-1", name="Test Sheet", slug="test-sheet"),
        topics={
            "t-arrays": Topic(id="t-arrays", name="Arrays", sub_topic_ids=["st-window", "st-hash"]),
            "t-ll": Topic(id="t-ll", name="Linked List", sub_topic_ids=["st-basics"]),
        },
        sub_topics={
            "st-window": SubTopic(id="st-window", name="Sliding Window", question_ids=["q-two-sum", "q-window-max"]),
            "st-hash": SubTopic(id="st-hash", name="Hashing", question_ids=["q-two-sum-hash", "q-no-link"]),
            "st-basics": SubTopic(id="st-basics", name="Basics", question_ids=["q-reverse", "q-pair-sum"]),
        },
        questions={q.id: q for q in questions},
        topic_order=["t-arrays", "t-ll"],
    )


class FlakyPersistence:
    """
    Wraps a real service. Names in `fail`, or calls matching `fail_when`, raise RemoteCallError.
    While `hold` is set every call waits on it, so tests can inspect optimistic state before resolution.
    """

    def __init__(self, inner):
        self.inner = inner
        self.fail: set[str] = set()
        self.fail_when = None  # optional (name, args) -> bool
        self.calls: list[tuple] = []
        self.hold: asyncio.Event | None = None

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if name.startswith("_") or not callable(attr):
            return attr

        async def call(*args, **kwargs):
            self.calls.append((name, args))
            if self.hold is not None:
                await self.hold.wait()
            if name in self.fail or (self.fail_when is not None and self.fail_when(name, args)):
                raise RemoteCallError(name, "simulated outage")
            return await attr(*args, **kwargs)

        return call


@pytest.fixture
def sample_data() -> SheetData:
    return make_sample_data()


@pytest.fixture
def persistence(sample_data) -> FlakyPersistence:
    return FlakyPersistence(LocalSheetPersistence(default_data=sample_data, delay_ms=0))


@pytest.fixture
def failures() -> list:
    return []


@pytest.fixture
def engine(persistence, failures) -> SheetSyncEngine:
    eng = SheetSyncEngine(persistence, notifier=failures.append)
    assert asyncio.run(eng.load_sheet())
    persistence.calls.clear()
    return eng
