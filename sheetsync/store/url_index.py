"""
UrlIndex: problem link -> set of question ids holding that link.

Derived, never authoritative: always reconstructible from the question map. Kept live by
apply_delta(old, new) so every question create/update/delete costs O(1) instead of a rescan.
"""
import logging
from collections.abc import Iterable, Mapping

from sheetsync.models import Question

logger = logging.getLogger(__name__)


def _url_of(q: Question | None) -> str:
    return (q.problem_url or "") if q is not None else ""


class UrlIndex:
    """Maintained view over the question map, keyed by non-empty problem_url."""

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None):
        self._by_url: dict[str, set[str]] = {}
        for url, ids in (entries or {}).items():
            if url and ids:
                self._by_url[url] = set(ids)

    def apply_delta(self, old: Question | None, new: Question | None) -> None:
        """
        Single update rule for the index.
        create = (None, q), delete = (q, None), update = (old, new).
        If the link did not change the index is untouched.
        """
        old_url = _url_of(old)
        new_url = _url_of(new)
        if old is not None and new is not None and old_url == new_url:
            return
        if old is not None and old_url:
            self._discard(old_url, old.id)
        if new is not None and new_url:
            self._by_url.setdefault(new_url, set()).add(new.id)

    def _discard(self, url: str, question_id: str) -> None:
        ids = self._by_url.get(url)
        if ids is None:
            return
        ids.discard(question_id)
        if not ids:
            del self._by_url[url]

    def rebuild(self, questions: Iterable[Question]) -> None:
        """Rebuild from scratch with a single scan."""
        self._by_url = {}
        for q in questions:
            self.apply_delta(None, q)
        logger.debug("UrlIndex rebuilt: %s links", len(self._by_url))

    def ids_for(self, url: str) -> frozenset[str]:
        if not url:
            return frozenset()
        return frozenset(self._by_url.get(url, ()))

    def as_dict(self) -> dict[str, set[str]]:
        """Copy of the index; callers may not mutate the live sets."""
        return {url: set(ids) for url, ids in self._by_url.items()}

    def __contains__(self, url: object) -> bool:
        return url in self._by_url

    def __len__(self) -> int:
        return len(self._by_url)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UrlIndex):
            return self._by_url == other._by_url
        return NotImplemented

    def __repr__(self) -> str:
        return f"UrlIndex({self._by_url!r})"


def build_url_index(questions: Iterable[Question]) -> UrlIndex:
    index = UrlIndex()
    index.rebuild(questions)
    return index
