"""
Persistence service contract. Every call is async and may fail; implementations raise
EntityNotFoundError for unknown targets of create/update and RemoteCallError for everything else.
"""
from typing import Protocol

from sheetsync.models import Question, QuestionCreate, QuestionUpdate, SheetData, SubTopic, Topic


class SheetPersistence(Protocol):
    """Remote of record for the checklist graph."""

    async def get_sheet(self) -> SheetData:
        ...

    async def create_topic(self, name: str) -> Topic:
        ...

    async def update_topic(self, topic_id: str, name: str) -> Topic:
        ...

    async def delete_topic(self, topic_id: str) -> None:
        ...

    async def create_sub_topic(self, topic_id: str, name: str) -> SubTopic:
        ...

    async def update_sub_topic(self, sub_topic_id: str, name: str) -> SubTopic:
        ...

    async def delete_sub_topic(self, topic_id: str, sub_topic_id: str) -> None:
        ...

    async def create_question(self, sub_topic_id: str, data: QuestionCreate) -> Question:
        ...

    async def update_question(self, question_id: str, updates: QuestionUpdate) -> Question:
        """Merge the set fields of `updates` into the stored question and return it."""
        ...

    async def delete_question(self, sub_topic_id: str, question_id: str) -> None:
        ...

    async def reorder_topics(self, order: list[str]) -> None:
        ...

    async def reorder_sub_topics(self, topic_id: str, order: list[str]) -> None:
        ...

    async def reorder_questions(self, sub_topic_id: str, order: list[str]) -> None:
        ...

    async def reset_data(self) -> SheetData:
        """Discard stored state and return the default dataset."""
        ...
