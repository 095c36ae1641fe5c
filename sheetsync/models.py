"""
Entity models for the normalized checklist graph (sheet -> topics -> sub-topics -> questions).

Wire and snapshot layout is camelCase (subTopicIds, problemUrl, isSolved, ...); attributes are snake_case.
Store code never mutates a model in place: every change replaces it via model_copy(update=...),
so a held reference doubles as a snapshot of the previous record.
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    UNMARKED = "Unmarked"
    NEUTRAL = "Neutral"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-ready dict in the camelCase wire layout."""
        return self.model_dump(mode="json", by_alias=True)


class Sheet(_CamelModel):
    id: str
    name: str
    description: str = ""
    slug: str = ""
    banner: str | None = None


class Topic(_CamelModel):
    id: str
    name: str
    sub_topic_ids: list[str] = Field(default_factory=list)


class SubTopic(_CamelModel):
    id: str
    name: str
    question_ids: list[str] = Field(default_factory=list)


class Question(_CamelModel):
    id: str
    title: str
    question_name: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    platform: str = ""
    problem_url: str = ""
    resource: str = ""
    topics: list[str] = Field(default_factory=list)  # tag names from the source dataset
    is_solved: bool = False
    is_duplicate: bool = False  # user override, independent of link duplicates

    @field_validator("problem_url", "resource", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class SheetData(_CamelModel):
    """Full normalized graph: getSheet/resetData payload and the durable snapshot record."""

    sheet: Sheet | None = None
    topics: dict[str, Topic] = Field(default_factory=dict)
    sub_topics: dict[str, SubTopic] = Field(default_factory=dict)
    questions: dict[str, Question] = Field(default_factory=dict)
    topic_order: list[str] = Field(default_factory=list)


class QuestionCreate(_CamelModel):
    title: str
    problem_url: str = ""
    resource: str = ""
    difficulty: Difficulty = Difficulty.NEUTRAL

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("problem_url", "resource", mode="before")
    @classmethod
    def strip_links(cls, v) -> str:
        return (v or "").strip()


class QuestionUpdate(_CamelModel):
    """Partial question fields. Only explicitly set fields are applied; id is never updatable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str | None = None
    question_name: str | None = None
    difficulty: Difficulty | None = None
    platform: str | None = None
    problem_url: str | None = None
    resource: str | None = None
    is_solved: bool | None = None
    is_duplicate: bool | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("problem_url", "resource", mode="before")
    @classmethod
    def strip_links(cls, v):
        return v.strip() if isinstance(v, str) else v

    def changes(self) -> dict:
        """Set fields keyed by attribute name, ready for Question.model_copy(update=...)."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class NameRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class OrderRequest(BaseModel):
    order: list[str]
