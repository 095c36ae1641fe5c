"""
Bundled default dataset: raw sheet export (sheet + flat question list tagged with topic and
sub-topic names) normalized into SheetData. Topics and sub-topics are created in first-seen order.
"""
import json
import logging
import uuid
from pathlib import Path

from sheetsync.config import settings
from sheetsync.models import Difficulty, Question, Sheet, SheetData, SubTopic, Topic

logger = logging.getLogger(__name__)

DEFAULT_DATASET_PATH = Path(__file__).resolve().parent.parent / "data" / "default_sheet.json"

_DIFFICULTIES = {d.value for d in Difficulty}


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _difficulty(value) -> Difficulty:
    return Difficulty(value) if value in _DIFFICULTIES else Difficulty.MEDIUM


def parse_sheet_data(raw: dict) -> SheetData:
    """Normalize a raw export ({"data": {"sheet": ..., "questions": [...]}}) into the entity graph."""
    body = raw.get("data", raw)
    raw_sheet = body.get("sheet") or {}
    sheet = Sheet(
        id=raw_sheet.get("_id") or raw_sheet.get("id") or generate_id("sheet"),
        name=raw_sheet.get("name") or "",
        description=raw_sheet.get("description") or "",
        slug=raw_sheet.get("slug") or "",
        banner=raw_sheet.get("banner"),
    )

    data = SheetData(sheet=sheet)
    topic_name_to_id: dict[str, str] = {}
    sub_topic_key_to_id: dict[tuple[str, str], str] = {}

    for rq in body.get("questions") or []:
        topic_name = rq.get("topic") or ""
        sub_topic_name = rq.get("subTopic") or ""

        if topic_name not in topic_name_to_id:
            topic_id = generate_id("topic")
            topic_name_to_id[topic_name] = topic_id
            data.topics[topic_id] = Topic(id=topic_id, name=topic_name)
            data.topic_order.append(topic_id)
        topic_id = topic_name_to_id[topic_name]

        st_key = (topic_name, sub_topic_name)
        if st_key not in sub_topic_key_to_id:
            st_id = generate_id("st")
            sub_topic_key_to_id[st_key] = st_id
            data.sub_topics[st_id] = SubTopic(id=st_id, name=sub_topic_name)
            data.topics[topic_id].sub_topic_ids.append(st_id)
        st_id = sub_topic_key_to_id[st_key]

        info = rq.get("questionId") or {}
        q_id = rq.get("_id") or generate_id("q")
        data.questions[q_id] = Question(
            id=q_id,
            title=rq.get("title") or "",
            question_name=info.get("name") or rq.get("title") or "",
            difficulty=_difficulty(info.get("difficulty")),
            platform=info.get("platform") or "",
            problem_url=info.get("problemUrl") or "",
            resource=rq.get("resource") or "",
            topics=info.get("topics") or [],
            is_solved=bool(rq.get("isSolved")),
        )
        data.sub_topics[st_id].question_ids.append(q_id)

    return data


def load_default_dataset(path: Path | None = None) -> SheetData:
    path = path or settings.default_dataset_path or DEFAULT_DATASET_PATH
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    data = parse_sheet_data(raw)
    logger.info("Default dataset parsed from %s: %s questions", path, len(data.questions))
    return data
