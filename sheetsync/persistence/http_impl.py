"""
HTTP persistence client: the SheetPersistence contract against the sheetsync API (sheetsync.main).
Transport errors and non-2xx responses become RemoteCallError; 404 becomes EntityNotFoundError.
No retries: a failed call is reported once and the engine rolls back.
"""
import logging

import httpx

from sheetsync.config import settings
from sheetsync.errors import EntityNotFoundError, RemoteCallError
from sheetsync.models import Question, QuestionCreate, QuestionUpdate, SheetData, SubTopic, Topic

logger = logging.getLogger(__name__)


class HttpSheetPersistence:
    """SheetPersistence over HTTP. Pass `client` to reuse a configured httpx.AsyncClient (e.g. ASGI transport)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.remote_base_url,
            timeout=timeout if timeout is not None else settings.remote_timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, operation: str, method: str, url: str, json: dict | None = None):
        try:
            r = await self._client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s: transport error: %s", method, url, e)
            raise RemoteCallError(operation, e) from e
        if r.status_code == 404:
            detail = _detail(r)
            if isinstance(detail, dict) and detail.get("kind"):
                raise EntityNotFoundError(detail["kind"], detail.get("id") or "")
            raise RemoteCallError(operation, f"404 {detail}")
        if r.status_code >= 400:
            logger.warning("%s %s: HTTP %s", method, url, r.status_code)
            raise RemoteCallError(operation, f"HTTP {r.status_code}: {_detail(r)}")
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    async def get_sheet(self) -> SheetData:
        return SheetData.model_validate(await self._request("get_sheet", "GET", "/sheet"))

    async def reset_data(self) -> SheetData:
        return SheetData.model_validate(await self._request("reset_data", "POST", "/sheet/reset"))

    async def create_topic(self, name: str) -> Topic:
        body = await self._request("create_topic", "POST", "/topics", {"name": name})
        return Topic.model_validate(body)

    async def update_topic(self, topic_id: str, name: str) -> Topic:
        body = await self._request("update_topic", "PATCH", f"/topics/{topic_id}", {"name": name})
        return Topic.model_validate(body)

    async def delete_topic(self, topic_id: str) -> None:
        await self._request("delete_topic", "DELETE", f"/topics/{topic_id}")

    async def create_sub_topic(self, topic_id: str, name: str) -> SubTopic:
        body = await self._request("create_sub_topic", "POST", f"/topics/{topic_id}/subtopics", {"name": name})
        return SubTopic.model_validate(body)

    async def update_sub_topic(self, sub_topic_id: str, name: str) -> SubTopic:
        body = await self._request("update_sub_topic", "PATCH", f"/subtopics/{sub_topic_id}", {"name": name})
        return SubTopic.model_validate(body)

    async def delete_sub_topic(self, topic_id: str, sub_topic_id: str) -> None:
        await self._request("delete_sub_topic", "DELETE", f"/topics/{topic_id}/subtopics/{sub_topic_id}")

    async def create_question(self, sub_topic_id: str, data: QuestionCreate) -> Question:
        body = await self._request(
            "create_question", "POST", f"/subtopics/{sub_topic_id}/questions", data.to_wire()
        )
        return Question.model_validate(body)

    async def update_question(self, question_id: str, updates: QuestionUpdate) -> Question:
        payload = updates.model_dump(mode="json", by_alias=True, exclude_unset=True)
        body = await self._request("update_question", "PATCH", f"/questions/{question_id}", payload)
        return Question.model_validate(body)

    async def delete_question(self, sub_topic_id: str, question_id: str) -> None:
        await self._request("delete_question", "DELETE", f"/subtopics/{sub_topic_id}/questions/{question_id}")

    async def reorder_topics(self, order: list[str]) -> None:
        await self._request("reorder_topics", "PUT", "/topics/order", {"order": list(order)})

    async def reorder_sub_topics(self, topic_id: str, order: list[str]) -> None:
        await self._request(
            "reorder_sub_topics", "PUT", f"/topics/{topic_id}/subtopics/order", {"order": list(order)}
        )

    async def reorder_questions(self, sub_topic_id: str, order: list[str]) -> None:
        await self._request(
            "reorder_questions", "PUT", f"/subtopics/{sub_topic_id}/questions/order", {"order": list(order)}
        )


def _detail(r: httpx.Response):
    try:
        body = r.json()
    except ValueError:
        return r.text[:200]
    return body.get("detail") if isinstance(body, dict) else body
