"""
Sub-topics API: rename; create, delete and reorder the questions a sub-topic owns.
"""
from fastapi import APIRouter, Depends, status

from sheetsync.api.deps import get_service, not_found
from sheetsync.errors import EntityNotFoundError
from sheetsync.models import NameRequest, OrderRequest, Question, QuestionCreate, SubTopic
from sheetsync.persistence.local_impl import LocalSheetPersistence

router = APIRouter(prefix="/subtopics", tags=["subtopics"])


@router.patch("/{sub_topic_id}", response_model=SubTopic)
async def update_sub_topic(
    sub_topic_id: str, body: NameRequest, service: LocalSheetPersistence = Depends(get_service)
):
    try:
        return await service.update_sub_topic(sub_topic_id, body.name)
    except EntityNotFoundError as e:
        raise not_found(e) from e


@router.post("/{sub_topic_id}/questions", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(
    sub_topic_id: str, body: QuestionCreate, service: LocalSheetPersistence = Depends(get_service)
):
    try:
        return await service.create_question(sub_topic_id, body)
    except EntityNotFoundError as e:
        raise not_found(e) from e


@router.delete("/{sub_topic_id}/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    sub_topic_id: str, question_id: str, service: LocalSheetPersistence = Depends(get_service)
):
    await service.delete_question(sub_topic_id, question_id)


@router.put("/{sub_topic_id}/questions/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_questions(
    sub_topic_id: str, body: OrderRequest, service: LocalSheetPersistence = Depends(get_service)
):
    await service.reorder_questions(sub_topic_id, body.order)
