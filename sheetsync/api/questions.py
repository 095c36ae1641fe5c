"""
Questions API: PATCH /questions/{id} merges the given fields (title, links, difficulty, solved, duplicate flag).
"""
from fastapi import APIRouter, Depends

from sheetsync.api.deps import get_service, not_found
from sheetsync.errors import EntityNotFoundError
from sheetsync.models import Question, QuestionUpdate
from sheetsync.persistence.local_impl import LocalSheetPersistence

router = APIRouter(prefix="/questions", tags=["questions"])


@router.patch("/{question_id}", response_model=Question)
async def update_question(
    question_id: str, body: QuestionUpdate, service: LocalSheetPersistence = Depends(get_service)
):
    try:
        return await service.update_question(question_id, body)
    except EntityNotFoundError as e:
        raise not_found(e) from e
