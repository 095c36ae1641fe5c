"""
Topics API: create, rename, delete (cascading) and reorder topics; create and reorder their sub-topics.
"""
from fastapi import APIRouter, Depends, status

from sheetsync.api.deps import get_service, not_found
from sheetsync.errors import EntityNotFoundError
from sheetsync.models import NameRequest, OrderRequest, SubTopic, Topic
from sheetsync.persistence.local_impl import LocalSheetPersistence

router = APIRouter(prefix="/topics", tags=["topics"])


@router.put("/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_topics(body: OrderRequest, service: LocalSheetPersistence = Depends(get_service)):
    await service.reorder_topics(body.order)


@router.post("", response_model=Topic, status_code=status.HTTP_201_CREATED)
async def create_topic(body: NameRequest, service: LocalSheetPersistence = Depends(get_service)):
    return await service.create_topic(body.name)


@router.patch("/{topic_id}", response_model=Topic)
async def update_topic(topic_id: str, body: NameRequest, service: LocalSheetPersistence = Depends(get_service)):
    try:
        return await service.update_topic(topic_id, body.name)
    except EntityNotFoundError as e:
        raise not_found(e) from e


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(topic_id: str, service: LocalSheetPersistence = Depends(get_service)):
    """Removes the topic with all its sub-topics and questions. Unknown ids are a no-op."""
    await service.delete_topic(topic_id)


@router.post("/{topic_id}/subtopics", response_model=SubTopic, status_code=status.HTTP_201_CREATED)
async def create_sub_topic(topic_id: str, body: NameRequest, service: LocalSheetPersistence = Depends(get_service)):
    try:
        return await service.create_sub_topic(topic_id, body.name)
    except EntityNotFoundError as e:
        raise not_found(e) from e


@router.delete("/{topic_id}/subtopics/{sub_topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sub_topic(topic_id: str, sub_topic_id: str, service: LocalSheetPersistence = Depends(get_service)):
    await service.delete_sub_topic(topic_id, sub_topic_id)


@router.put("/{topic_id}/subtopics/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_sub_topics(
    topic_id: str, body: OrderRequest, service: LocalSheetPersistence = Depends(get_service)
):
    await service.reorder_sub_topics(topic_id, body.order)
