"""
Sheet API: GET /sheet (full normalized graph), POST /sheet/reset (restore the default dataset).
"""
from fastapi import APIRouter, Depends

from sheetsync.api.deps import get_service
from sheetsync.models import SheetData
from sheetsync.persistence.local_impl import LocalSheetPersistence

router = APIRouter(prefix="/sheet", tags=["sheet"])


@router.get("", response_model=SheetData)
async def get_sheet(service: LocalSheetPersistence = Depends(get_service)):
    return await service.get_sheet()


@router.post("/reset", response_model=SheetData)
async def reset_sheet(service: LocalSheetPersistence = Depends(get_service)):
    """Drop the stored snapshot and rebuild from the default dataset."""
    return await service.reset_data()
