from fastapi import APIRouter, Depends, HTTPException

from wya.core.deps import get_store
from wya.core.errors import UserNotFound
from wya.schemas.report import ReportCreate
from wya.services.report_service import file_report
from wya.stores.base import UserStore

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post("", status_code=201)
async def create_report(
    body: ReportCreate,
    store: UserStore = Depends(get_store),
):
    try:
        report = await file_report(store, body.reporter_id, body.reported_id, body.explanation)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "id": str(report.id)}
