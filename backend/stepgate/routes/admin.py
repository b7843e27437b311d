"""
Admin Routes — Lead list, funnel metrics and bulk delete.
Credentials travel in the body and are checked server-side on every call.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stepgate.database import get_db
from stepgate.schemas.schemas import AdminRequest, AdminFetchResponse, AdminDeleteResponse, SessionOut
from stepgate.services.admin_service import AdminService
from stepgate.utils.logger import get_logger

logger = get_logger("admin")
router = APIRouter(prefix="/api", tags=["Admin"])


@router.post("/admin-api", response_model=AdminFetchResponse | AdminDeleteResponse)
def admin_api(payload: AdminRequest, db: Session = Depends(get_db)):
    """Dispatch an admin action: ``fetch`` or ``delete``."""
    if not AdminService.authenticate(payload.username, payload.password):
        logger.warning("Rejected admin call (action=%s)", payload.action)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if payload.action == "fetch":
        sessions = AdminService.list_sessions(db, payload.search)
        stats = AdminService.funnel_stats(db)
        return AdminFetchResponse(
            sessions=[SessionOut.model_validate(s) for s in sessions],
            totalViews=stats["totalViews"],
            stats=stats,
        )

    if payload.action == "delete":
        deleted = AdminService.delete_sessions(db, payload.ids)
        return AdminDeleteResponse(success=True, deleted=deleted)

    raise HTTPException(status_code=400, detail="Invalid action")
