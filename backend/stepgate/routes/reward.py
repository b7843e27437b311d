"""
Reward Routes — Gated disclosure of the reward link.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stepgate.database import get_db
from stepgate.schemas.schemas import RewardResponse, SessionTokenRequest
from stepgate.services.reward_service import RewardGate

router = APIRouter(prefix="/api", tags=["Reward"])


@router.post("/get-drive-link", response_model=RewardResponse)
def get_drive_link(payload: SessionTokenRequest, db: Session = Depends(get_db)):
    """Return the reward link once both steps are verified (403 otherwise)."""
    link = RewardGate.unlock(db, payload.session_token)
    return RewardResponse(success=True, driveLink=link)
