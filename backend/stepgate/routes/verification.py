"""
Verification Routes — Step catalogue and screenshot submission.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stepgate.config import get_settings
from stepgate.database import get_db
from stepgate.schemas.schemas import StepInfo, VerifyScreenshotRequest, VerifyScreenshotResponse
from stepgate.services.classifier import get_classifier
from stepgate.services.verification_service import VerificationService
from stepgate.utils.rate_limiter import rate_limit

settings = get_settings()
router = APIRouter(prefix="/api", tags=["Verification"])


@router.get("/steps", response_model=list[StepInfo])
def list_steps():
    """The two external actions the visitor must complete."""
    return [
        StepInfo(step=1, title="Register on the partner platform", actionUrl=settings.STEP1_ACTION_URL or None),
        StepInfo(step=2, title="Join the study group", actionUrl=settings.STEP2_ACTION_URL or None),
    ]


@router.post("/verify-screenshot", response_model=VerifyScreenshotResponse)
async def verify_screenshot(
    payload: VerifyScreenshotRequest,
    db: Session = Depends(get_db),
    classifier=Depends(get_classifier),
    _throttle: bool = Depends(rate_limit(
        requests=settings.VERIFY_RATE_LIMIT_REQUESTS,
        window=settings.VERIFY_RATE_LIMIT_WINDOW,
        scope="verify",
    )),
):
    """AI check of a step screenshot.
    A rejected verdict is a normal 200 response with verified=false.
    """
    verdict = await VerificationService.submit_screenshot(
        db,
        classifier,
        payload.session_token,
        payload.step_number,
        payload.screenshot_base64,
    )
    return VerifyScreenshotResponse(
        verified=verdict.verified,
        reason=verdict.reason,
        step=payload.step_number,
    )
