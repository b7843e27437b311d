"""
Verification Service — Screenshot proof for steps 1 and 2.

All input checks run before the classifier is called. The only write is a
conditional update after a positive verdict, so an abandoned request leaves
the session untouched.
"""
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from stepgate.config import get_settings
from stepgate.errors import NotEligible, NotFound, StoreUnavailable, ValidationError
from stepgate.models.session import UserSession
from stepgate.rubrics import rubric_for_step
from stepgate.services.classifier import VerificationVerdict, parse_verdict
from stepgate.services.session_service import find_session
from stepgate.utils.images import decode_screenshot, sniff_image_type
from stepgate.utils.logger import get_logger

settings = get_settings()
logger = get_logger("verification")

VALID_STEPS = (1, 2)
ALREADY_VERIFIED_REASON = "Step already verified"

_STEP_COLUMNS = {
    1: (UserSession.step1_verified, "step1_verified", "step1_verified_at"),
    2: (UserSession.step2_verified, "step2_verified", "step2_verified_at"),
}


def load_screenshot(screenshot_base64, max_bytes: int, max_chars: int) -> tuple[bytes, str]:
    """Decode and check a submitted screenshot.

    Returns:
        (image bytes, sniffed MIME type).

    Raises:
        ValidationError: Empty, oversized, undecodable, or not an image.
    """
    if not isinstance(screenshot_base64, str) or not screenshot_base64.strip():
        raise ValidationError("Screenshot is required", field="screenshotBase64")
    if len(screenshot_base64) > max_chars:
        raise ValidationError("Screenshot payload is too large", field="screenshotBase64")
    try:
        image = decode_screenshot(screenshot_base64)
    except ValueError:
        raise ValidationError("Screenshot is not valid base64 image data", field="screenshotBase64")
    if not image:
        raise ValidationError("Screenshot is empty", field="screenshotBase64")
    if len(image) > max_bytes:
        raise ValidationError(f"Image must be at most {max_bytes} bytes", field="screenshotBase64")
    mime_type = sniff_image_type(image)
    if mime_type is None:
        raise ValidationError("Please upload an image file", field="screenshotBase64")
    return image, mime_type


class VerificationService:
    """Runs one screenshot submission through the classifier and records success.

    Decoding and database work run in the threadpool; only the classifier call
    is awaited on the event loop.
    """

    @staticmethod
    def prepare_submission(
        db: Session,
        token: str,
        step_number,
        screenshot_base64: str,
    ) -> tuple[UserSession, bytes, str]:
        """Blocking pre-checks for a submission.

        Returns:
            (session row, image bytes, sniffed MIME type).

        Raises:
            ValidationError: Bad step number or screenshot.
            NotFound: Unknown token.
            NotEligible: Step 2 submitted before step 1 is verified.
        """
        image, mime_type = load_screenshot(
            screenshot_base64,
            max_bytes=settings.MAX_SCREENSHOT_BYTES,
            max_chars=settings.MAX_SCREENSHOT_PAYLOAD_CHARS,
        )
        if isinstance(step_number, bool) or step_number not in VALID_STEPS:
            raise ValidationError("Invalid step number", field="stepNumber")

        session = find_session(db, token)
        if session is None:
            raise NotFound()

        if step_number == 2 and not session.step1_verified:
            raise NotEligible(
                session.step1_verified, session.step2_verified,
                message="Complete step 1 before submitting step 2",
            )
        return session, image, mime_type

    @staticmethod
    async def submit_screenshot(
        db: Session,
        classifier,
        token: str,
        step_number,
        screenshot_base64: str,
    ) -> VerificationVerdict:
        """Verify a screenshot for ``step_number`` on the session behind ``token``.

        Args:
            db: Database session.
            classifier: Object with ``async classify(image_bytes, mime_type, rubric) -> str``.
            token: Session token held by the client.
            step_number: 1 or 2.
            screenshot_base64: Base64 image or data URL.

        Returns:
            The verdict shown to the visitor.

        Raises:
            ValidationError: Bad step number or screenshot.
            NotFound: Unknown token.
            NotEligible: Step 2 submitted before step 1 is verified.
            RateLimited, ServiceUnavailable, VerificationFailed: Classifier failures.
            StoreUnavailable: Database failures.
        """
        session, image, mime_type = await run_in_threadpool(
            VerificationService.prepare_submission,
            db, token, step_number, screenshot_base64,
        )

        _, flag, _ = _STEP_COLUMNS[step_number]
        if getattr(session, flag):
            return VerificationVerdict(True, ALREADY_VERIFIED_REASON)

        rubric = rubric_for_step(settings, step_number)
        raw_reply = await classifier.classify(image, mime_type, rubric)
        verdict = parse_verdict(raw_reply)
        logger.info(
            "Session %s step %s verdict=%s reason=%s",
            session.id, step_number, verdict.verified, verdict.reason,
        )

        if verdict.verified:
            await run_in_threadpool(VerificationService.mark_verified, db, token, step_number)
        return verdict

    @staticmethod
    def mark_verified(db: Session, token: str, step_number: int) -> bool:
        """Set stepN_verified once; returns False if it was already set."""
        column, flag, stamp = _STEP_COLUMNS[step_number]
        now = datetime.utcnow()
        try:
            updated = (
                db.query(UserSession)
                .filter(UserSession.session_token == token, column.is_(False))
                .update({flag: True, stamp: now, "updated_at": now}, synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Could not record step %s verification: %s", step_number, e)
            raise StoreUnavailable() from e
        return bool(updated)
