"""
Reward Gate — Releases the reward link once both steps are verified.
This is the only code path that reads REWARD_LINK.
"""
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stepgate.config import get_settings
from stepgate.errors import NotEligible, NotFound, ServiceUnavailable, StoreUnavailable
from stepgate.models.session import UserSession
from stepgate.services.session_service import find_session
from stepgate.utils.logger import get_logger

settings = get_settings()
logger = get_logger("reward")


class RewardGate:

    @staticmethod
    def unlock(db: Session, token: str) -> str:
        """Return the reward link if the session is eligible.

        Eligibility is re-read from the store on every call. The first eligible
        call stamps ``reward_disclosed_at``; later calls return the same link
        without touching the row.

        Raises:
            NotFound: Unknown token.
            NotEligible: A step is not verified yet (carries both flags).
            ServiceUnavailable: REWARD_LINK is not configured.
            StoreUnavailable: Database failure.
        """
        session = find_session(db, token)
        if session is None:
            raise NotFound()

        if not (session.step1_verified and session.step2_verified):
            raise NotEligible(session.step1_verified, session.step2_verified)

        if not settings.REWARD_LINK:
            logger.error("REWARD_LINK is not configured")
            raise ServiceUnavailable()

        now = datetime.utcnow()
        try:
            first = (
                db.query(UserSession)
                .filter(
                    UserSession.session_token == token,
                    UserSession.step1_verified.is_(True),
                    UserSession.step2_verified.is_(True),
                    UserSession.reward_disclosed.is_(False),
                )
                .update(
                    {"reward_disclosed": True, "reward_disclosed_at": now, "updated_at": now},
                    synchronize_session=False,
                )
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Could not record reward disclosure: %s", e)
            raise StoreUnavailable() from e

        if first:
            logger.info("Reward disclosed to session %s", session.id)
        return settings.REWARD_LINK
