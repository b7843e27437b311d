"""
Admin Service — Lead listing, funnel metrics and bulk deletion.
"""
import secrets
from typing import Optional, List

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stepgate.config import get_settings
from stepgate.errors import StoreUnavailable, ValidationError
from stepgate.models.page_view import PageView
from stepgate.models.session import UserSession
from stepgate.utils.logger import get_logger
from stepgate.utils.validators import validate_uuid

settings = get_settings()
logger = get_logger("admin")

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    """Search terms match literally; % and _ are not wildcards."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _store_call(db: Session, what: str, fn):
    try:
        return fn()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Admin %s failed: %s", what, e)
        raise StoreUnavailable() from e


class AdminService:
    """Read-only projections plus bulk delete for the admin dashboard."""

    @staticmethod
    def authenticate(username: Optional[str], password: Optional[str]) -> bool:
        """Constant-time check against the configured credential pair.

        With either credential unset the admin API stays closed.
        """
        expected_user = settings.ADMIN_USERNAME
        expected_pass = settings.ADMIN_PASSWORD
        if not expected_user or not expected_pass:
            return False
        user_ok = secrets.compare_digest((username or "").encode(), expected_user.encode())
        pass_ok = secrets.compare_digest((password or "").encode(), expected_pass.encode())
        return user_ok and pass_ok

    @staticmethod
    def list_sessions(db: Session, search: Optional[str] = None) -> List[UserSession]:
        """All sessions newest first, optionally filtered by name/mobile/class/email."""
        query = db.query(UserSession).order_by(UserSession.created_at.desc())
        term = (search or "").strip()
        if term:
            pattern = f"%{_escape_like(term.lower())}%"
            query = query.filter(or_(
                func.lower(UserSession.student_name).like(pattern, escape=LIKE_ESCAPE),
                UserSession.student_mobile.like(pattern, escape=LIKE_ESCAPE),
                func.lower(UserSession.student_class).like(pattern, escape=LIKE_ESCAPE),
                func.lower(UserSession.student_email).like(pattern, escape=LIKE_ESCAPE),
            ))
        return _store_call(db, "list", query.all)

    @staticmethod
    def count_page_views(db: Session) -> int:
        return _store_call(db, "view count", lambda: db.query(func.count(PageView.id)).scalar() or 0)

    @staticmethod
    def funnel_stats(db: Session) -> dict:
        """Counts for each stage of the funnel."""

        def count_where(column) -> int:
            return db.query(func.count(UserSession.id)).filter(column.is_(True)).scalar() or 0

        return _store_call(db, "stats", lambda: {
            "totalViews": db.query(func.count(PageView.id)).scalar() or 0,
            "totalRegistrations": count_where(UserSession.registration_completed),
            "step1Verified": count_where(UserSession.step1_verified),
            "step2Verified": count_where(UserSession.step2_verified),
            "rewardDisclosed": count_where(UserSession.reward_disclosed),
        })

    @staticmethod
    def delete_sessions(db: Session, ids) -> int:
        """Delete sessions by id after validating every id is a UUID.

        Returns:
            Number of rows removed (unknown ids are skipped).
        """
        if not isinstance(ids, list) or not ids:
            raise ValidationError("No IDs provided", field="ids")
        if not all(validate_uuid(i) for i in ids):
            raise ValidationError("Invalid ID format", field="ids")

        def _delete():
            deleted = (
                db.query(UserSession)
                .filter(UserSession.id.in_([i.lower() for i in ids]))
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted

        deleted = _store_call(db, "delete", _delete)
        logger.info("Admin deleted %d session(s)", deleted)
        return deleted
