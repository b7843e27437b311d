"""
Session Service — Resolves the visitor's session from a client-held token.
Also records page views, which must never fail the caller.
"""
import secrets
import uuid
from typing import Optional, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stepgate.errors import NotFound, StoreUnavailable
from stepgate.models.page_view import PageView
from stepgate.models.session import UserSession
from stepgate.utils.logger import get_logger

logger = get_logger("session")

TOKEN_BYTES = 32  # 256-bit tokens


def new_session_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def find_session(db: Session, token: Optional[str]) -> Optional[UserSession]:
    """Look up a session by token. Store errors become StoreUnavailable."""
    if not token:
        return None
    try:
        return db.query(UserSession).filter(UserSession.session_token == token).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Session lookup failed: %s", e)
        raise StoreUnavailable() from e


class SessionManager:
    """Get-or-create and refresh for visitor sessions."""

    @staticmethod
    def get_or_create(
        db: Session,
        token: Optional[str] = None,
        request_info: Optional[Dict] = None,
    ) -> UserSession:
        """Return the session for ``token``, creating a fresh one if absent or unknown.

        Args:
            db: Database session.
            token: Token the client has stored from a previous visit, if any.
            request_info: Optional ``ip`` and ``user_agent`` captured on creation.

        Returns:
            The existing or newly created UserSession.

        Raises:
            StoreUnavailable: If the store cannot be read or written.
        """
        existing = find_session(db, token)
        if existing is not None:
            return existing

        info = request_info or {}
        session = UserSession(
            id=str(uuid.uuid4()),
            session_token=new_session_token(),
            ip_address=info.get("ip"),
            user_agent=(info.get("user_agent") or "")[:256],
        )
        try:
            db.add(session)
            db.commit()
            db.refresh(session)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Session insert failed: %s", e)
            raise StoreUnavailable() from e

        logger.info("Created session %s", session.id)
        return session

    @staticmethod
    def refresh(db: Session, token: str) -> UserSession:
        """Re-read the authoritative session; never creates one."""
        session = find_session(db, token)
        if session is None:
            raise NotFound()
        return session


class PageViewTracker:
    """Fire-and-forget page view logging."""

    @staticmethod
    def record(
        session_factory,
        session_token: str,
        page_path: str = "/",
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        referrer: Optional[str] = None,
    ) -> None:
        """Insert one PageView using its own DB session. Failures are logged only."""
        db = None
        try:
            db = session_factory()
            db.add(PageView(
                page_path=(page_path or "/")[:256],
                session_token=session_token,
                user_agent=(user_agent or "")[:256],
                ip_address=ip_address,
                referrer=(referrer or None) and referrer[:512],
            ))
            db.commit()
        except Exception as e:
            logger.warning("Page view not recorded: %s", e)
            if db is not None:
                db.rollback()
        finally:
            if db is not None:
                db.close()
