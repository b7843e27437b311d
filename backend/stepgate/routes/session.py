"""
Session Routes — Session resolution, refresh, and one-time registration.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from stepgate.database import get_db, SessionLocal
from stepgate.schemas.schemas import (
    SessionInitRequest, SessionTokenRequest, SessionOut, RegistrationRequest,
)
from stepgate.services.session_service import SessionManager, PageViewTracker
from stepgate.services.registration_service import RegistrationGate

router = APIRouter(prefix="/api/session", tags=["Session"])


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("", response_model=SessionOut)
def get_or_create_session(
    payload: SessionInitRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Resolve the visitor's session from their stored token, or start a new one.
    The client must persist the returned session_token.
    """
    user_agent = request.headers.get("user-agent", "")
    session = SessionManager.get_or_create(
        db, payload.session_token,
        request_info={"ip": _client_ip(request), "user_agent": user_agent},
    )

    background_tasks.add_task(
        PageViewTracker.record,
        SessionLocal,
        session.session_token,
        page_path=payload.page_path,
        user_agent=user_agent,
        ip_address=_client_ip(request),
        referrer=payload.referrer or request.headers.get("referer"),
    )
    return session


@router.post("/refresh", response_model=SessionOut)
def refresh_session(payload: SessionTokenRequest, db: Session = Depends(get_db)):
    """Re-read the authoritative session state. 404 if the token is unknown."""
    return SessionManager.refresh(db, payload.session_token)


@router.post("/register", response_model=SessionOut)
def register(payload: RegistrationRequest, db: Session = Depends(get_db)):
    """Capture the student's identity. Allowed once per session and once per mobile."""
    return RegistrationGate.register(
        db,
        payload.session_token,
        name=payload.name,
        mobile=payload.mobile,
        student_class=payload.student_class,
        email=payload.email,
    )
