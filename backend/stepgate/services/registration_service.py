"""
Registration Gate — One-time capture of the student's identity.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stepgate.config import get_settings
from stepgate.errors import AlreadyRegistered, DuplicateContactError, NotFound, StoreUnavailable, ValidationError
from stepgate.models.session import UserSession
from stepgate.services.session_service import find_session
from stepgate.utils.logger import get_logger
from stepgate.utils.validators import validate_email, validate_mobile, validate_name

settings = get_settings()
logger = get_logger("registration")


class RegistrationGate:
    """Validates identity, rejects duplicate mobiles, and writes identity exactly once."""

    @staticmethod
    def validate(
        name: Optional[str],
        mobile: Optional[str],
        student_class: Optional[str] = None,
        email: Optional[str] = None,
    ) -> dict:
        """Normalize and validate registration input.

        Returns:
            Dict of cleaned identity fields.

        Raises:
            ValidationError: On the first invalid field (``field`` names it).
        """
        ok, message = validate_name(name)
        if not ok:
            raise ValidationError(message, field="name")

        if not (mobile or "").strip():
            raise ValidationError("Mobile number is required", field="mobile")
        if not validate_mobile(mobile):
            raise ValidationError("Enter a valid 10-digit mobile number", field="mobile")

        cleaned_class = (student_class or "").strip() or None
        if cleaned_class is None:
            if settings.REQUIRE_STUDENT_CLASS:
                raise ValidationError("Class is required", field="class")
        elif cleaned_class not in settings.CLASS_OPTIONS:
            raise ValidationError("Select a valid class", field="class")

        cleaned_email = (email or "").strip() or None
        if cleaned_email is not None and not validate_email(cleaned_email):
            raise ValidationError("Enter a valid email address", field="email")

        return {
            "student_name": name.strip(),
            "student_mobile": mobile.strip(),
            "student_class": cleaned_class,
            "student_email": cleaned_email,
        }

    @staticmethod
    def register(
        db: Session,
        token: str,
        name: Optional[str],
        mobile: Optional[str],
        student_class: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserSession:
        """Register the session identified by ``token``.

        The duplicate query is a fast path for a friendly message; the unique
        constraint on ``student_mobile`` is what actually rejects a racing
        second registration.

        Raises:
            ValidationError, NotFound, AlreadyRegistered,
            DuplicateContactError, StoreUnavailable.
        """
        identity = RegistrationGate.validate(name, mobile, student_class, email)

        session = find_session(db, token)
        if session is None:
            raise NotFound()
        if session.registration_completed:
            raise AlreadyRegistered()

        try:
            taken = (
                db.query(UserSession.id)
                .filter(
                    UserSession.student_mobile == identity["student_mobile"],
                    UserSession.registration_completed.is_(True),
                )
                .first()
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Duplicate check failed: %s", e)
            raise StoreUnavailable() from e
        if taken:
            raise DuplicateContactError()

        now = datetime.utcnow()
        try:
            updated = (
                db.query(UserSession)
                .filter(
                    UserSession.session_token == token,
                    UserSession.registration_completed.is_(False),
                )
                .update(
                    {
                        **identity,
                        "registration_completed": True,
                        "registration_completed_at": now,
                        "updated_at": now,
                    },
                    synchronize_session=False,
                )
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.info("Mobile uniqueness constraint rejected session %s", session.id)
            raise DuplicateContactError() from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Registration write failed: %s", e)
            raise StoreUnavailable() from e

        if not updated:
            # Another request registered this session between the read and the write
            raise AlreadyRegistered()

        db.refresh(session)
        logger.info("Registered session %s", session.id)
        return session
