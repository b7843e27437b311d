"""
Session Model — One visitor's registration and verification progress.
Maps to the 'user_sessions' table.
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean

from stepgate.database import Base


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(String(36), primary_key=True, index=True)
    session_token = Column(String(64), unique=True, index=True, nullable=False)

    # Identity (written once, by registration)
    student_name = Column(String(100))
    student_class = Column(String(32))
    student_mobile = Column(String(10), unique=True, index=True)  # NULL until registered
    student_email = Column(String(254))

    # Progress flags: registration → step 1 → step 2 → reward
    registration_completed = Column(Boolean, default=False, nullable=False)
    registration_completed_at = Column(DateTime, nullable=True)
    step1_verified = Column(Boolean, default=False, nullable=False)
    step1_verified_at = Column(DateTime, nullable=True)
    step2_verified = Column(Boolean, default=False, nullable=False)
    step2_verified_at = Column(DateTime, nullable=True)
    reward_disclosed = Column(Boolean, default=False, nullable=False)
    reward_disclosed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    ip_address = Column(String(45))
    user_agent = Column(String(256))

    @property
    def current_step(self) -> int:
        """Step the visitor is working on: 1, 2, or 3 (reward)."""
        if not self.step1_verified:
            return 1
        if not self.step2_verified:
            return 2
        return 3
