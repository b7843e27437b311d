"""
Page View Model — Append-only visit log, counted by the admin view.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime

from stepgate.database import Base


class PageView(Base):
    __tablename__ = "page_views"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    page_path = Column(String(256), nullable=False, default="/")
    session_token = Column(String(64), index=True)

    user_agent = Column(String(256))
    ip_address = Column(String(45))
    referrer = Column(String(512))

    created_at = Column(DateTime, default=datetime.utcnow)
