"""Shared test helpers: image payloads, a fake classifier, direct DB access."""

import base64

from stepgate.database import SessionLocal
from stepgate.models.session import UserSession

PNG_HEADER = b"\x89PNG\r\n\x1a\n"
VERIFIED_REPLY = '{"verified": true, "reason": "Confirmation screen visible"}'
REJECTED_REPLY = '{"verified": false, "reason": "Unrelated image"}'


def png_bytes(size: int) -> bytes:
    """A PNG-signed payload of exactly ``size`` bytes."""
    return PNG_HEADER + b"\x00" * (size - len(PNG_HEADER))


def png_b64(size: int = 128, data_url: bool = False) -> str:
    encoded = base64.b64encode(png_bytes(size)).decode()
    return f"data:image/png;base64,{encoded}" if data_url else encoded


class FakeClassifier:
    """Stands in for the Gemini classifier; records every call."""

    def __init__(self, reply: str = VERIFIED_REPLY, error: Exception = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def classify(self, image_bytes, mime_type, rubric):
        self.calls.append({"size": len(image_bytes), "mime_type": mime_type, "rubric": rubric})
        if self.error is not None:
            raise self.error
        return self.reply


def set_flags(token: str, **flags):
    """Write progress flags directly, bypassing the API."""
    db = SessionLocal()
    try:
        db.query(UserSession).filter(UserSession.session_token == token).update(flags)
        db.commit()
    finally:
        db.close()


def load(token: str) -> UserSession:
    db = SessionLocal()
    try:
        return db.query(UserSession).filter(UserSession.session_token == token).first()
    finally:
        db.close()
