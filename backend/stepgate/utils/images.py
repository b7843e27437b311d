"""
Screenshot Payload Helpers — base64 / data-URL decoding and image type sniffing.
"""
import base64
import binascii
import re

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?;base64,", re.IGNORECASE)


def decode_screenshot(payload: str) -> bytes:
    """Decode a plain base64 string or a ``data:image/...;base64,`` URL.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    body = _DATA_URL.sub("", payload.strip(), count=1)
    body = "".join(body.split())
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def sniff_image_type(data: bytes) -> str | None:
    """Return the MIME type from the file signature, or None if not a supported image."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None
