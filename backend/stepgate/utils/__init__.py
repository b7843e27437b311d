from stepgate.utils.validators import validate_mobile, validate_email, validate_name, validate_uuid
from stepgate.utils.images import decode_screenshot, sniff_image_type

__all__ = [
    "validate_mobile", "validate_email", "validate_name", "validate_uuid",
    "decode_screenshot", "sniff_image_type",
]
