"""
Classifier Service — Google Gemini vision call and verdict parsing.
Sends a screenshot plus a step rubric, returns the model's raw reply.
"""
import json
import re
from dataclasses import dataclass

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from stepgate.config import get_settings
from stepgate.errors import RateLimited, ServiceUnavailable, VerificationFailed
from stepgate.utils.logger import get_logger

settings = get_settings()
logger = get_logger("classifier")

PARSE_FAILURE_REASON = "Could not parse AI response"
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

_model = None


@dataclass
class VerificationVerdict:
    verified: bool
    reason: str


def parse_verdict(raw_text) -> VerificationVerdict:
    """Decode the classifier reply into a verdict. Never raises.

    Finds the outermost ``{...}`` span, parses it as JSON and accepts only a
    literal ``true`` for ``verified``. Anything unparseable is a rejection.
    """
    if not isinstance(raw_text, str):
        return VerificationVerdict(False, PARSE_FAILURE_REASON)
    match = _JSON_OBJECT.search(raw_text)
    if not match:
        logger.warning("No JSON object in classifier reply: %.200s", raw_text)
        return VerificationVerdict(False, PARSE_FAILURE_REASON)
    try:
        data = json.loads(match.group(0))
    except (json.JSONDecodeError, ValueError):
        logger.warning("Classifier reply is not valid JSON: %.200s", raw_text)
        return VerificationVerdict(False, PARSE_FAILURE_REASON)
    if not isinstance(data, dict):
        return VerificationVerdict(False, PARSE_FAILURE_REASON)

    verified = data.get("verified") is True
    reason = data.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        reason = "Screenshot verified" if verified else "Screenshot did not meet the requirements"
    return VerificationVerdict(verified, reason.strip())


def get_vision_model():
    """Lazily initialize the Gemini model."""
    global _model
    if _model is None and settings.GEMINI_API_KEY:
        genai.configure(api_key=settings.GEMINI_API_KEY)
        _model = genai.GenerativeModel(
            model_name=settings.GEMINI_MODEL,
            generation_config={
                "temperature": 0,
                "top_p": 1,
                "max_output_tokens": 512,
            },
        )
    return _model


class VisionClassifier:
    """Thin async wrapper around the Gemini multimodal endpoint."""

    async def classify(self, image_bytes: bytes, mime_type: str, rubric: str) -> str:
        """Ask the model to judge ``image_bytes`` against ``rubric``.

        Returns:
            The model's raw reply text ("" if the reply carried no text).

        Raises:
            ServiceUnavailable: Classifier not configured or billing/availability failure (402).
            RateLimited: Upstream quota exhausted (429).
            VerificationFailed: Any other upstream failure.
        """
        model = get_vision_model()
        if not model:
            logger.error("GEMINI_API_KEY is not configured")
            raise ServiceUnavailable()

        image_part = {"mime_type": mime_type, "data": image_bytes}

        try:
            response = await model.generate_content_async(contents=[rubric, image_part])
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Gemini call failed (%s): %s", e.code, e)
            raise _translate_upstream(e) from e
        except Exception as e:
            logger.exception("Gemini call failed: %s", e)
            raise VerificationFailed() from e

        try:
            return response.text or ""
        except ValueError:
            # Blocked or empty candidates; treated as an unparseable reply
            logger.warning("Gemini reply had no text. Candidates: %s", response.candidates)
            return ""


def _translate_upstream(error: google_exceptions.GoogleAPICallError):
    code = getattr(error, "code", None)
    if code == 429 or isinstance(error, google_exceptions.ResourceExhausted):
        return RateLimited()
    if code == 402:
        return ServiceUnavailable()
    return VerificationFailed()


_classifier = VisionClassifier()


def get_classifier() -> VisionClassifier:
    """FastAPI dependency: the process-wide classifier."""
    return _classifier
