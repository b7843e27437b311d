"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
Secrets (classifier key, reward link, admin credentials) live here only and are
never sent to the client except through their gated endpoints.
"""
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings

from stepgate.rubrics import STEP1_RUBRIC, STEP2_RUBRIC

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    APP_NAME: str = "Step Gate Verification API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Database ---
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'stepgate.db'}"

    # --- AI Classifier ---
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    STEP1_RUBRIC: str = STEP1_RUBRIC
    STEP2_RUBRIC: str = STEP2_RUBRIC

    # --- Steps & Reward ---
    STEP1_ACTION_URL: str = ""
    STEP2_ACTION_URL: str = ""
    REWARD_LINK: str = ""

    # --- Screenshot limits ---
    MAX_SCREENSHOT_BYTES: int = 5 * 1024 * 1024
    MAX_SCREENSHOT_PAYLOAD_CHARS: int = 10 * 1024 * 1024
    VERIFY_RATE_LIMIT_REQUESTS: int = 10
    VERIFY_RATE_LIMIT_WINDOW: int = 60

    # --- Registration ---
    REQUIRE_STUDENT_CLASS: bool = True
    CLASS_OPTIONS: list[str] = [f"Class {n}" for n in range(6, 13)]

    # --- Security ---
    ADMIN_USERNAME: str = ""
    ADMIN_PASSWORD: str = ""
    CORS_ORIGINS: list[str] = ["*"]

    # --- Logging ---
    LOG_DIR: str = str(BASE_DIR / "logs")

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
