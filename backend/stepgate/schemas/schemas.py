"""
Pydantic Schemas — Request & Response models for API validation.
Request bodies use the camelCase keys the landing page sends.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, StrictInt


class _CamelRequest(BaseModel):
    class Config:
        populate_by_name = True


# ──────────────── Session ────────────────

class SessionInitRequest(_CamelRequest):
    session_token: Optional[str] = Field(None, alias="sessionToken", max_length=128)
    page_path: str = Field("/", alias="pagePath", max_length=256)
    referrer: Optional[str] = Field(None, max_length=512)


class SessionTokenRequest(_CamelRequest):
    session_token: str = Field(..., alias="sessionToken", min_length=1, max_length=128)


class SessionOut(BaseModel):
    id: str
    session_token: str
    student_name: Optional[str] = None
    student_class: Optional[str] = None
    student_mobile: Optional[str] = None
    student_email: Optional[str] = None
    registration_completed: bool = False
    registration_completed_at: Optional[datetime] = None
    step1_verified: bool = False
    step1_verified_at: Optional[datetime] = None
    step2_verified: bool = False
    step2_verified_at: Optional[datetime] = None
    reward_disclosed: bool = False
    reward_disclosed_at: Optional[datetime] = None
    current_step: int = 1
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ──────────────── Registration ────────────────

class RegistrationRequest(_CamelRequest):
    session_token: str = Field(..., alias="sessionToken", min_length=1, max_length=128)
    name: Optional[str] = None
    student_class: Optional[str] = Field(None, alias="studentClass")
    mobile: Optional[str] = None
    email: Optional[str] = None


# ──────────────── Screenshot Verification ────────────────

class VerifyScreenshotRequest(_CamelRequest):
    session_token: str = Field(..., alias="sessionToken", min_length=1, max_length=128)
    step_number: StrictInt = Field(..., alias="stepNumber")
    screenshot_base64: str = Field(..., alias="screenshotBase64", min_length=1)


class VerifyScreenshotResponse(BaseModel):
    verified: bool
    reason: str
    step: int


# ──────────────── Reward ────────────────

class RewardResponse(BaseModel):
    success: bool = True
    driveLink: str


# ──────────────── Steps ────────────────

class StepInfo(BaseModel):
    step: int
    title: str
    actionUrl: Optional[str] = None


# ──────────────── Admin ────────────────

class AdminRequest(BaseModel):
    action: str = Field(..., description="fetch | delete")
    username: Optional[str] = None
    password: Optional[str] = None
    ids: Optional[List[str]] = None
    search: Optional[str] = Field(None, max_length=100)


class FunnelStats(BaseModel):
    totalViews: int
    totalRegistrations: int
    step1Verified: int
    step2Verified: int
    rewardDisclosed: int


class AdminFetchResponse(BaseModel):
    sessions: List[SessionOut]
    totalViews: int
    stats: FunnelStats


class AdminDeleteResponse(BaseModel):
    success: bool = True
    deleted: int


# ──────────────── Generic ────────────────

class ErrorResponse(BaseModel):
    error: str
