from stepgate.services.session_service import SessionManager, PageViewTracker
from stepgate.services.registration_service import RegistrationGate
from stepgate.services.classifier import VisionClassifier, VerificationVerdict, parse_verdict
from stepgate.services.verification_service import VerificationService
from stepgate.services.reward_service import RewardGate
from stepgate.services.admin_service import AdminService

__all__ = [
    "SessionManager", "PageViewTracker", "RegistrationGate",
    "VisionClassifier", "VerificationVerdict", "parse_verdict",
    "VerificationService", "RewardGate", "AdminService",
]
