from stepgate.routes.session import router as session_router
from stepgate.routes.verification import router as verification_router
from stepgate.routes.reward import router as reward_router
from stepgate.routes.admin import router as admin_router

__all__ = ["session_router", "verification_router", "reward_router", "admin_router"]
