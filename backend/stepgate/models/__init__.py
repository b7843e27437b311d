from stepgate.models.session import UserSession
from stepgate.models.page_view import PageView

__all__ = ["UserSession", "PageView"]
