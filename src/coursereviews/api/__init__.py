"""Course Reviews API package."""

from coursereviews.api.errors import register_error_handlers
from coursereviews.api.routes import course_router, review_router, user_router

__all__ = ["user_router", "course_router", "review_router", "register_error_handlers"]
