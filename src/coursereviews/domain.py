"""Course Reviews bounded context: Users, Courses, Reviews, and Ratings.

Handles the review lifecycle (submission, editing, moderation, removal),
teacher responses, and the cached per-course rating statistics that follow
the set of approved reviews.
"""

import structlog
from protean.domain import Domain

from coursereviews.utils.logging import configure_logging

configure_logging()

coursereviews = Domain(name="coursereviews")

logger = structlog.get_logger(__name__)
