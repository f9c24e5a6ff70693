"""SubmitReview: a student reviews a course.

Only an active student may review. One review per student per course: checked
here against the repository, and again by the unique ``reviewer_course_key``
when the review is stored.
A new review is PENDING, so the course statistics are left untouched.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.authorization import Operation, authorize
from coursereviews.course.course import Course
from coursereviews.domain import coursereviews
from coursereviews.errors import Conflict
from coursereviews.review.review import Review, reviewer_course_key
from coursereviews.user.directory import actor_for
from coursereviews.user.user import User
from coursereviews.utils.queries import fetch_first, get_or_not_found

logger = structlog.get_logger(__name__)


def _duplicate(user_id, course_id):
    return Conflict({"review": [f"User {user_id} has already reviewed course {course_id}"]})


def store_new_review(review):
    """Add a new review, reporting a clash on the reviewer/course key as ``Conflict``."""
    try:
        current_domain.repository_for(Review).add(review)
    except ValidationError as exc:
        if "reviewer_course_key" in (getattr(exc, "messages", None) or {}):
            raise _duplicate(review.user_id, review.course_id) from exc
        raise


@coursereviews.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    rating_overall = Float()
    rating_clarity = Float()
    rating_material = Float()
    rating_pedagogy = Float()
    comment = Text()
    anonymous = Boolean(default=True)


@coursereviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        user = get_or_not_found(User, command.user_id, "user")
        authorize(Operation.CREATE_REVIEW, actor_for(user))

        course = get_or_not_found(Course, command.course_id, "course")

        if fetch_first(Review, reviewer_course_key=reviewer_course_key(user.id, course.id)) is not None:
            raise _duplicate(user.id, course.id)

        review = Review.submit(
            user_id=str(user.id),
            course_id=str(course.id),
            rating_overall=command.rating_overall,
            rating_clarity=command.rating_clarity,
            rating_material=command.rating_material,
            rating_pedagogy=command.rating_pedagogy,
            comment=command.comment,
            anonymous=command.anonymous,
        )
        store_new_review(review)

        logger.info(
            "Review submitted for moderation",
            review_id=str(review.id),
            user_id=str(user.id),
            course_id=str(course.id),
        )
        return str(review.id)
