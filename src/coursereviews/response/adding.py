"""AddTeacherResponse: the course instructor answers a review.

Only the teacher currently assigned to the review's course may answer, and
only once per review. Responses never touch moderation or statistics.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.authorization import Operation, Resource, authorize
from coursereviews.course.course import Course
from coursereviews.domain import coursereviews
from coursereviews.errors import Conflict
from coursereviews.response.response import ReviewResponse, find_response
from coursereviews.review.review import Review
from coursereviews.user.directory import resolve_actor
from coursereviews.utils.queries import fetch_first, get_or_not_found

logger = structlog.get_logger(__name__)


def _course_teacher(course_id):
    course = fetch_first(Course, id=str(course_id))
    if course is None or not course.teacher_id:
        return None
    return str(course.teacher_id)


def _already_answered(review_id):
    return Conflict({"response": [f"Review {review_id} already has a response"]})


def store_new_response(response):
    """Add a new response, reporting a second response to the same review as ``Conflict``."""
    try:
        current_domain.repository_for(ReviewResponse).add(response)
    except ValidationError as exc:
        if "review_id" in (getattr(exc, "messages", None) or {}):
            raise _already_answered(response.review_id) from exc
        raise


@coursereviews.command(part_of="ReviewResponse")
class AddTeacherResponse:
    review_id = Identifier(required=True)
    teacher_id = Identifier(required=True)
    text = Text()


@coursereviews.command_handler(part_of=ReviewResponse)
class AddTeacherResponseHandler:
    @handle(AddTeacherResponse)
    def add_response(self, command):
        review = get_or_not_found(Review, command.review_id, "review")

        actor = resolve_actor(command.teacher_id)
        authorize(
            Operation.ADD_RESPONSE,
            actor,
            Resource(course_teacher_id=_course_teacher(review.course_id)),
        )

        if find_response(review.id) is not None:
            raise _already_answered(review.id)

        response = ReviewResponse.write(review.id, actor.id, command.text)
        store_new_response(response)

        logger.info(
            "Teacher response added",
            response_id=str(response.id),
            review_id=str(review.id),
            teacher_id=actor.id,
        )
        return str(response.id)
