"""DeleteReview: hard-delete a review together with its teacher response.

The author (a student) or any administrator may delete. Removing an
APPROVED review changes the approved set, so its course is recomputed.

``remove_reviews`` is shared with the user and course cascades.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.authorization import Actor, Operation, Resource, authorize
from coursereviews.domain import coursereviews
from coursereviews.response.response import ReviewResponse, find_response
from coursereviews.review.review import Review
from coursereviews.statistics.aggregator import recompute
from coursereviews.user.directory import resolve_actor
from coursereviews.user.user import UserRole
from coursereviews.utils.queries import get_or_not_found

logger = structlog.get_logger(__name__)


def remove_reviews(reviews, recompute_statistics=True):
    """Delete ``reviews`` and their responses.

    Courses that lose an approved review are recomputed once each, with the
    deleted ids excluded, unless ``recompute_statistics`` is off (the course
    itself is going away). Returns the ids of the recomputed courses.
    """
    review_repo = current_domain.repository_for(Review)
    response_repo = current_domain.repository_for(ReviewResponse)

    removed_ids = set()
    affected_courses = set()
    for review in reviews:
        response = find_response(review.id)
        if response is not None:
            response_repo._dao.delete(response)

        review_repo._dao.delete(review)
        removed_ids.add(str(review.id))
        if review.is_approved:
            affected_courses.add(str(review.course_id))

    if recompute_statistics:
        for course_id in sorted(affected_courses):
            recompute(course_id, removed_ids=removed_ids)
    return affected_courses if recompute_statistics else set()


@coursereviews.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(choices=UserRole)  # resolved from the directory when omitted


@coursereviews.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        review = get_or_not_found(Review, command.review_id, "review")

        if command.actor_role:
            actor = Actor(id=str(command.actor_id), role=UserRole(command.actor_role))
        else:
            actor = resolve_actor(command.actor_id)
        authorize(Operation.DELETE_REVIEW, actor, Resource(owner_id=str(review.user_id)))

        remove_reviews([review])

        logger.info(
            "Review deleted",
            review_id=str(review.id),
            course_id=str(review.course_id),
            status=review.status,
            actor_id=actor.id,
        )
