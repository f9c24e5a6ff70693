"""EditReview: the author rewrites their review.

Ratings and comment are replaced and the review goes back to PENDING,
whatever its previous moderation outcome. When the review was APPROVED it
leaves the approved set, so the course statistics are recomputed.
"""

import structlog
from protean.fields import Boolean, Float, Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.authorization import Operation, Resource, authorize
from coursereviews.domain import coursereviews
from coursereviews.review.review import ModerationStatus, Review
from coursereviews.statistics.aggregator import recompute
from coursereviews.user.directory import resolve_actor
from coursereviews.utils.queries import get_or_not_found

logger = structlog.get_logger(__name__)


@coursereviews.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    rating_overall = Float()
    rating_clarity = Float()
    rating_material = Float()
    rating_pedagogy = Float()
    comment = Text()
    anonymous = Boolean()  # None keeps the current setting


@coursereviews.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        review = get_or_not_found(Review, command.review_id, "review")

        actor = resolve_actor(command.actor_id)
        authorize(Operation.EDIT_REVIEW, actor, Resource(owner_id=str(review.user_id)))

        previous = review.edit(
            rating_overall=command.rating_overall,
            rating_clarity=command.rating_clarity,
            rating_material=command.rating_material,
            rating_pedagogy=command.rating_pedagogy,
            comment=command.comment,
            anonymous=command.anonymous,
        )
        current_domain.repository_for(Review).add(review)

        if previous == ModerationStatus.APPROVED:
            recompute(review.course_id, staged=review)

        logger.info(
            "Review edited and returned to moderation",
            review_id=str(review.id),
            course_id=str(review.course_id),
            previous_status=previous.value,
        )
