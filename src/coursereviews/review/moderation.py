"""ModerateReview: approve or reject a review.

Administrators only; the caller checks the role through the authorization
gate before dispatching. Statistics are recomputed after every verdict,
since either outcome can move the review in or out of the approved set.
"""

import structlog
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.domain import coursereviews
from coursereviews.review.review import Review
from coursereviews.statistics.aggregator import recompute
from coursereviews.utils.queries import get_or_not_found

logger = structlog.get_logger(__name__)


@coursereviews.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    status = String(required=True, max_length=20)  # "APPROVED" or "REJECTED", any case
    notes = Text()


@coursereviews.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        review = get_or_not_found(Review, command.review_id, "review")

        previous = review.moderate(command.status, notes=command.notes)
        current_domain.repository_for(Review).add(review)

        recompute(review.course_id, staged=review)

        logger.info(
            "Review moderated",
            review_id=str(review.id),
            course_id=str(review.course_id),
            previous_status=previous.value,
            status=review.status,
        )
