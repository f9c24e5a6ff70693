"""Rating aggregator: keeps ``CourseStatistics`` in step with approved reviews.

Each criterion is averaged independently over the approved reviews that
rated it, so a missing component never counts as zero. Averages are rounded
half-up to two decimals; the review count is the number of approved reviews.

Callers running inside a unit of work pass the review they just changed
(``staged``) and the ids they just deleted (``removed_ids``): the persisted
approved set is corrected with both before averaging, so the result never
depends on whether the store already reflects the in-flight change.
"""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from protean.utils.globals import current_domain

from coursereviews.review.review import RATING_CRITERIA, ModerationStatus, Review
from coursereviews.statistics.course_statistics import CourseStatistics, find_statistics
from coursereviews.utils.queries import fetch_all

logger = structlog.get_logger(__name__)

_TWO_PLACES = Decimal("0.01")


def _mean(values):
    if not values:
        return None
    total = sum((Decimal(str(v)) for v in values), Decimal("0"))
    return float((total / len(values)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def compute(reviews):
    """Return ``(averages, count)`` for a collection of approved reviews.

    ``averages`` maps ``avg_rating_<criterion>`` to the rounded mean, or None
    when no review supplied that criterion.
    """
    reviews = list(reviews)
    averages = {}
    for criterion in RATING_CRITERIA:
        values = [getattr(r.ratings, criterion) for r in reviews if r.ratings is not None]
        averages[f"avg_rating_{criterion}"] = _mean([v for v in values if v is not None])
    return averages, len(reviews)


def approved_reviews(course_id, staged=None, removed_ids=()):
    course_id = str(course_id)
    removed = {str(i) for i in removed_ids}

    current = {
        str(review.id): review
        for review in fetch_all(Review, course_id=course_id, status=ModerationStatus.APPROVED.value)
        if str(review.id) not in removed
    }

    if staged is not None:
        current.pop(str(staged.id), None)
        if str(staged.course_id) == course_id and staged.is_approved and str(staged.id) not in removed:
            current[str(staged.id)] = staged

    return list(current.values())


def recompute(course_id, staged=None, removed_ids=()):
    """Recompute and upsert the statistics record of ``course_id``.

    Idempotent: two calls with the same approved set store the same values.
    """
    averages, total = compute(approved_reviews(course_id, staged, removed_ids))

    record = find_statistics(course_id)
    if record is None:
        record = CourseStatistics(course_id=str(course_id), total_reviews=0)

    record.refresh(averages, total)
    current_domain.repository_for(CourseStatistics).add(record)

    logger.info(
        "Recomputed course statistics",
        course_id=str(course_id),
        total_reviews=total,
        avg_rating_overall=averages["avg_rating_overall"],
    )
    return record


def discard(course_id):
    """Drop the statistics record of a deleted course, if it has one."""
    record = find_statistics(course_id)
    if record is not None:
        current_domain.repository_for(CourseStatistics)._dao.delete(record)
