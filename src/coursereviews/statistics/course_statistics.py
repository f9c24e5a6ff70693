"""CourseStatistics aggregate: the cached rating summary of one course.

Keyed by ``course_id`` so a course has at most one record. The record is only
ever written by the rating aggregator; reads go through the functions below.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer
from protean.utils.globals import current_domain

from coursereviews.course.course import Course
from coursereviews.domain import coursereviews
from coursereviews.errors import not_found
from coursereviews.utils.queries import fetch_all

AVERAGE_FIELDS = (
    "avg_rating_overall",
    "avg_rating_clarity",
    "avg_rating_material",
    "avg_rating_pedagogy",
)


@coursereviews.event(part_of="CourseStatistics")
class CourseStatisticsRecomputed:
    __version__ = 1

    course_id = Identifier(required=True)
    avg_rating_overall = Float()
    avg_rating_clarity = Float()
    avg_rating_material = Float()
    avg_rating_pedagogy = Float()
    total_reviews = Integer(required=True)
    recomputed_at = DateTime(required=True)


@coursereviews.aggregate
class CourseStatistics:
    course_id = Identifier(identifier=True)
    avg_rating_overall = Float()
    avg_rating_clarity = Float()
    avg_rating_material = Float()
    avg_rating_pedagogy = Float()
    total_reviews = Integer(default=0, min_value=0)
    updated_at = DateTime()

    def refresh(self, averages, total_reviews):
        """Overwrite the cached averages with a freshly computed set."""
        for name in AVERAGE_FIELDS:
            setattr(self, name, averages.get(name))
        self.total_reviews = total_reviews
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CourseStatisticsRecomputed(
                course_id=str(self.course_id),
                total_reviews=total_reviews,
                recomputed_at=self.updated_at,
                **{name: averages.get(name) for name in AVERAGE_FIELDS},
            )
        )

    @property
    def has_reviews(self):
        return (self.total_reviews or 0) > 0

    @property
    def overall_average(self):
        return overall_average(self)


def overall_average(statistics) -> float:
    """Mean of the criterion averages that are present, two decimals, 0.0 when none are."""
    values = [getattr(statistics, name) for name in AVERAGE_FIELDS]
    values = [Decimal(str(v)) for v in values if v is not None]
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class StatisticsView:
    """Read model returned to callers; also used when no cache row exists yet."""

    def __init__(self, course, record=None):
        self.course_id = str(course.id)
        self.course_name = course.name
        self.course_code = course.code
        for name in AVERAGE_FIELDS:
            setattr(self, name, getattr(record, name) if record is not None else None)
        self.total_reviews = (record.total_reviews or 0) if record is not None else 0
        self.updated_at = record.updated_at if record is not None else None
        self.overall_average = overall_average(self)

    def to_dict(self):
        return {
            "course_id": self.course_id,
            "course_name": self.course_name,
            "course_code": self.course_code,
            **{name: getattr(self, name) for name in AVERAGE_FIELDS},
            "total_reviews": self.total_reviews,
            "overall_average": self.overall_average,
            "updated_at": self.updated_at,
        }


def find_statistics(course_id):
    try:
        return current_domain.repository_for(CourseStatistics).get(str(course_id))
    except ObjectNotFoundError:
        return None


def get_course_statistics(course_id) -> StatisticsView:
    """Statistics of one course; a course never aggregated reports 0 reviews and no averages."""
    try:
        course = current_domain.repository_for(Course).get(course_id)
    except ObjectNotFoundError:
        raise not_found("course", course_id) from None
    return StatisticsView(course, find_statistics(course.id))


def top_rated_courses(limit=10) -> list[StatisticsView]:
    """Active courses with at least one approved review, best first.

    Ordered by the overall-rating average, then by review count, then by
    course id, all descending.
    """
    courses = {str(c.id): c for c in fetch_all(Course, is_active=True)}
    ranked = [
        StatisticsView(courses[str(record.course_id)], record)
        for record in fetch_all(CourseStatistics)
        if str(record.course_id) in courses and (record.total_reviews or 0) > 0
    ]
    ranked.sort(
        key=lambda view: (view.avg_rating_overall or 0.0, view.total_reviews, view.course_id),
        reverse=True,
    )
    return ranked[:limit]
