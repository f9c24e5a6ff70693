"""Review read models.

Every listing returns ``ReviewSummary`` records ordered newest first
(``created_at`` descending, ties broken by id descending). The reviewer is
shown as "Anonymous" on anonymous reviews.
"""

from dataclasses import asdict, dataclass
from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from coursereviews.course.course import Course
from coursereviews.response.response import find_response
from coursereviews.review.review import ModerationStatus, Review, reviewer_course_key
from coursereviews.user.user import User
from coursereviews.utils.queries import (
    DEFAULT_PAGE_SIZE,
    Page,
    fetch_all,
    fetch_first,
    get_or_not_found,
    newest_first,
    paginate,
)

ANONYMOUS_REVIEWER = "Anonymous"


@dataclass
class ReviewSummary:
    review_id: str
    user_id: str
    course_id: str
    course_name: str | None
    course_code: str | None
    rating_overall: float
    rating_clarity: float | None
    rating_material: float | None
    rating_pedagogy: float | None
    comment: str
    anonymous: bool
    reviewer_name: str
    status: str
    moderation_notes: str | None
    teacher_response: str | None
    created_at: datetime | None
    updated_at: datetime | None
    moderated_at: datetime | None

    def to_dict(self):
        return asdict(self)


class _Lookup:
    """Per-call cache of the courses, users and responses a batch of reviews refers to."""

    def __init__(self):
        self._cache = {}

    def _get(self, aggregate_cls, identifier):
        key = (aggregate_cls, str(identifier))
        if key not in self._cache:
            try:
                self._cache[key] = current_domain.repository_for(aggregate_cls).get(str(identifier))
            except ObjectNotFoundError:
                self._cache[key] = None
        return self._cache[key]

    def course(self, course_id):
        return self._get(Course, course_id)

    def user(self, user_id):
        return self._get(User, user_id)

    def response(self, review_id):
        key = ("response", str(review_id))
        if key not in self._cache:
            self._cache[key] = find_response(review_id)
        return self._cache[key]


def _summarize(review, lookup):
    course = lookup.course(review.course_id)
    response = lookup.response(review.id)

    if review.anonymous:
        reviewer_name = ANONYMOUS_REVIEWER
    else:
        author = lookup.user(review.user_id)
        reviewer_name = author.display_name if author is not None else ANONYMOUS_REVIEWER

    ratings = review.ratings
    return ReviewSummary(
        review_id=str(review.id),
        user_id=str(review.user_id),
        course_id=str(review.course_id),
        course_name=course.name if course is not None else None,
        course_code=course.code if course is not None else None,
        rating_overall=ratings.overall,
        rating_clarity=ratings.clarity,
        rating_material=ratings.material,
        rating_pedagogy=ratings.pedagogy,
        comment=review.comment,
        anonymous=bool(review.anonymous),
        reviewer_name=reviewer_name,
        status=review.status,
        moderation_notes=review.moderation_notes,
        teacher_response=response.text if response is not None else None,
        created_at=review.created_at,
        updated_at=review.updated_at,
        moderated_at=review.moderated_at,
    )


def summarize(reviews) -> list[ReviewSummary]:
    lookup = _Lookup()
    return [_summarize(review, lookup) for review in newest_first(reviews)]


def get_review(review_id) -> ReviewSummary:
    review = get_or_not_found(Review, review_id, "review")
    return _summarize(review, _Lookup())


def list_approved_reviews_for_course(course_id, page=0, size=DEFAULT_PAGE_SIZE) -> Page:
    course = get_or_not_found(Course, course_id, "course")
    approved = fetch_all(Review, course_id=str(course.id), status=ModerationStatus.APPROVED.value)
    result = paginate(newest_first(approved), page, size)
    result.items = summarize(result.items)
    return result


def list_reviews_for_user(user_id) -> list[ReviewSummary]:
    """All reviews written by ``user_id``, whatever their moderation status."""
    return summarize(fetch_all(Review, user_id=str(user_id)))


def list_reviews_for_teacher_courses(teacher_id) -> list[ReviewSummary]:
    """All reviews of the courses ``teacher_id`` teaches, whatever their status."""
    reviews = []
    for course in fetch_all(Course, teacher_id=str(teacher_id)):
        reviews.extend(fetch_all(Review, course_id=str(course.id)))
    return summarize(reviews)


def has_user_reviewed_course(user_id, course_id) -> bool:
    return fetch_first(Review, reviewer_course_key=reviewer_course_key(user_id, course_id)) is not None


def list_pending_reviews() -> list[ReviewSummary]:
    return summarize(fetch_all(Review, status=ModerationStatus.PENDING.value))


def count_pending_reviews() -> int:
    return len(fetch_all(Review, status=ModerationStatus.PENDING.value))


def recent_approved_reviews(limit=5) -> list[ReviewSummary]:
    approved = newest_first(fetch_all(Review, status=ModerationStatus.APPROVED.value))
    return summarize(approved[: max(limit, 0)])
