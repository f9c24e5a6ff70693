"""Review aggregate: one student's evaluation of one course.

State Machine (3 states, none terminal):
    PENDING  → APPROVED | REJECTED   (moderation)
    APPROVED → REJECTED | PENDING    (moderation, or content edit)
    REJECTED → APPROVED | PENDING    (moderation, or content edit)

Any content edit sends the review back to PENDING, whatever it was before.
Only APPROVED reviews count towards the course statistics.
"""

import math
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text, ValueObject

from coursereviews.domain import coursereviews
from coursereviews.errors import InvalidArgument
from coursereviews.review.events import ReviewEdited, ReviewModerated, ReviewSubmitted

RATING_MIN = 0.0
RATING_MAX = 5.0
COMMENT_MIN_LENGTH = 10
RATING_CRITERIA = ("overall", "clarity", "material", "pedagogy")


class ModerationStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidArgument({"status": [f"Invalid moderation status: {value}"]}) from None

    @classmethod
    def parse_verdict(cls, value):
        """Parse a moderation decision: only APPROVED or REJECTED are verdicts."""
        status = cls.parse(value)
        if status == cls.PENDING:
            raise InvalidArgument({"status": ["Moderation status must be APPROVED or REJECTED"]})
        return status


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@coursereviews.value_object(part_of="Review")
class Ratings:
    """The four rating components; only ``overall`` is mandatory."""

    overall = Float(required=True)
    clarity = Float()
    material = Float()
    pedagogy = Float()

    @invariant.post
    def components_within_scale(self):
        for criterion in RATING_CRITERIA:
            value = getattr(self, criterion)
            if value is not None and not RATING_MIN <= value <= RATING_MAX:
                raise ValidationError({criterion: [f"Rating must be between {RATING_MIN} and {RATING_MAX}"]})

    def components(self):
        return {criterion: getattr(self, criterion) for criterion in RATING_CRITERIA}


def _rating_value(criterion, value, required=False):
    if value is None:
        if required:
            raise InvalidArgument({criterion: [f"The {criterion} rating is required"]})
        return None

    if isinstance(value, bool):
        raise InvalidArgument({criterion: [f"Invalid rating value: {value!r}"]})
    try:
        number = float(Decimal(str(value)))
    except (ArithmeticError, ValueError):
        raise InvalidArgument({criterion: [f"Invalid rating value: {value!r}"]}) from None

    if not math.isfinite(number) or not RATING_MIN <= number <= RATING_MAX:
        raise InvalidArgument({criterion: [f"Rating must be between {RATING_MIN} and {RATING_MAX}"]})
    return number


def build_ratings(overall, clarity=None, material=None, pedagogy=None):
    """Validate raw rating inputs and wrap them in a ``Ratings`` value object."""
    return Ratings(
        overall=_rating_value("overall", overall, required=True),
        clarity=_rating_value("clarity", clarity),
        material=_rating_value("material", material),
        pedagogy=_rating_value("pedagogy", pedagogy),
    )


def validate_comment(comment):
    if comment is None or not str(comment).strip():
        raise InvalidArgument({"comment": ["The comment is required"]})
    comment = str(comment).strip()
    if len(comment) < COMMENT_MIN_LENGTH:
        raise InvalidArgument({"comment": [f"The comment must contain at least {COMMENT_MIN_LENGTH} characters"]})
    return comment


def reviewer_course_key(user_id, course_id):
    return f"{user_id}:{course_id}"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@coursereviews.aggregate
class Review:
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)

    # Storage-level guard for "one review per student per course"
    reviewer_course_key = String(required=True, max_length=100, unique=True)

    ratings = ValueObject(Ratings, required=True)
    comment = Text(required=True)
    anonymous = Boolean(default=True)

    status = String(choices=ModerationStatus, default=ModerationStatus.PENDING.value)
    moderation_notes = Text()

    created_at = DateTime()
    updated_at = DateTime()
    moderated_at = DateTime()

    @classmethod
    def submit(
        cls,
        user_id,
        course_id,
        rating_overall,
        comment,
        rating_clarity=None,
        rating_material=None,
        rating_pedagogy=None,
        anonymous=True,
    ):
        """Submit a new review. Reviews always start out PENDING."""
        ratings = build_ratings(rating_overall, rating_clarity, rating_material, rating_pedagogy)
        comment = validate_comment(comment)
        anonymous = True if anonymous is None else anonymous
        now = datetime.now(UTC)

        review = cls(
            user_id=user_id,
            course_id=course_id,
            reviewer_course_key=reviewer_course_key(user_id, course_id),
            ratings=ratings,
            comment=comment,
            anonymous=anonymous,
            status=ModerationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                user_id=str(user_id),
                course_id=str(course_id),
                rating_overall=ratings.overall,
                rating_clarity=ratings.clarity,
                rating_material=ratings.material,
                rating_pedagogy=ratings.pedagogy,
                anonymous=anonymous,
                submitted_at=now,
            )
        )

        return review

    @property
    def is_approved(self):
        return ModerationStatus(self.status) == ModerationStatus.APPROVED

    # -------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------
    def edit(
        self,
        rating_overall,
        comment,
        rating_clarity=None,
        rating_material=None,
        rating_pedagogy=None,
        anonymous=None,
    ):
        """Overwrite ratings and comment and send the review back to moderation.

        ``anonymous=None`` keeps the current flag. Returns the status the
        review had before the edit.
        """
        ratings = build_ratings(rating_overall, rating_clarity, rating_material, rating_pedagogy)
        comment = validate_comment(comment)
        previous = ModerationStatus(self.status)
        now = datetime.now(UTC)

        self.ratings = ratings
        self.comment = comment
        if anonymous is not None:
            self.anonymous = anonymous
        self.status = ModerationStatus.PENDING.value
        self.moderation_notes = None
        self.moderated_at = None
        self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                course_id=str(self.course_id),
                previous_status=previous.value,
                rating_overall=ratings.overall,
                rating_clarity=ratings.clarity,
                rating_material=ratings.material,
                rating_pedagogy=ratings.pedagogy,
                edited_at=now,
            )
        )
        return previous

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def moderate(self, status, notes=None):
        """Record a moderation verdict (APPROVED or REJECTED). Returns the previous status."""
        verdict = ModerationStatus.parse_verdict(status)
        previous = ModerationStatus(self.status)
        now = datetime.now(UTC)

        self.status = verdict.value
        self.moderation_notes = notes
        self.moderated_at = now
        self.updated_at = now

        self.raise_(
            ReviewModerated(
                review_id=str(self.id),
                course_id=str(self.course_id),
                previous_status=previous.value,
                status=verdict.value,
                notes=notes,
                moderated_at=now,
            )
        )
        return previous

    def approve(self, notes=None):
        return self.moderate(ModerationStatus.APPROVED, notes=notes)

    def reject(self, notes=None):
        return self.moderate(ModerationStatus.REJECTED, notes=notes)
