"""Domain events for the Review aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from coursereviews.domain import coursereviews


@coursereviews.event(part_of="Review")
class ReviewSubmitted:
    """A student submitted a review; it waits for moderation."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    rating_overall = Float(required=True)
    rating_clarity = Float()
    rating_material = Float()
    rating_pedagogy = Float()
    anonymous = Boolean(default=True)
    submitted_at = DateTime(required=True)


@coursereviews.event(part_of="Review")
class ReviewEdited:
    """The author rewrote the review; it goes back to moderation."""

    __version__ = 1

    review_id = Identifier(required=True)
    course_id = Identifier(required=True)
    previous_status = String(required=True)
    rating_overall = Float(required=True)
    rating_clarity = Float()
    rating_material = Float()
    rating_pedagogy = Float()
    edited_at = DateTime(required=True)


@coursereviews.event(part_of="Review")
class ReviewModerated:
    """An administrator approved or rejected the review."""

    __version__ = 1

    review_id = Identifier(required=True)
    course_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    notes = String()
    moderated_at = DateTime(required=True)
