"""Domain events for the ReviewResponse aggregate."""

from protean.fields import DateTime, Identifier

from coursereviews.domain import coursereviews


@coursereviews.event(part_of="ReviewResponse")
class TeacherResponseAdded:
    __version__ = 1

    response_id = Identifier(required=True)
    review_id = Identifier(required=True)
    teacher_id = Identifier(required=True)
    added_at = DateTime(required=True)


@coursereviews.event(part_of="ReviewResponse")
class TeacherResponseEdited:
    __version__ = 1

    response_id = Identifier(required=True)
    review_id = Identifier(required=True)
    teacher_id = Identifier(required=True)
    edited_at = DateTime(required=True)
