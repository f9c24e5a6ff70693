"""ReviewResponse aggregate: the course instructor's public answer to a review.

A review carries at most one response: ``review_id`` is unique in storage,
and a withdrawn response frees the review for a new one under a fresh id.
The author is fixed at creation; if the course later changes instructor the
response stays with its original author.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Text

from coursereviews.domain import coursereviews
from coursereviews.errors import InvalidArgument
from coursereviews.response.events import TeacherResponseAdded, TeacherResponseEdited
from coursereviews.utils.queries import fetch_first


def validate_text(text):
    if text is None or not str(text).strip():
        raise InvalidArgument({"text": ["The response text must not be blank"]})
    return str(text).strip()


@coursereviews.aggregate
class ReviewResponse:
    review_id = Identifier(required=True, unique=True)
    teacher_id = Identifier(required=True)
    text = Text(required=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def write(cls, review_id, teacher_id, text):
        text = validate_text(text)
        now = datetime.now(UTC)
        response = cls(
            review_id=str(review_id),
            teacher_id=str(teacher_id),
            text=text,
            created_at=now,
            updated_at=now,
        )
        response.raise_(
            TeacherResponseAdded(
                response_id=str(response.id),
                review_id=str(review_id),
                teacher_id=str(teacher_id),
                added_at=now,
            )
        )
        return response

    def revise(self, text):
        self.text = validate_text(text)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            TeacherResponseEdited(
                response_id=str(self.id),
                review_id=str(self.review_id),
                teacher_id=str(self.teacher_id),
                edited_at=self.updated_at,
            )
        )


def find_response(review_id):
    """The response attached to ``review_id``, or None."""
    return fetch_first(ReviewResponse, review_id=str(review_id))
