"""Application tests for the EditReview command handler."""

import pytest
from coursereviews.errors import Forbidden, InvalidArgument, NotFound
from coursereviews.review.editing import EditReview
from coursereviews.review.review import ModerationStatus, Review
from coursereviews.statistics.course_statistics import get_course_statistics
from protean import current_domain


def _edit(review_id, actor_id, **overrides):
    values = {
        "review_id": review_id,
        "actor_id": actor_id,
        "rating_overall": 2.0,
        "comment": "Second thoughts after the final exam.",
    }
    values.update(overrides)
    current_domain.process(EditReview(**values), asynchronous=False)


class TestEditReview:
    def test_overwrites_content(self, student, course, submit_review):
        review_id = submit_review(student, course, rating_clarity=5.0)
        _edit(review_id, student, rating_material=3.0)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.ratings.overall == 2.0
        assert review.ratings.clarity is None
        assert review.ratings.material == 3.0
        assert review.comment == "Second thoughts after the final exam."

    def test_pending_stays_pending(self, student, course, submit_review):
        review_id = submit_review(student, course)
        _edit(review_id, student)
        assert current_domain.repository_for(Review).get(review_id).status == ModerationStatus.PENDING.value

    def test_rejected_goes_back_to_pending(self, student, course, submit_review, moderate):
        review_id = submit_review(student, course)
        moderate(review_id, "REJECTED", notes="Rude")
        _edit(review_id, student)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.status == ModerationStatus.PENDING.value
        assert review.moderation_notes is None

    def test_editing_approved_review_recomputes(self, student, course, submit_review, moderate):
        review_id = submit_review(student, course, overall=5.0)
        moderate(review_id)
        assert get_course_statistics(course).total_reviews == 1

        _edit(review_id, student)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.status == ModerationStatus.PENDING.value
        stats = get_course_statistics(course)
        assert stats.total_reviews == 0
        assert stats.avg_rating_overall is None

    def test_anonymous_kept_when_omitted(self, student, course, submit_review):
        review_id = submit_review(student, course, anonymous=False)
        _edit(review_id, student)
        assert current_domain.repository_for(Review).get(review_id).anonymous is False

    def test_unknown_review(self, student):
        with pytest.raises(NotFound):
            _edit("no-such-review", student)

    def test_unknown_review_reported_before_ownership(self, teacher):
        with pytest.raises(NotFound):
            _edit("no-such-review", teacher)

    def test_other_student_forbidden(self, student, course, register_user, submit_review):
        intruder = register_user("intruder")
        review_id = submit_review(student, course)
        with pytest.raises(Forbidden):
            _edit(review_id, intruder)

    def test_admin_cannot_edit(self, student, admin, course, submit_review):
        review_id = submit_review(student, course)
        with pytest.raises(Forbidden):
            _edit(review_id, admin)

    def test_unknown_actor_forbidden(self, student, course, submit_review):
        review_id = submit_review(student, course)
        with pytest.raises(Forbidden):
            _edit(review_id, "ghost")

    def test_ownership_checked_before_content(self, student, course, register_user, submit_review):
        intruder = register_user("intruder")
        review_id = submit_review(student, course)
        with pytest.raises(Forbidden):
            _edit(review_id, intruder, rating_overall=42.0)

    def test_invalid_content(self, student, course, submit_review):
        review_id = submit_review(student, course)
        with pytest.raises(InvalidArgument):
            _edit(review_id, student, comment="short")

    def test_invalid_edit_keeps_approval(self, student, course, submit_review, moderate):
        review_id = submit_review(student, course)
        moderate(review_id)
        with pytest.raises(InvalidArgument):
            _edit(review_id, student, rating_overall=-1.0)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.status == ModerationStatus.APPROVED.value
        assert get_course_statistics(course).total_reviews == 1
