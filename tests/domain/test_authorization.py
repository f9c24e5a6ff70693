"""Tests for the authorization decision table."""

import pytest
from coursereviews.authorization import Actor, Decision, Operation, Resource, authorize, decide
from coursereviews.errors import Forbidden
from coursereviews.user.user import UserRole

STUDENT = Actor(id="stu-1", role=UserRole.STUDENT)
OTHER_STUDENT = Actor(id="stu-2", role=UserRole.STUDENT)
TEACHER = Actor(id="tea-1", role=UserRole.TEACHER)
OTHER_TEACHER = Actor(id="tea-2", role=UserRole.TEACHER)
ADMIN = Actor(id="adm-1", role=UserRole.ADMIN)


class TestReviewOperations:
    @pytest.mark.parametrize(
        "actor, expected",
        [(STUDENT, Decision.ALLOW), (TEACHER, Decision.DENY), (ADMIN, Decision.DENY)],
    )
    def test_only_students_create_reviews(self, actor, expected):
        assert decide(Operation.CREATE_REVIEW, actor) == expected

    def test_author_may_edit(self):
        assert decide(Operation.EDIT_REVIEW, STUDENT, Resource(owner_id="stu-1")) == Decision.ALLOW

    def test_other_student_may_not_edit(self):
        assert decide(Operation.EDIT_REVIEW, OTHER_STUDENT, Resource(owner_id="stu-1")) == Decision.DENY

    def test_admin_may_not_edit(self):
        assert decide(Operation.EDIT_REVIEW, ADMIN, Resource(owner_id="stu-1")) == Decision.DENY

    def test_author_may_delete(self):
        assert decide(Operation.DELETE_REVIEW, STUDENT, Resource(owner_id="stu-1")) == Decision.ALLOW

    def test_admin_may_delete_any_review(self):
        assert decide(Operation.DELETE_REVIEW, ADMIN, Resource(owner_id="stu-1")) == Decision.ALLOW

    def test_teacher_may_not_delete(self):
        assert decide(Operation.DELETE_REVIEW, TEACHER, Resource(owner_id="tea-1")) == Decision.DENY

    @pytest.mark.parametrize(
        "actor, expected",
        [(STUDENT, Decision.DENY), (TEACHER, Decision.DENY), (ADMIN, Decision.ALLOW)],
    )
    def test_only_admins_moderate(self, actor, expected):
        assert decide(Operation.MODERATE_REVIEW, actor) == expected


class TestResponseOperations:
    def test_course_teacher_may_add(self):
        decision = decide(Operation.ADD_RESPONSE, TEACHER, Resource(course_teacher_id="tea-1"))
        assert decision == Decision.ALLOW

    def test_other_teacher_may_not_add(self):
        decision = decide(Operation.ADD_RESPONSE, OTHER_TEACHER, Resource(course_teacher_id="tea-1"))
        assert decision == Decision.DENY

    def test_nobody_may_add_when_course_has_no_teacher(self):
        assert decide(Operation.ADD_RESPONSE, TEACHER, Resource()) == Decision.DENY

    def test_student_matching_id_may_not_add(self):
        decision = decide(Operation.ADD_RESPONSE, STUDENT, Resource(course_teacher_id="stu-1"))
        assert decision == Decision.DENY

    @pytest.mark.parametrize("operation", [Operation.EDIT_RESPONSE, Operation.DELETE_RESPONSE])
    def test_author_manages_response(self, operation):
        assert decide(operation, TEACHER, Resource(owner_id="tea-1")) == Decision.ALLOW
        assert decide(operation, OTHER_TEACHER, Resource(owner_id="tea-1")) == Decision.DENY
        assert decide(operation, ADMIN, Resource(owner_id="tea-1")) == Decision.DENY


class TestAdministrativeOperations:
    @pytest.mark.parametrize(
        "operation",
        [Operation.VIEW_MODERATION_QUEUE, Operation.MANAGE_COURSES, Operation.MANAGE_USERS],
    )
    def test_admin_only(self, operation):
        assert decide(operation, ADMIN) == Decision.ALLOW
        assert decide(operation, STUDENT) == Decision.DENY
        assert decide(operation, TEACHER) == Decision.DENY

    def test_listing_own_reviews_is_for_students(self):
        assert decide(Operation.LIST_OWN_REVIEWS, STUDENT) == Decision.ALLOW
        assert decide(Operation.LIST_OWN_REVIEWS, TEACHER) == Decision.DENY

    def test_listing_course_reviews_is_for_teachers(self):
        assert decide(Operation.LIST_TEACHER_REVIEWS, TEACHER) == Decision.ALLOW
        assert decide(Operation.LIST_TEACHER_REVIEWS, ADMIN) == Decision.DENY


class TestAuthorize:
    def test_allowed_operation_passes(self):
        authorize(Operation.CREATE_REVIEW, STUDENT)

    def test_denied_operation_raises_forbidden(self):
        with pytest.raises(Forbidden) as exc:
            authorize(Operation.MODERATE_REVIEW, STUDENT)
        assert "ModerateReview" in exc.value.messages["actor"][0]

    def test_ids_are_compared_as_strings(self):
        assert decide(Operation.EDIT_REVIEW, Actor(id="42", role=UserRole.STUDENT), Resource(owner_id=42)) == (
            Decision.ALLOW
        )
