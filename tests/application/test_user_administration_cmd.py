"""Application tests for user registration, administration and directory queries."""

import pytest
from coursereviews.authorization import Actor
from coursereviews.course.course import Course
from coursereviews.errors import Conflict, Forbidden, InvalidArgument, NotFound
from coursereviews.response.adding import AddTeacherResponse
from coursereviews.response.response import ReviewResponse
from coursereviews.review.review import Review
from coursereviews.statistics.course_statistics import get_course_statistics
from coursereviews.user.administration import ActivateUser, ChangeUserRole, DeactivateUser, DeleteUser
from coursereviews.user.directory import (
    get_user,
    list_users,
    list_users_by_role,
    resolve_actor,
    search_users,
    user_counts,
)
from coursereviews.user.user import User, UserRole
from coursereviews.utils.queries import fetch_all
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestRegisterUser:
    def test_register(self, register_user):
        user_id = register_user("erin", role="teacher", department="Physics")
        user = get_user(user_id)
        assert user.role == UserRole.TEACHER.value
        assert user.department == "Physics"
        assert user.is_active is True

    def test_invalid_role(self, register_user):
        with pytest.raises(InvalidArgument):
            register_user("frank", role="dean")

    def test_duplicate_username(self, register_user):
        register_user("gina")
        with pytest.raises(Conflict) as exc:
            register_user("gina", email="other@uni.example")
        assert "username" in exc.value.messages

    def test_duplicate_email(self, register_user):
        register_user("hank", email="shared@uni.example")
        with pytest.raises(Conflict) as exc:
            register_user("ivy", email="shared@uni.example")
        assert "email" in exc.value.messages


class TestAdministration:
    def test_change_role(self, student):
        _process(ChangeUserRole(user_id=student, role="TEACHER"))
        assert get_user(student).role == UserRole.TEACHER.value

    def test_change_role_invalid(self, student):
        with pytest.raises(InvalidArgument):
            _process(ChangeUserRole(user_id=student, role="wizard"))

    def test_change_role_unknown_user(self):
        with pytest.raises(NotFound):
            _process(ChangeUserRole(user_id="ghost", role="ADMIN"))

    def test_deactivate_and_activate(self, student):
        _process(DeactivateUser(user_id=student))
        assert get_user(student).is_active is False
        _process(ActivateUser(user_id=student))
        assert get_user(student).is_active is True


class TestDeleteUser:
    def test_removes_reviews_and_recomputes(self, student, register_user, course, submit_review, moderate):
        other = register_user("other")
        moderate(submit_review(student, course, overall=1.0))
        moderate(submit_review(other, course, overall=5.0))
        assert get_course_statistics(course).avg_rating_overall == 3.0

        _process(DeleteUser(user_id=student))

        assert [r.user_id for r in fetch_all(Review)] == [other]
        stats = get_course_statistics(course)
        assert stats.total_reviews == 1
        assert stats.avg_rating_overall == 5.0
        with pytest.raises(NotFound):
            get_user(student)

    def test_teacher_deletion_unassigns_courses_and_drops_responses(self, student, teacher, course, submit_review):
        review_id = submit_review(student, course)
        _process(AddTeacherResponse(review_id=review_id, teacher_id=teacher, text="Thanks for writing."))

        _process(DeleteUser(user_id=teacher))

        assert current_domain.repository_for(Course).get(course).teacher_id is None
        assert fetch_all(ReviewResponse) == []
        assert len(fetch_all(Review)) == 1

    def test_unknown_user(self):
        with pytest.raises(NotFound):
            _process(DeleteUser(user_id="ghost"))


class TestDirectoryQueries:
    def test_list_users_sorted_by_username(self, register_user):
        for name in ("zoe", "amy", "Max"):
            register_user(name)
        assert [u.username for u in list_users()] == ["amy", "Max", "zoe"]

    def test_list_by_role_only_active(self, register_user):
        active = register_user("t1", role="TEACHER")
        inactive = register_user("t2", role="TEACHER")
        register_user("s1")
        _process(DeactivateUser(user_id=inactive))

        assert [u.id for u in list_users_by_role("teacher")] == [active]

    def test_search(self, register_user):
        register_user("jdoe", full_name="John Doe")
        register_user("asmith", email="anna@physics.example")
        assert [u.username for u in search_users("DOE")] == ["jdoe"]
        assert [u.username for u in search_users("physics")] == ["asmith"]

    def test_counts(self, register_user):
        register_user("s1")
        inactive = register_user("s2")
        register_user("t1", role="TEACHER")
        register_user("a1", role="ADMIN")
        _process(DeactivateUser(user_id=inactive))

        assert user_counts() == {"total": 4, "active": 3, "students": 1, "teachers": 1, "admins": 1}


class TestResolveActor:
    def test_active_user(self, student):
        assert resolve_actor(student) == Actor(id=student, role=UserRole.STUDENT)

    def test_unknown_user(self):
        with pytest.raises(Forbidden):
            resolve_actor("ghost")

    def test_inactive_user(self, student):
        _process(DeactivateUser(user_id=student))
        with pytest.raises(Forbidden):
            resolve_actor(student)

    def test_user_aggregate_round_trip(self, student):
        assert isinstance(get_user(student), User)
