"""Shared BDD fixtures and step definitions for the Course Reviews domain."""

import pytest
from coursereviews.errors import Conflict, Forbidden, InvalidArgument, NotFound
from coursereviews.review.listing import get_review
from coursereviews.review.review import Review
from coursereviews.statistics.course_statistics import get_course_statistics
from coursereviews.utils.queries import fetch_first
from pytest_bdd import given, parsers, then

_ERRORS = {
    "NotFound": NotFound,
    "Forbidden": Forbidden,
    "Conflict": Conflict,
    "InvalidArgument": InvalidArgument,
}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def people():
    """Username -> user id of everyone registered in the scenario."""
    return {}


@pytest.fixture()
def courses():
    """Course code -> course id."""
    return {}


def user_id(people, register_user, username, role="STUDENT"):
    if username not in people:
        people[username] = register_user(username, role=role)
    return people[username]


def review_of(people, username):
    return fetch_first(Review, user_id=people[username])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a course "{code}" taught by "{teacher}"'))
def course_taught_by(code, teacher, people, courses, register_user, create_course):
    courses[code] = create_course(code, teacher_id=user_id(people, register_user, teacher, role="TEACHER"))


@given(parsers.cfparse('a teacher "{username}"'))
def a_teacher(username, people, register_user):
    user_id(people, register_user, username, role="TEACHER")


@given(parsers.cfparse('student "{username}" reviewed "{code}" with {overall:f}'))
def reviewed(username, code, overall, people, courses, register_user, submit_review):
    submit_review(user_id(people, register_user, username), courses[code], overall=overall)


@given(parsers.cfparse('student "{username}" reviewed "{code}" with {overall:f} and it was approved'))
def reviewed_and_approved(username, code, overall, people, courses, register_user, submit_review, moderate):
    moderate(submit_review(user_id(people, register_user, username), courses[code], overall=overall))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{error_name}"'))
def request_fails(error_name, error):
    assert isinstance(error["exc"], _ERRORS[error_name])


@then(parsers.cfparse('the review by "{username}" is {status}'))
def review_status(username, status, people):
    assert review_of(people, username).status == status


@then(parsers.cfparse('"{code}" has {count:d} approved reviews'))
def approved_count(code, count, courses):
    assert get_course_statistics(courses[code]).total_reviews == count


@then(parsers.cfparse('the overall average of "{code}" is {average:f}'))
def overall_average(code, average, courses):
    assert get_course_statistics(courses[code]).avg_rating_overall == average


@then(parsers.cfparse('"{code}" has no overall average'))
def no_overall_average(code, courses):
    assert get_course_statistics(courses[code]).avg_rating_overall is None


@then(parsers.cfparse('the review by "{username}" shows the response "{text}"'))
def shows_response(username, text, people):
    assert get_review(review_of(people, username).id).teacher_response == text
