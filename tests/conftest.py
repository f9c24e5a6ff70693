import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def coursereviews_bed():
    from coursereviews.domain import coursereviews
    from coursereviews.utils.db import drop_db, setup_db

    bed = DomainFixture(coursereviews)
    bed.setup()
    setup_db(coursereviews)
    yield bed
    drop_db(coursereviews)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(coursereviews_bed):
    with coursereviews_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared builders: persisted users, courses and reviews via commands
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_user():
    from protean import current_domain

    from coursereviews.user.registration import RegisterUser

    def _register(username, role="STUDENT", **overrides):
        values = {"username": username, "email": f"{username}@uni.example", "role": role}
        values.update(overrides)
        return current_domain.process(RegisterUser(**values), asynchronous=False)

    return _register


@pytest.fixture()
def create_course():
    from protean import current_domain

    from coursereviews.course.management import CreateCourse

    def _create(code, teacher_id=None, **overrides):
        values = {"name": f"Course {code}", "code": code, "course_type": "COURSE", "teacher_id": teacher_id}
        values.update(overrides)
        return current_domain.process(CreateCourse(**values), asynchronous=False)

    return _create


@pytest.fixture()
def submit_review():
    from protean import current_domain

    from coursereviews.review.submission import SubmitReview

    def _submit(user_id, course_id, overall=4.0, comment="Solid course with useful labs.", **overrides):
        values = {"user_id": user_id, "course_id": course_id, "rating_overall": overall, "comment": comment}
        values.update(overrides)
        return current_domain.process(SubmitReview(**values), asynchronous=False)

    return _submit


@pytest.fixture()
def moderate():
    from protean import current_domain

    from coursereviews.review.moderation import ModerateReview

    def _moderate(review_id, status="APPROVED", notes=None):
        current_domain.process(ModerateReview(review_id=review_id, status=status, notes=notes), asynchronous=False)

    return _moderate


@pytest.fixture()
def teacher(register_user):
    return register_user("teacher", role="TEACHER", full_name="Grace Hopper")


@pytest.fixture()
def student(register_user):
    return register_user("student", full_name="Ada Lovelace")


@pytest.fixture()
def admin(register_user):
    return register_user("admin", role="ADMIN")


@pytest.fixture()
def course(create_course, teacher):
    return create_course("CS101", teacher_id=teacher)
