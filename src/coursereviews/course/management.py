"""Course administration: create, update, (de)activate and delete courses.

Administrators only; the caller checks MANAGE_COURSES through the
authorization gate. Course codes are unique, and the instructor, when set,
must be an existing TEACHER account.

Deleting a course takes its reviews, their responses and its statistics
record with it.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.course.course import Course
from coursereviews.domain import coursereviews
from coursereviews.errors import Conflict, InvalidArgument
from coursereviews.review.removal import remove_reviews
from coursereviews.review.review import Review
from coursereviews.statistics.aggregator import discard
from coursereviews.user.user import User, UserRole
from coursereviews.utils.queries import fetch_all, fetch_first, get_or_not_found

logger = structlog.get_logger(__name__)


def _check_teacher(teacher_id):
    if not teacher_id:
        return None
    teacher = get_or_not_found(User, teacher_id, "teacher")
    if teacher.role != UserRole.TEACHER.value:
        raise InvalidArgument({"teacher_id": [f"User {teacher_id} is not a teacher"]})
    return str(teacher.id)


def _store_course(course, is_new):
    existing = fetch_first(Course, code=course.code)
    if existing is not None and (is_new or str(existing.id) != str(course.id)):
        raise Conflict({"code": [f"Course code {course.code} is already in use"]})

    try:
        current_domain.repository_for(Course).add(course)
    except ValidationError as exc:
        if "code" in (getattr(exc, "messages", None) or {}):
            raise Conflict({"code": exc.messages["code"]}) from exc
        raise


@coursereviews.command(part_of="Course")
class CreateCourse:
    name = String(required=True, max_length=150)
    code = String(required=True, max_length=20)
    course_type = String(required=True, max_length=20)
    teacher_id = Identifier()
    description = Text()
    department = String(max_length=100)
    semester = String(max_length=20)
    credits = Integer(min_value=0)


@coursereviews.command(part_of="Course")
class UpdateCourse:
    course_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    code = String(required=True, max_length=20)
    course_type = String(required=True, max_length=20)
    teacher_id = Identifier()
    description = Text()
    department = String(max_length=100)
    semester = String(max_length=20)
    credits = Integer(min_value=0)


@coursereviews.command(part_of="Course")
class ActivateCourse:
    course_id = Identifier(required=True)


@coursereviews.command(part_of="Course")
class DeactivateCourse:
    course_id = Identifier(required=True)


@coursereviews.command(part_of="Course")
class DeleteCourse:
    course_id = Identifier(required=True)


def _details(command):
    return dict(
        name=command.name,
        code=command.code,
        course_type=command.course_type,
        teacher_id=_check_teacher(command.teacher_id),
        description=command.description,
        department=command.department,
        semester=command.semester,
        credits=command.credits,
    )


@coursereviews.command_handler(part_of=Course)
class CourseManagementHandler:
    @handle(CreateCourse)
    def create_course(self, command):
        course = Course.create(**_details(command))
        _store_course(course, is_new=True)
        logger.info("Course created", course_id=str(course.id), code=course.code)
        return str(course.id)

    @handle(UpdateCourse)
    def update_course(self, command):
        course = get_or_not_found(Course, command.course_id, "course")
        course.update_details(**_details(command))
        _store_course(course, is_new=False)
        logger.info("Course updated", course_id=str(course.id), code=course.code)

    @handle(ActivateCourse)
    def activate_course(self, command):
        course = get_or_not_found(Course, command.course_id, "course")
        course.activate()
        current_domain.repository_for(Course).add(course)
        logger.info("Course activated", course_id=str(course.id))

    @handle(DeactivateCourse)
    def deactivate_course(self, command):
        course = get_or_not_found(Course, command.course_id, "course")
        course.deactivate()
        current_domain.repository_for(Course).add(course)
        logger.info("Course deactivated", course_id=str(course.id))

    @handle(DeleteCourse)
    def delete_course(self, command):
        course = get_or_not_found(Course, command.course_id, "course")
        course_id = str(course.id)

        reviews = fetch_all(Review, course_id=course_id)
        remove_reviews(reviews, recompute_statistics=False)
        discard(course_id)
        current_domain.repository_for(Course)._dao.delete(course)

        logger.info("Course deleted", course_id=course_id, removed_reviews=len(reviews))
