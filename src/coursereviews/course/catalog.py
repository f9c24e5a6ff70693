"""Course catalogue queries."""

from coursereviews.course.course import Course, CourseType
from coursereviews.utils.queries import fetch_all, get_or_not_found, newest_first


def _by_name(courses):
    return sorted(courses, key=lambda c: (c.name.lower(), c.code))


def get_course(course_id) -> Course:
    return get_or_not_found(Course, course_id, "course")


def list_courses() -> list[Course]:
    return _by_name(fetch_all(Course))


def list_active_courses() -> list[Course]:
    return _by_name(fetch_all(Course, is_active=True))


def list_courses_by_type(course_type) -> list[Course]:
    course_type = CourseType.parse(course_type)
    return _by_name(fetch_all(Course, course_type=course_type.value, is_active=True))


def list_courses_by_department(department) -> list[Course]:
    return _by_name(fetch_all(Course, department=department, is_active=True))


def list_courses_by_teacher(teacher_id) -> list[Course]:
    return _by_name(fetch_all(Course, teacher_id=str(teacher_id), is_active=True))


def list_departments() -> list[str]:
    return sorted({c.department for c in fetch_all(Course) if c.department})


def search_courses(term) -> list[Course]:
    """Active courses whose name, code or description contains ``term`` (case-insensitive)."""
    needle = (term or "").strip().lower()
    courses = list_active_courses()
    if not needle:
        return courses
    return [
        course
        for course in courses
        if any(needle in (value or "").lower() for value in (course.name, course.code, course.description))
    ]


def recent_courses(limit=6) -> list[Course]:
    return newest_first(fetch_all(Course, is_active=True))[: max(limit, 0)]
