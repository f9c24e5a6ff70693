"""Course aggregate: a course or a campus service that students can review.

The instructor is a weak reference (``teacher_id``): the course points at a
teacher but does not own the account, and clearing it never touches the user.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from coursereviews.domain import coursereviews
from coursereviews.errors import InvalidArgument


class CourseType(Enum):
    COURSE = "COURSE"
    SERVICE = "SERVICE"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidArgument({"course_type": [f"Invalid course type: {value}"]}) from None


@coursereviews.aggregate
class Course:
    name = String(required=True, max_length=150)
    code = String(required=True, max_length=20, unique=True)
    description = Text()
    course_type = String(choices=CourseType, required=True)
    teacher_id = Identifier()
    department = String(max_length=100)
    semester = String(max_length=20)
    credits = Integer(min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        name,
        code,
        course_type,
        teacher_id=None,
        description=None,
        department=None,
        semester=None,
        credits=None,
    ):
        now = datetime.now(UTC)
        return cls(
            name=name,
            code=code,
            course_type=CourseType.parse(course_type).value,
            teacher_id=teacher_id,
            description=description,
            department=department,
            semester=semester,
            credits=credits,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def update_details(
        self,
        name,
        code,
        course_type,
        teacher_id=None,
        description=None,
        department=None,
        semester=None,
        credits=None,
    ):
        """Replace the editable details wholesale, the way the admin form submits them."""
        self.name = name
        self.code = code
        self.course_type = CourseType.parse(course_type).value
        self.teacher_id = teacher_id
        self.description = description
        self.department = department
        self.semester = semester
        self.credits = credits
        self.updated_at = datetime.now(UTC)

    def unassign_teacher(self):
        self.teacher_id = None
        self.updated_at = datetime.now(UTC)

    def activate(self):
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)
