"""Authorization gate: who may do what to which review, response or record.

``decide`` is a pure decision table: it looks at the operation, the acting
user and the ownership facts of the target resource, and nothing else.
Handlers call ``authorize`` which turns a denial into ``Forbidden``.
"""

from dataclasses import dataclass
from enum import Enum

from coursereviews.errors import Forbidden
from coursereviews.user.user import UserRole


class Operation(Enum):
    CREATE_REVIEW = "CreateReview"
    EDIT_REVIEW = "EditReview"
    DELETE_REVIEW = "DeleteReview"
    MODERATE_REVIEW = "ModerateReview"
    ADD_RESPONSE = "AddResponse"
    EDIT_RESPONSE = "EditResponse"
    DELETE_RESPONSE = "DeleteResponse"
    VIEW_MODERATION_QUEUE = "ViewModerationQueue"
    LIST_OWN_REVIEWS = "ListOwnReviews"
    LIST_TEACHER_REVIEWS = "ListTeacherReviews"
    MANAGE_COURSES = "ManageCourses"
    MANAGE_USERS = "ManageUsers"


class Decision(Enum):
    ALLOW = "Allow"
    DENY = "Deny"


@dataclass(frozen=True)
class Actor:
    id: str
    role: UserRole


@dataclass(frozen=True)
class Resource:
    """Ownership facts about the target of an operation.

    ``owner_id`` is the review author for review operations and the response
    author for response edits/deletes. ``course_teacher_id`` is the
    instructor of record of the review's course.
    """

    owner_id: str | None = None
    course_teacher_id: str | None = None


_NO_RESOURCE = Resource()

_ADMIN_ONLY = {
    Operation.MODERATE_REVIEW,
    Operation.VIEW_MODERATION_QUEUE,
    Operation.MANAGE_COURSES,
    Operation.MANAGE_USERS,
}


def _same(actor_id, other_id) -> bool:
    return other_id is not None and str(actor_id) == str(other_id)


def decide(operation: Operation, actor: Actor, resource: Resource = _NO_RESOURCE) -> Decision:
    role = UserRole(actor.role)

    if operation == Operation.CREATE_REVIEW:
        allowed = role == UserRole.STUDENT
    elif operation == Operation.EDIT_REVIEW:
        allowed = role == UserRole.STUDENT and _same(actor.id, resource.owner_id)
    elif operation == Operation.DELETE_REVIEW:
        allowed = role == UserRole.ADMIN or (role == UserRole.STUDENT and _same(actor.id, resource.owner_id))
    elif operation in _ADMIN_ONLY:
        allowed = role == UserRole.ADMIN
    elif operation == Operation.ADD_RESPONSE:
        allowed = role == UserRole.TEACHER and _same(actor.id, resource.course_teacher_id)
    elif operation in (Operation.EDIT_RESPONSE, Operation.DELETE_RESPONSE):
        allowed = role == UserRole.TEACHER and _same(actor.id, resource.owner_id)
    elif operation == Operation.LIST_OWN_REVIEWS:
        allowed = role == UserRole.STUDENT
    elif operation == Operation.LIST_TEACHER_REVIEWS:
        allowed = role == UserRole.TEACHER
    else:
        raise ValueError(f"Unknown operation: {operation}")

    return Decision.ALLOW if allowed else Decision.DENY


def authorize(operation: Operation, actor: Actor, resource: Resource = _NO_RESOURCE) -> None:
    if decide(operation, actor, resource) == Decision.DENY:
        raise Forbidden({"actor": [f"{UserRole(actor.role).value} {actor.id} may not perform {operation.value}"]})
