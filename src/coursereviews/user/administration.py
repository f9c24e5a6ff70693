"""Account administration: role changes, (de)activation and hard delete.

Administrators only; the caller checks MANAGE_USERS through the
authorization gate before dispatching.

Deleting a user cascades: their reviews go (recomputing the courses that
lose an approved review), so do the responses they wrote, and any course
they teach is left without an instructor.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.course.course import Course
from coursereviews.domain import coursereviews
from coursereviews.response.response import ReviewResponse
from coursereviews.review.removal import remove_reviews
from coursereviews.review.review import Review
from coursereviews.user.user import User
from coursereviews.utils.queries import fetch_all, get_or_not_found

logger = structlog.get_logger(__name__)


@coursereviews.command(part_of="User")
class ChangeUserRole:
    user_id = Identifier(required=True)
    role = String(required=True, max_length=20)


@coursereviews.command(part_of="User")
class ActivateUser:
    user_id = Identifier(required=True)


@coursereviews.command(part_of="User")
class DeactivateUser:
    user_id = Identifier(required=True)


@coursereviews.command(part_of="User")
class DeleteUser:
    user_id = Identifier(required=True)


@coursereviews.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(ChangeUserRole)
    def change_role(self, command):
        user = get_or_not_found(User, command.user_id, "user")
        previous = user.role
        user.change_role(command.role)
        current_domain.repository_for(User).add(user)
        logger.info("User role changed", user_id=str(user.id), previous_role=previous, role=user.role)

    @handle(ActivateUser)
    def activate(self, command):
        user = get_or_not_found(User, command.user_id, "user")
        user.activate()
        current_domain.repository_for(User).add(user)
        logger.info("User activated", user_id=str(user.id))

    @handle(DeactivateUser)
    def deactivate(self, command):
        user = get_or_not_found(User, command.user_id, "user")
        user.deactivate()
        current_domain.repository_for(User).add(user)
        logger.info("User deactivated", user_id=str(user.id))

    @handle(DeleteUser)
    def delete(self, command):
        user = get_or_not_found(User, command.user_id, "user")
        user_id = str(user.id)

        reviews = fetch_all(Review, user_id=user_id)
        removed_review_ids = {str(review.id) for review in reviews}
        recomputed = remove_reviews(reviews)

        response_repo = current_domain.repository_for(ReviewResponse)
        for response in fetch_all(ReviewResponse, teacher_id=user_id):
            if str(response.review_id) in removed_review_ids:
                continue
            response_repo._dao.delete(response)

        course_repo = current_domain.repository_for(Course)
        for course in fetch_all(Course, teacher_id=user_id):
            course.unassign_teacher()
            course_repo.add(course)

        current_domain.repository_for(User)._dao.delete(user)

        logger.info("User deleted", user_id=user_id, recomputed_courses=sorted(recomputed))
