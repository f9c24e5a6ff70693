"""EditTeacherResponse and DeleteTeacherResponse: the author manages their response.

Only the teacher who wrote the response may change or withdraw it, even
after the course has moved to another instructor.
"""

import structlog
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.authorization import Operation, Resource, authorize
from coursereviews.domain import coursereviews
from coursereviews.errors import not_found
from coursereviews.response.response import ReviewResponse, find_response
from coursereviews.user.directory import resolve_actor

logger = structlog.get_logger(__name__)


@coursereviews.command(part_of="ReviewResponse")
class EditTeacherResponse:
    review_id = Identifier(required=True)
    teacher_id = Identifier(required=True)
    text = Text()


@coursereviews.command(part_of="ReviewResponse")
class DeleteTeacherResponse:
    review_id = Identifier(required=True)
    teacher_id = Identifier(required=True)


def _load_for_author(operation, review_id, teacher_id):
    response = find_response(review_id)
    if response is None:
        raise not_found("response", review_id)
    actor = resolve_actor(teacher_id)
    authorize(operation, actor, Resource(owner_id=str(response.teacher_id)))
    return response


@coursereviews.command_handler(part_of=ReviewResponse)
class TeacherResponseHandler:
    @handle(EditTeacherResponse)
    def edit_response(self, command):
        response = _load_for_author(Operation.EDIT_RESPONSE, command.review_id, command.teacher_id)

        response.revise(command.text)
        current_domain.repository_for(ReviewResponse).add(response)

        logger.info("Teacher response edited", review_id=str(response.review_id))

    @handle(DeleteTeacherResponse)
    def delete_response(self, command):
        response = _load_for_author(Operation.DELETE_RESPONSE, command.review_id, command.teacher_id)

        current_domain.repository_for(ReviewResponse)._dao.delete(response)

        logger.info("Teacher response deleted", review_id=str(response.review_id))
