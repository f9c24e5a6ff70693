"""RegisterUser: add an account to the directory.

Usernames and emails are unique. Credentials are handled by the identity
provider upstream, so registration only records profile and role.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from coursereviews.domain import coursereviews
from coursereviews.errors import Conflict
from coursereviews.user.user import User
from coursereviews.utils.queries import fetch_first

logger = structlog.get_logger(__name__)


def store_user(user, is_new):
    """Persist ``user``, reporting a username/email clash as ``Conflict``."""
    for field_name in ("username", "email"):
        existing = fetch_first(User, **{field_name: getattr(user, field_name)})
        if existing is not None and (is_new or str(existing.id) != str(user.id)):
            raise Conflict({field_name: [f"{field_name.capitalize()} {getattr(user, field_name)} is already taken"]})

    try:
        current_domain.repository_for(User).add(user)
    except ValidationError as exc:
        clashes = {"username", "email"} & set(getattr(exc, "messages", None) or {})
        if clashes:
            raise Conflict({name: exc.messages[name] for name in clashes}) from exc
        raise


@coursereviews.command(part_of="User")
class RegisterUser:
    username = String(required=True, max_length=50)
    email = String(required=True, max_length=100)
    role = String(required=True, max_length=20)
    full_name = String(max_length=100)
    department = String(max_length=100)


@coursereviews.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        user = User.register(
            username=command.username,
            email=command.email,
            role=command.role,
            full_name=command.full_name,
            department=command.department,
        )
        store_user(user, is_new=True)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
