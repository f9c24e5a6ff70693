"""Read-side queries over the user directory, and actor resolution."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from coursereviews.authorization import Actor
from coursereviews.errors import Forbidden
from coursereviews.user.user import User, UserRole
from coursereviews.utils.queries import fetch_all, get_or_not_found


def get_user(user_id) -> User:
    return get_or_not_found(User, user_id, "user")


def list_users() -> list[User]:
    return sorted(fetch_all(User), key=lambda u: u.username.lower())


def list_users_by_role(role) -> list[User]:
    """Active users holding ``role``."""
    role = UserRole.parse(role)
    return sorted(fetch_all(User, role=role.value, is_active=True), key=lambda u: u.username.lower())


def search_users(term) -> list[User]:
    """Case-insensitive substring match on username, email and full name."""
    needle = (term or "").strip().lower()
    if not needle:
        return list_users()
    return [
        user
        for user in list_users()
        if any(needle in (value or "").lower() for value in (user.username, user.email, user.full_name))
    ]


def user_counts() -> dict[str, int]:
    users = fetch_all(User)
    active = [u for u in users if u.is_active]
    return {
        "total": len(users),
        "active": len(active),
        "students": sum(1 for u in active if u.role == UserRole.STUDENT.value),
        "teachers": sum(1 for u in active if u.role == UserRole.TEACHER.value),
        "admins": sum(1 for u in active if u.role == UserRole.ADMIN.value),
    }


def actor_for(user: User) -> Actor:
    """The ``Actor`` a loaded user acts as; deactivated accounts cannot act."""
    if not user.is_active:
        raise Forbidden({"actor": [f"User {user.id} is unknown or inactive"]})
    return Actor(id=str(user.id), role=UserRole(user.role))


def resolve_actor(user_id) -> Actor:
    """Turn an authenticated user id into an ``Actor``.

    Unknown and deactivated accounts cannot act on anything.
    """
    try:
        user = current_domain.repository_for(User).get(str(user_id))
    except ObjectNotFoundError:
        raise Forbidden({"actor": [f"User {user_id} is unknown or inactive"]}) from None
    return actor_for(user)
