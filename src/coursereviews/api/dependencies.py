"""Request-scoped dependencies shared by the routers."""

from fastapi import Header, HTTPException

from coursereviews.authorization import Actor
from coursereviews.user.directory import resolve_actor
from coursereviews.utils.logging import bind_actor

ACTOR_HEADER = "X-User-Id"


async def current_actor(x_user_id: str | None = Header(default=None)) -> Actor:
    """The acting user, as authenticated upstream and passed in ``X-User-Id``."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail=f"Missing {ACTOR_HEADER} header")
    actor = resolve_actor(x_user_id)
    bind_actor(actor.id, actor.role.value)
    return actor
