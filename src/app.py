"""Course Reviews FastAPI application.

Processes commands synchronously via HTTP. Every request runs inside the
``coursereviews`` domain context, with the acting user bound to the log
context for the duration of the request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from pyproject.toml:
#   - "test" / unset → in-memory database
#   - "production"   → PostgreSQL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursereviews.domain import coursereviews
from coursereviews.utils.logging import bind_request, clear_context

coursereviews.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Course Reviews API",
    description="Course and service reviews with moderation and rating statistics",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context and a fresh log context for each request."""
    request_id = bind_request(request.method, request.url.path, request.headers.get("X-Request-Id"))
    try:
        with coursereviews.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from coursereviews.api import (  # noqa: E402
    course_router,
    register_error_handlers,
    review_router,
    user_router,
)

app.include_router(user_router)
app.include_router(course_router)
app.include_router(review_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": coursereviews.name}})
