import pytest
from coursereviews.api import course_router, register_error_handlers, review_router, user_router
from coursereviews.domain import coursereviews
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    app = FastAPI()

    # The TestClient serves requests from its own thread; records written by
    # earlier requests live in the shared providers and survive this context.
    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with coursereviews.domain_context():
            return await call_next(request)

    app.include_router(user_router)
    app.include_router(course_router)
    app.include_router(review_router)
    register_error_handlers(app)
    return TestClient(app)
