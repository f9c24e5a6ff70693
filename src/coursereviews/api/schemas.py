"""Pydantic request/response schemas for the Course Reviews API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
Ratings and comments are validated by the domain, so a bad value surfaces as
the domain's 400 error rather than a schema error.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100)
    role: str
    full_name: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)


class ChangeRoleRequest(BaseModel):
    role: str


class CourseRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    code: str = Field(min_length=1, max_length=20)
    course_type: str
    teacher_id: str | None = None
    description: str | None = None
    department: str | None = Field(default=None, max_length=100)
    semester: str | None = Field(default=None, max_length=20)
    credits: int | None = Field(default=None, ge=0)


class ReviewRequest(BaseModel):
    course_id: str
    rating_overall: float | None = None
    rating_clarity: float | None = None
    rating_material: float | None = None
    rating_pedagogy: float | None = None
    comment: str | None = None
    anonymous: bool | None = None


class EditReviewRequest(BaseModel):
    rating_overall: float | None = None
    rating_clarity: float | None = None
    rating_material: float | None = None
    rating_pedagogy: float | None = None
    comment: str | None = None
    anonymous: bool | None = None  # omitted keeps the current setting


class ModerationRequest(BaseModel):
    status: str  # "APPROVED" or "REJECTED"
    notes: str | None = None


class TeacherResponseRequest(BaseModel):
    text: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class IdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ReviewCheckResponse(BaseModel):
    course_id: str
    reviewed: bool


class CountResponse(BaseModel):
    count: int


class UserSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    full_name: str | None = None
    department: str | None = None
    role: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCountsSchema(BaseModel):
    total: int
    active: int
    students: int
    teachers: int
    admins: int


class CourseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    course_type: str
    teacher_id: str | None = None
    description: str | None = None
    department: str | None = None
    semester: str | None = None
    credits: int | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CourseStatisticsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: str
    course_name: str
    course_code: str
    avg_rating_overall: float | None = None
    avg_rating_clarity: float | None = None
    avg_rating_material: float | None = None
    avg_rating_pedagogy: float | None = None
    total_reviews: int
    overall_average: float
    updated_at: datetime | None = None


class ReviewSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    review_id: str
    user_id: str
    course_id: str
    course_name: str | None = None
    course_code: str | None = None
    rating_overall: float
    rating_clarity: float | None = None
    rating_material: float | None = None
    rating_pedagogy: float | None = None
    comment: str
    anonymous: bool
    reviewer_name: str
    status: str
    moderation_notes: str | None = None
    teacher_response: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    moderated_at: datetime | None = None


class ReviewPageSchema(BaseModel):
    items: list[ReviewSchema]
    page: int
    size: int
    total: int
    total_pages: int
