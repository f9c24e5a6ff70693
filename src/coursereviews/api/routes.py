"""FastAPI routes for the Course Reviews domain.

Each route translates between Pydantic schemas (external contract) and
Protean commands or query functions (internal domain concepts). Role checks
that do not depend on a specific record (moderation, administration) are
made here through the authorization gate; ownership checks happen in the
command handlers.
"""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from coursereviews.api.dependencies import current_actor
from coursereviews.api.schemas import (
    ChangeRoleRequest,
    CountResponse,
    CourseRequest,
    CourseSchema,
    CourseStatisticsSchema,
    EditReviewRequest,
    IdResponse,
    ModerationRequest,
    RegisterUserRequest,
    ReviewCheckResponse,
    ReviewPageSchema,
    ReviewRequest,
    ReviewSchema,
    StatusResponse,
    TeacherResponseRequest,
    UserCountsSchema,
    UserSchema,
)
from coursereviews.authorization import Actor, Operation, authorize
from coursereviews.course import catalog
from coursereviews.course.management import (
    ActivateCourse,
    CreateCourse,
    DeactivateCourse,
    DeleteCourse,
    UpdateCourse,
)
from coursereviews.response.adding import AddTeacherResponse
from coursereviews.response.editing import DeleteTeacherResponse, EditTeacherResponse
from coursereviews.review import listing
from coursereviews.review.editing import EditReview
from coursereviews.review.moderation import ModerateReview
from coursereviews.review.removal import DeleteReview
from coursereviews.review.submission import SubmitReview
from coursereviews.statistics.course_statistics import get_course_statistics, top_rated_courses
from coursereviews.user import directory
from coursereviews.user.administration import ActivateUser, ChangeUserRole, DeactivateUser, DeleteUser
from coursereviews.user.registration import RegisterUser
from coursereviews.utils.queries import DEFAULT_PAGE_SIZE

user_router = APIRouter(prefix="/users", tags=["users"])
course_router = APIRouter(prefix="/courses", tags=["courses"])
review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _users(users):
    return [UserSchema.model_validate(user) for user in users]


def _courses(courses):
    return [CourseSchema.model_validate(course) for course in courses]


def _reviews(summaries):
    return [ReviewSchema.model_validate(summary) for summary in summaries]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@user_router.post("", status_code=201, response_model=IdResponse)
async def register_user(body: RegisterUserRequest) -> IdResponse:
    """Register a new account."""
    command = RegisterUser(
        username=body.username,
        email=body.email,
        role=body.role,
        full_name=body.full_name,
        department=body.department,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return IdResponse(id=user_id)


@user_router.get("", response_model=list[UserSchema])
async def list_users(role: str | None = None, actor: Actor = Depends(current_actor)) -> list[UserSchema]:
    authorize(Operation.MANAGE_USERS, actor)
    users = directory.list_users_by_role(role) if role else directory.list_users()
    return _users(users)


@user_router.get("/search", response_model=list[UserSchema])
async def search_users(term: str = "", actor: Actor = Depends(current_actor)) -> list[UserSchema]:
    authorize(Operation.MANAGE_USERS, actor)
    return _users(directory.search_users(term))


@user_router.get("/statistics", response_model=UserCountsSchema)
async def user_statistics(actor: Actor = Depends(current_actor)) -> UserCountsSchema:
    authorize(Operation.MANAGE_USERS, actor)
    return UserCountsSchema(**directory.user_counts())


@user_router.get("/{user_id}", response_model=UserSchema)
async def get_user(user_id: str, actor: Actor = Depends(current_actor)) -> UserSchema:
    """Users may read their own profile; administrators may read any."""
    if actor.id != user_id:
        authorize(Operation.MANAGE_USERS, actor)
    return UserSchema.model_validate(directory.get_user(user_id))


@user_router.patch("/{user_id}/role", response_model=StatusResponse)
async def change_user_role(user_id: str, body: ChangeRoleRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    authorize(Operation.MANAGE_USERS, actor)
    current_domain.process(ChangeUserRole(user_id=user_id, role=body.role), asynchronous=False)
    return StatusResponse()


@user_router.patch("/{user_id}/activate", response_model=StatusResponse)
async def activate_user(user_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    authorize(Operation.MANAGE_USERS, actor)
    current_domain.process(ActivateUser(user_id=user_id), asynchronous=False)
    return StatusResponse()


@user_router.patch("/{user_id}/deactivate", response_model=StatusResponse)
async def deactivate_user(user_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    authorize(Operation.MANAGE_USERS, actor)
    current_domain.process(DeactivateUser(user_id=user_id), asynchronous=False)
    return StatusResponse()


@user_router.delete("/{user_id}", response_model=StatusResponse)
async def delete_user(user_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    """Delete an account together with its reviews and responses."""
    authorize(Operation.MANAGE_USERS, actor)
    current_domain.process(DeleteUser(user_id=user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------
@course_router.get("", response_model=list[CourseSchema])
async def list_courses(course_type: str | None = None, department: str | None = None) -> list[CourseSchema]:
    """Active courses, optionally narrowed to one type or department."""
    if course_type:
        courses = catalog.list_courses_by_type(course_type)
    elif department:
        courses = catalog.list_courses_by_department(department)
    else:
        courses = catalog.list_active_courses()
    return _courses(courses)


@course_router.get("/search", response_model=list[CourseSchema])
async def search_courses(term: str = "") -> list[CourseSchema]:
    return _courses(catalog.search_courses(term))


@course_router.get("/departments", response_model=list[str])
async def list_departments() -> list[str]:
    return catalog.list_departments()


@course_router.get("/top-rated", response_model=list[CourseStatisticsSchema])
async def top_rated(limit: int = Query(default=10, ge=1, le=100)) -> list[CourseStatisticsSchema]:
    return [CourseStatisticsSchema.model_validate(view) for view in top_rated_courses(limit)]


@course_router.get("/recent", response_model=list[CourseSchema])
async def recent_courses(limit: int = Query(default=6, ge=1, le=100)) -> list[CourseSchema]:
    return _courses(catalog.recent_courses(limit))


@course_router.get("/teacher/{teacher_id}", response_model=list[CourseSchema])
async def courses_for_teacher(teacher_id: str) -> list[CourseSchema]:
    return _courses(catalog.list_courses_by_teacher(teacher_id))


@course_router.get("/{course_id}", response_model=CourseSchema)
async def get_course(course_id: str) -> CourseSchema:
    return CourseSchema.model_validate(catalog.get_course(course_id))


@course_router.get("/{course_id}/statistics", response_model=CourseStatisticsSchema)
async def course_statistics(course_id: str) -> CourseStatisticsSchema:
    return CourseStatisticsSchema.model_validate(get_course_statistics(course_id))


@course_router.post("", status_code=201, response_model=IdResponse)
async def create_course(body: CourseRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    authorize(Operation.MANAGE_COURSES, actor)
    course_id = current_domain.process(CreateCourse(**body.model_dump()), asynchronous=False)
    return IdResponse(id=course_id)


@course_router.put("/{course_id}", response_model=StatusResponse)
async def update_course(course_id: str, body: CourseRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    authorize(Operation.MANAGE_COURSES, actor)
    current_domain.process(UpdateCourse(course_id=course_id, **body.model_dump()), asynchronous=False)
    return StatusResponse()


@course_router.patch("/{course_id}/activate", response_model=StatusResponse)
async def activate_course(course_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    authorize(Operation.MANAGE_COURSES, actor)
    current_domain.process(ActivateCourse(course_id=course_id), asynchronous=False)
    return StatusResponse()


@course_router.patch("/{course_id}/deactivate", response_model=StatusResponse)
async def deactivate_course(course_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    authorize(Operation.MANAGE_COURSES, actor)
    current_domain.process(DeactivateCourse(course_id=course_id), asynchronous=False)
    return StatusResponse()


@course_router.delete("/{course_id}", response_model=StatusResponse)
async def delete_course(course_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    """Delete a course with its reviews, responses and statistics."""
    authorize(Operation.MANAGE_COURSES, actor)
    current_domain.process(DeleteCourse(course_id=course_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@review_router.get("/course/{course_id}", response_model=ReviewPageSchema)
async def approved_reviews_for_course(
    course_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ReviewPageSchema:
    """Approved reviews of a course, newest first."""
    result = listing.list_approved_reviews_for_course(course_id, page, size)
    return ReviewPageSchema(
        items=_reviews(result.items),
        page=result.page,
        size=result.size,
        total=result.total,
        total_pages=result.total_pages,
    )


@review_router.get("/my", response_model=list[ReviewSchema])
async def my_reviews(actor: Actor = Depends(current_actor)) -> list[ReviewSchema]:
    authorize(Operation.LIST_OWN_REVIEWS, actor)
    return _reviews(listing.list_reviews_for_user(actor.id))


@review_router.get("/teacher/my", response_model=list[ReviewSchema])
async def reviews_of_my_courses(actor: Actor = Depends(current_actor)) -> list[ReviewSchema]:
    authorize(Operation.LIST_TEACHER_REVIEWS, actor)
    return _reviews(listing.list_reviews_for_teacher_courses(actor.id))


@review_router.get("/pending", response_model=list[ReviewSchema])
async def pending_reviews(actor: Actor = Depends(current_actor)) -> list[ReviewSchema]:
    authorize(Operation.VIEW_MODERATION_QUEUE, actor)
    return _reviews(listing.list_pending_reviews())


@review_router.get("/pending/count", response_model=CountResponse)
async def pending_review_count(actor: Actor = Depends(current_actor)) -> CountResponse:
    authorize(Operation.VIEW_MODERATION_QUEUE, actor)
    return CountResponse(count=listing.count_pending_reviews())


@review_router.get("/recent", response_model=list[ReviewSchema])
async def recent_reviews(limit: int = Query(default=5, ge=1, le=100)) -> list[ReviewSchema]:
    return _reviews(listing.recent_approved_reviews(limit))


@review_router.get("/check", response_model=ReviewCheckResponse)
async def check_reviewed(course_id: str, actor: Actor = Depends(current_actor)) -> ReviewCheckResponse:
    """Whether the acting user has already reviewed ``course_id``."""
    return ReviewCheckResponse(
        course_id=course_id,
        reviewed=listing.has_user_reviewed_course(actor.id, course_id),
    )


@review_router.get("/{review_id}", response_model=ReviewSchema)
async def get_review(review_id: str) -> ReviewSchema:
    return ReviewSchema.model_validate(listing.get_review(review_id))


@review_router.post("", status_code=201, response_model=IdResponse)
async def submit_review(body: ReviewRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    """Submit a review; it stays invisible until an administrator approves it."""
    command = SubmitReview(
        user_id=actor.id,
        course_id=body.course_id,
        rating_overall=body.rating_overall,
        rating_clarity=body.rating_clarity,
        rating_material=body.rating_material,
        rating_pedagogy=body.rating_pedagogy,
        comment=body.comment,
        anonymous=True if body.anonymous is None else body.anonymous,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return IdResponse(id=review_id)


@review_router.put("/{review_id}", response_model=StatusResponse)
async def edit_review(review_id: str, body: EditReviewRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    """Rewrite a review; it goes back to moderation."""
    command = EditReview(
        review_id=review_id,
        actor_id=actor.id,
        rating_overall=body.rating_overall,
        rating_clarity=body.rating_clarity,
        rating_material=body.rating_material,
        rating_pedagogy=body.rating_pedagogy,
        comment=body.comment,
        anonymous=body.anonymous,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def delete_review(review_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = DeleteReview(review_id=review_id, actor_id=actor.id, actor_role=actor.role.value)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.put("/{review_id}/moderate", response_model=StatusResponse)
async def moderate_review(review_id: str, body: ModerationRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    """Approve or reject a review."""
    authorize(Operation.MODERATE_REVIEW, actor)
    command = ModerateReview(review_id=review_id, status=body.status, notes=body.notes)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.post("/{review_id}/response", status_code=201, response_model=StatusResponse)
async def add_response(review_id: str, body: TeacherResponseRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = AddTeacherResponse(review_id=review_id, teacher_id=actor.id, text=body.text)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.put("/{review_id}/response", response_model=StatusResponse)
async def edit_response(review_id: str, body: TeacherResponseRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = EditTeacherResponse(review_id=review_id, teacher_id=actor.id, text=body.text)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.delete("/{review_id}/response", response_model=StatusResponse)
async def delete_response(review_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = DeleteTeacherResponse(review_id=review_id, teacher_id=actor.id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
