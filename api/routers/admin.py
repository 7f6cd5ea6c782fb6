"""
Admin endpoints.

Handles registration, login and the dashboard.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_auth_service, get_catalog_service, require_admin
from api.exceptions import InternalError
from api.logging_config import get_logger
from api.schemas.admin import (
    AdminLogin,
    AdminPublic,
    AdminRegister,
    DashboardResponse,
    DashboardStats,
    LoginResponse,
    RegisterResponse,
)
from api.schemas.common import error_responses
from api.schemas.movie import MovieResponse
from api.services.auth import AuthService
from api.services.catalog import CatalogService
from movie_catalog.models import AdminData

router = APIRouter()
logger = get_logger("admin")


@router.post(
    "/admin/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 409, 500),
)
async def register_admin(
    request: AdminRegister,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Create an admin account.

    Fails with 409 if the username or email is taken.
    """
    try:
        admin = await auth.register(request.username, request.password, request.email)
    except SQLAlchemyError as e:
        logger.error(f"Registration failed: username={request.username} error={e}")
        raise InternalError("Registration failed")

    return RegisterResponse(
        message="Admin account created successfully",
        admin=AdminPublic.model_validate(admin),
    )


@router.post("/admin/login", response_model=LoginResponse, responses=error_responses(400, 401, 500))
async def login_admin(
    request: AdminLogin,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Exchange credentials for a bearer token valid for 24 hours.
    """
    try:
        token, admin = await auth.login(request.username, request.password)
    except SQLAlchemyError as e:
        logger.error(f"Login failed: username={request.username} error={e}")
        raise InternalError("Login failed")

    return LoginResponse(token=token, admin=AdminPublic.model_validate(admin))


@router.get("/admin/dashboard", response_model=DashboardResponse, responses=error_responses(401, 500))
async def dashboard(
    admin: AdminData = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Catalog counts and the five most recently added movies.
    """
    try:
        data = await catalog.dashboard()
    except SQLAlchemyError as e:
        logger.error(f"Dashboard failed: admin_id={admin.id} error={e}")
        raise InternalError("Failed to fetch dashboard data")

    return DashboardResponse(
        stats=DashboardStats(**data["stats"]),
        recent_movies=[MovieResponse.model_validate(m) for m in data["recent_movies"]],
    )
