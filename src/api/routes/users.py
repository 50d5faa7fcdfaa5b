"""
User management API routes.

This module provides:
- GET /api/usuarios/me - Get current user profile
- PUT /api/usuarios/me - Update current user profile
- PUT /api/usuarios/me/senha - Change password
- DELETE /api/usuarios/me - Deactivate own account
- Admin-only listing, search, counts and status/role changes
"""

import logging

from fastapi import APIRouter, Query, status

from src.api.dependencies import AdminUser, CurrentUser, UserServiceDep
from src.models.enums import UserRole
from src.schemas.common import CountResponse, MessageResponse
from src.schemas.user import (
    EmailAvailabilityResponse,
    UserPasswordChange,
    UserResponse,
    UserRoleUpdate,
    UserStatusUpdate,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/usuarios", tags=["Users"])


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_current_user_profile(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Update current user profile",
    description="""
    Update name, email or password of the authenticated user.

    Only provided fields are changed. An empty password leaves the stored
    password untouched. The email must not be used by another user.
    """,
)
async def update_current_user_profile(
    update_data: UserUpdate,
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> UserResponse:
    """
    Update current user's profile.

    Raises:
        400: Email already in use
        422: Validation error
    """
    user = await user_service.update_user(current_user, update_data)
    return UserResponse.model_validate(user)


@router.put(
    "/me/senha",
    response_model=MessageResponse,
    summary="Change password",
)
async def change_password(
    password_data: UserPasswordChange,
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> MessageResponse:
    """
    Change the authenticated user's password.

    Raises:
        400: Current password is incorrect
    """
    await user_service.change_password(
        current_user,
        password_data.current_password,
        password_data.new_password,
    )
    return MessageResponse(message="Password changed successfully")


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate own account",
    description="""
    Deactivate the authenticated user. Users are never hard-deleted.

    Refused while the user still owns accounts, cards or transactions.
    """,
)
async def deactivate_current_user(
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> None:
    await user_service.deactivate(current_user)


# ============================================================================
# Admin endpoints
# ============================================================================


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List active users (admin)",
)
async def list_active_users(
    admin: AdminUser,
    user_service: UserServiceDep,
) -> list[UserResponse]:
    users = await user_service.list_active()
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/buscar",
    response_model=list[UserResponse],
    summary="Search users by name (admin)",
)
async def search_users(
    admin: AdminUser,
    user_service: UserServiceDep,
    nome: str = Query(min_length=1, max_length=100, description="Name substring"),
) -> list[UserResponse]:
    users = await user_service.search_by_name(nome)
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/perfil/{role}",
    response_model=list[UserResponse],
    summary="List users by role (admin)",
)
async def list_users_by_role(
    role: UserRole,
    admin: AdminUser,
    user_service: UserServiceDep,
) -> list[UserResponse]:
    users = await user_service.list_by_role(role)
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count active users (admin)",
)
async def count_active_users(
    admin: AdminUser,
    user_service: UserServiceDep,
) -> CountResponse:
    return CountResponse(count=await user_service.count_active())


@router.get(
    "/verificar-email",
    response_model=EmailAvailabilityResponse,
    summary="Check whether an email is registered (admin)",
)
async def check_email(
    admin: AdminUser,
    user_service: UserServiceDep,
    email: str = Query(min_length=3, max_length=150),
) -> EmailAvailabilityResponse:
    return EmailAvailabilityResponse(
        email=email, exists=await user_service.email_exists(email)
    )


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID (admin)",
)
async def get_user(
    user_id: int,
    admin: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    """
    Get any user by id.

    Raises:
        404: User not found
    """
    user = await user_service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}/status",
    response_model=UserResponse,
    summary="Activate or deactivate a user (admin)",
)
async def update_user_status(
    user_id: int,
    status_data: UserStatusUpdate,
    admin: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    user = await user_service.set_status(user_id, status_data.is_active)
    logger.info(f"Admin {admin.id} set user {user_id} active={status_data.is_active}")
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}/perfil",
    response_model=UserResponse,
    summary="Change a user's role (admin)",
)
async def update_user_role(
    user_id: int,
    role_data: UserRoleUpdate,
    admin: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    user = await user_service.set_role(user_id, role_data.role)
    logger.info(f"Admin {admin.id} set user {user_id} role={role_data.role.value}")
    return UserResponse.model_validate(user)
