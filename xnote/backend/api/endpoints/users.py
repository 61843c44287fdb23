"""
Users API Endpoints.

Registration, login and profile endpoints. Responses never carry the
password or its hash.
"""

from fastapi import APIRouter

from xnote.backend.core.dependencies import BaseUrl, RequestId, UserServiceDep
from xnote.backend.schemas.base import ApiResponse
from xnote.backend.schemas.user import (
    UserLogin,
    UserProfileResponse,
    UserProfileUpdate,
    UserRegister,
    UserResponse,
)

router = APIRouter()


def _photo_url(base_url: str, photo: str | None) -> str | None:
    """Render a stored photo path as an absolute URL on this server."""
    if not photo:
        return None
    if photo.startswith(("http://", "https://")):
        return photo
    return f"{base_url}/{photo.lstrip('/')}"


@router.get(
    "",
    response_model=ApiResponse[list[UserResponse]],
    summary="List users",
)
async def list_users(
    service: UserServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[UserResponse]]:
    """List all users."""
    users = await service.list_users()
    return ApiResponse(data=[UserResponse.model_validate(user) for user in users])


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=201,
    summary="Register a user",
)
async def register(
    data: UserRegister,
    service: UserServiceDep,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    """Create an account."""
    user = await service.register(data)
    return ApiResponse(
        message="User registered successfully",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=ApiResponse[UserResponse],
    summary="Log in",
    description="Verify email and password. No session token is issued.",
)
async def login(
    data: UserLogin,
    service: UserServiceDep,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    """Check credentials."""
    user = await service.authenticate(data)
    return ApiResponse(message="Login successful", data=UserResponse.model_validate(user))


@router.get(
    "/profile/{email}",
    response_model=ApiResponse[UserProfileResponse],
    summary="Get a profile",
)
async def get_profile(
    email: str,
    service: UserServiceDep,
    base_url: BaseUrl,
    request_id: RequestId,
) -> ApiResponse[UserProfileResponse]:
    """Public profile of a user."""
    user = await service.get_profile(email)
    return ApiResponse(
        data=UserProfileResponse(
            username=user.username,
            email=user.email,
            photo=_photo_url(base_url, user.photo),
        )
    )


@router.put(
    "/profile/{email}",
    response_model=ApiResponse[UserResponse],
    summary="Update a profile",
)
async def update_profile(
    email: str,
    data: UserProfileUpdate,
    service: UserServiceDep,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    """Merge provided profile fields."""
    user = await service.update_profile(email, data)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserResponse.model_validate(user),
    )
