from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from identity_core.api.error import to_http_error
from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.auth import AuthenticatedUser, UserView
from identity_core.app.use_cases.users import (
    ChangePasswordCommand,
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from identity_core.depends import get_auth_config, get_current_user, get_unit_of_work

router = APIRouter(prefix="/users", tags=["User"])


class MessageResponse(BaseModel):
    message: str


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, description="New display name")
    bio: Optional[str] = Field(None, description="Biography, max 500 chars; null clears it")
    avatar_url: Optional[str] = Field(None, description="http(s) avatar URL; null clears it")


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    new_password_confirmation: Optional[str] = None


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserView)
async def get_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(current_user.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.patch("/me", status_code=status.HTTP_200_OK, response_model=UserView)
async def update_profile(
    request: UpdateProfileRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update the profile. Omitted fields are left unchanged.

    Raises:
        - 400 Bad Request: Empty or too long name, bio over 500 chars, or
          non-http(s) avatar URL
        - 404 Not Found: User no longer exists
    """
    use_case = UpdateProfileUseCase(uow)
    result = await use_case.execute(
        current_user.user_id,
        UpdateProfileCommand(**request.model_dump(exclude_unset=True)),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/me/password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
):
    """
    Change password of the authenticated user.

    Raises:
        - 400 Bad Request: Confirmation mismatch or weak new password
        - 401 Unauthorized: Current password does not verify
    """
    command = ChangePasswordCommand(
        current_password=request.current_password,
        new_password=request.new_password,
        new_password_confirmation=request.new_password_confirmation,
    )

    use_case = ChangePasswordUseCase(uow, config)
    result = await use_case.execute(current_user.user_id, command)

    if result.is_err():
        raise to_http_error(result.error)

    return MessageResponse(message="Password changed successfully")
