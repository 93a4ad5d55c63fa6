from fastapi import APIRouter, Depends

from auth.application.services import authenticate_user, change_password, register_user
from auth.interfaces.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from shared.config import Settings
from shared.dependencies import get_current_user, get_settings, get_user_service
from shared.responses import ApiResponse, ok
from users.application.dto import UserDto
from users.application.services import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserDto],
    response_model_exclude_none=True,
    status_code=201,
)
async def register(body: RegisterRequest, users: UserService = Depends(get_user_service)):
    user = await register_user(
        users,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        date_of_birth=body.date_of_birth,
    )
    return ok(user, "Account created")


@router.post("/login", response_model=ApiResponse[TokenResponse], response_model_exclude_none=True)
async def login(
    body: LoginRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    _, token = await authenticate_user(users, settings, email=body.email, password=body.password)
    return ok(TokenResponse(access_token=token))


@router.get("/me", response_model=ApiResponse[UserDto], response_model_exclude_none=True)
async def me(current_user: UserDto = Depends(get_current_user)):
    return ok(current_user)


@router.post(
    "/change-password", response_model=ApiResponse[UserDto], response_model_exclude_none=True
)
async def update_password(
    body: ChangePasswordRequest,
    current_user: UserDto = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = await change_password(
        users,
        user_id=current_user.id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return ok(user, "Password updated")
