from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.models.users import CreateUserRequest, ErrorResponse, UpdateUserRequest, UserResponse
from app.routers.utils import get_user_service, parse_user_id
from app.services.users import UserService

router = APIRouter(prefix="/api/users", tags=["users"])

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post("", status_code=status.HTTP_201_CREATED, responses=_ERRORS)
async def create_user(
    data: CreateUserRequest,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.register(data)
    return UserResponse.from_user(user)


@router.get("", responses=_ERRORS)
async def list_users(user_service: UserService = Depends(get_user_service)) -> List[UserResponse]:
    return [UserResponse.from_user(user) for user in await user_service.get_many()]


@router.get("/{raw_user_id}", responses=_ERRORS)
async def get_user(
    raw_user_id: str,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.get(parse_user_id(raw_user_id))
    return UserResponse.from_user(user)


@router.put("/{raw_user_id}", responses=_ERRORS)
async def update_user(
    raw_user_id: str,
    data: UpdateUserRequest,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.update(parse_user_id(raw_user_id), data)
    return UserResponse.from_user(user)


@router.delete("/{raw_user_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_ERRORS)
async def delete_user(
    raw_user_id: str,
    user_service: UserService = Depends(get_user_service),
) -> Response:
    await user_service.delete(parse_user_id(raw_user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
