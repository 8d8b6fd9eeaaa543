from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from userapi.api.dependencies import get_user_service
from userapi.api.errors import to_http_error
from userapi.core.errors import USER_NOT_FOUND
from userapi.models.user import User
from userapi.services.users_service import UserService

# POST/GET /users and GET/DELETE /users/{user_id}
# Delegates to UserService; failures are mapped by to_http_error()

router = APIRouter(tags=["users"])

Service = Annotated[UserService, Depends(get_user_service)]


class UserOut(BaseModel):
    id: str
    name: str
    email: str

    @staticmethod
    def from_user(user: User) -> UserOut:
        return UserOut(**user.to_dict())


class UserCreateIn(BaseModel):
    # Missing fields fall through to User validation.
    name: str | None = None
    email: str | None = None


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def post_user(payload: UserCreateIn, service: Service) -> UserOut:
    try:
        user = await service.create_user(
            name=payload.name or "", email=payload.email or ""
        )
    except Exception as e:
        raise to_http_error(e, "create user") from None
    return UserOut.from_user(user)


@router.get("/users", response_model=list[UserOut])
async def get_users(service: Service) -> list[UserOut]:
    try:
        users = await service.list_users()
    except Exception as e:
        raise to_http_error(e, "list users") from None
    return [UserOut.from_user(u) for u in users]


@router.get("/users/{user_id}", response_model=UserOut)
async def get_user(user_id: str, service: Service) -> UserOut:
    try:
        user = await service.get_user(user_id)
    except Exception as e:
        raise to_http_error(e, f"get user {user_id}") from None

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return UserOut.from_user(user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_user(user_id: str, service: Service) -> Response:
    try:
        await service.delete_user(user_id)
    except Exception as e:
        raise to_http_error(e, f"delete user {user_id}") from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)
