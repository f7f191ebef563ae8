"""User router - signup and profile endpoints"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import User
from .schemas import UserResponse, UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

# The frontend calls this right after the auth provider creates the account,
# so it carries its own {data} / {error} envelope and no bearer token.
signup_router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@signup_router.post("/signup")
async def signup(request: Request, service: UserService = Depends(get_user_service)):
    """Create the profile row for {id, email, name, role}"""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

    try:
        user = service.signup(payload)
    except HTTPException as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})

    data = jsonable_encoder(UserResponse.model_validate(user))
    return JSONResponse(status_code=200, content={"data": data})


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update name or email; the role is not self-editable"""
    return service.update_me(data, current_user)


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: User = Depends(require_roles("admin")),
    service: UserService = Depends(get_user_service),
):
    return service.list_users()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.get_user(user_id, current_user)
