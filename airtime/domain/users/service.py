"""User service - Business logic for signup and profiles"""

import logging

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import User
from .repository import UserRepository
from .schemas import SignupRequest, UserUpdate

logger = logging.getLogger(__name__)


def describe_validation_error(error: ValidationError) -> str:
    """First validation problem as 'field: message'"""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "body"
    message = first.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{field}: {message}"


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def signup(self, payload) -> User:
        """
        Insert the profile row for a freshly created account.

        Raises:
            HTTPException(400): payload invalid or the id/email is taken
            HTTPException(500): anything else
        """
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        try:
            data = SignupRequest.model_validate(payload)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=describe_validation_error(e)) from e

        logger.info(f"📥 Signing up user {data.id} as {data.role}")
        try:
            user = self.repo.create_user(self.db, **data.model_dump())
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Signup rejected for {data.id}: duplicate id or email")
            raise HTTPException(
                status_code=400, detail="A user with this id or email already exists"
            ) from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating user profile: {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e

        logger.info(f"✅ User profile created: {user.id}")
        return user

    def list_users(self) -> list[User]:
        return self.repo.list_users(self.db)

    def get_user(self, user_id: str, current_user: User) -> User:
        if current_user.id != user_id and current_user.role != "admin":
            logger.warning(f"🚫 Access denied: User {current_user.id} tried to access {user_id}")
            raise HTTPException(status_code=403, detail="You can only access your own user data")
        user = self.repo.get_user(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def update_me(self, data: UserUpdate, current_user: User) -> User:
        try:
            return self.repo.update_user(
                self.db, current_user, **data.model_dump(exclude_unset=True)
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Email is already in use") from e
