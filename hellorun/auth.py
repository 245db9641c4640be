"""
Session-based authentication context.

The login flow lives elsewhere; it stores the user id in the signed session
cookie. These dependencies resolve that id to the acting user.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from hellorun.constants.roles import RoleName
from hellorun.database import get_db
from hellorun.exceptions import AuthenticationRequired, AuthorizationError
from hellorun.models.user import User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: str
    email_verified: bool

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(id=user.id, role=user.role, email_verified=bool(user.email_verified))


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[CurrentUser]:
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()
    if user is None:
        logger.warning(f"Session references unknown user {user_id}")
        return None
    return CurrentUser.from_user(user)


def ensure_author(user: Optional[CurrentUser]) -> CurrentUser:
    if user is None:
        raise AuthenticationRequired()
    if not user.email_verified:
        raise AuthenticationRequired("Please verify your email before writing blog posts.")
    return user


def ensure_admin(user: Optional[CurrentUser]) -> CurrentUser:
    if user is None:
        raise AuthenticationRequired()
    if not user.is_admin:
        raise AuthorizationError("Admin access required.", required_role=RoleName.ADMIN.value)
    return user


async def require_author(user: Optional[CurrentUser] = Depends(get_current_user)) -> CurrentUser:
    return ensure_author(user)


async def require_admin(user: Optional[CurrentUser] = Depends(get_current_user)) -> CurrentUser:
    return ensure_admin(user)
