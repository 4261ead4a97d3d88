# salon_api/auth.py

from dataclasses import dataclass
from datetime import datetime, timedelta
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from sqlmodel import Session
from salon_api import config
from salon_api.db import get_session
from salon_api.errors import Forbidden, Unauthenticated
from salon_api.models import User
from salon_api.schemas import UserRole

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


@dataclass(frozen=True)
class Principal:
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.admin


def create_access_token(data: dict, expires_minutes: int = config.ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


class IdentityProvider:
    """Turns a bearer token into the principal it was issued for."""

    def __init__(self, session: Session):
        self.session = session

    def authenticate(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
        except JWTError:
            raise Unauthenticated("Invalid token")

        subject = payload.get("sub")
        if subject is None:
            raise Unauthenticated("Invalid token")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            raise Unauthenticated("Invalid token")

        user = self.session.get(User, user_id)
        if user is None:
            raise Unauthenticated("User not found")

        try:
            role = UserRole(user.role)
        except ValueError:
            raise Unauthenticated("Unknown role")
        return Principal(id=user.id, role=role)


def get_current_principal(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> Principal:
    return IdentityProvider(session).authenticate(token)


def get_current_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden("Admin role required")
    return principal
