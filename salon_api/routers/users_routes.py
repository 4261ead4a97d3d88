# salon_api/routers/users_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from salon_api.db import get_session
from salon_api.errors import DuplicateEmail, Unauthenticated
from salon_api.models import User
from salon_api.schemas import UserCreate, UserPublic, UserRole
from salon_api.auth import Principal, get_current_principal, hash_password

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(
    current: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
):
    user = session.get(User, current.id)
    if user is None:
        raise Unauthenticated("User not found")
    return user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    email = user.email.strip().lower()

    # 1) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == email)
    ).first()
    if existing is not None:
        raise DuplicateEmail()

    # 2) Create user in DB; admins are provisioned out of band
    db_user = User(
        email=email,
        password_hash=hash_password(user.password),
        role=UserRole.client.value,
        first_name=user.first_name.strip(),
        last_name=user.last_name.strip(),
        phone=user.phone.strip(),
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id

    return db_user
