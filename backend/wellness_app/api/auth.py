# backend/wellness_app/api/auth.py

from fastapi import APIRouter, Depends
from jose import jwt
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import datetime, timedelta
from typing import Optional
import logging

from ..database import get_db
from ..models.user import User
from ..schemas.user import LoginIn, UserOut
from ..utils.auth import verify_password, normalize_email
from ..utils.errors import error_response
from ..core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def token_for_user(user: User) -> str:
    """Bearer token carrying ``{id, email, role}``."""
    return create_access_token(
        {"id": user.id, "email": user.email, "role": user.role.value}
    )


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    email = normalize_email(email)
    return db.query(User).filter(func.lower(User.email) == email).first()


@router.post("/login")
def login(credentials: LoginIn, db: Session = Depends(get_db)):
    user = get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        logger.info("Failed login for %s", normalize_email(credentials.email))
        raise error_response("Invalid credentials", code=401)

    logger.info("User %s logged in", user.id)
    return {
        "success": True,
        "token": token_for_user(user),
        "user": UserOut(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role.value,
        ).to_json(),
    }
