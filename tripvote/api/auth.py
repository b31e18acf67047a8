"""Authentication endpoints and the current-user dependencies."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, constr

from ..db import get_db
from ..errors import Conflict, Forbidden, Unauthorized
from ..models.auth_models import User, ROLE_EMPLOYEE
from ..auth.passwords import hash_password, verify_password
from ..auth.session import create_token, get_session, set_session_cookie, clear_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=50)
    email: EmailStr
    password: constr(min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str


class TokenResponse(BaseModel):
    success: bool = True
    token: str
    user: UserResponse


def _user_out(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email, role=user.role)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Get current user from the session token, or None if not authenticated."""
    session_data = get_session(request)
    if not session_data:
        return None

    user_id = session_data.get("user_id")
    if not user_id:
        return None

    return db.query(User).filter(User.id == user_id).first()


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise Unauthorized()
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        logger.warning("User %s (role %s) denied admin route", user.id, user.role)
        raise Forbidden(f"User role '{user.role}' is not authorized to access this route")
    return user


def _issue(response: Response, user: User) -> TokenResponse:
    token = create_token(user.id, user.role)
    set_session_cookie(response, token)
    return TokenResponse(token=token, user=_user_out(user))


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Register a new user with the employee role."""
    email = payload.email.lower().strip()
    if db.query(User).filter(User.email == email).first():
        raise Conflict("Email is already registered")

    user = User(
        name=payload.name,
        email=email,
        password_hash=hash_password(payload.password),
        role=ROLE_EMPLOYEE,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent registration with the same email
        db.rollback()
        raise Conflict("Email is already registered") from None
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.email)
    return _issue(response, user)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    email = payload.email.lower().strip()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise Unauthorized("Invalid credentials")
    return _issue(response, user)


@router.get("/me")
def get_me(user: User = Depends(require_user)):
    """Get current authenticated user."""
    return {"success": True, "user": _user_out(user)}


@router.post("/logout")
def logout(response: Response):
    """Log out the current user."""
    clear_session(response)
    return {"success": True, "message": "Logged out successfully"}
