"""User account routes."""
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..application.services import UserService
from ..dependencies import get_user_service, require_token, require_user

router = APIRouter(prefix="/users", tags=["users"])


# Pydantic models for request validation
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str
    age: int = Field(0, ge=0)


class UserLogin(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    age: int | None = Field(None, ge=0)


class UserResponse(BaseModel):
    """Public view of a user - no password hash, no tokens."""
    id: str
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


@router.post("", status_code=201, response_model=AuthResponse)
def signup(data: UserCreate, service: UserService = Depends(get_user_service)):
    """Create an account and return it with its first token."""
    user, token = service.signup(data.name, data.email, data.password, data.age)
    return {"user": user, "token": token}


@router.post("/login", response_model=AuthResponse)
def login(data: UserLogin, service: UserService = Depends(get_user_service)):
    """Exchange email and password for a new token."""
    user, token = service.login(data.email, data.password)
    return {"user": user, "token": token}


@router.post("/logout")
def logout(request: Request, service: UserService = Depends(get_user_service)):
    """Revoke the token used for this request."""
    service.logout(require_user(request), require_token(request))
    return {"status": "ok"}


@router.post("/logoutAll")
def logout_all(request: Request, service: UserService = Depends(get_user_service)):
    """Revoke every token of the current user."""
    count = service.logout_all(require_user(request))
    return {"status": "ok", "revoked": count}


@router.get("/me", response_model=UserResponse)
def read_profile(request: Request, service: UserService = Depends(get_user_service)):
    """Get the current user's profile."""
    return service.get_profile(require_user(request))


@router.patch("/me", response_model=UserResponse)
def update_profile(
    request: Request,
    data: UserUpdate,
    service: UserService = Depends(get_user_service)
):
    """Update name, email, password or age."""
    updates = data.model_dump(exclude_unset=True)
    return service.update_profile(require_user(request), updates)


@router.delete("/me", response_model=UserResponse)
def delete_account(request: Request, service: UserService = Depends(get_user_service)):
    """Delete the current user along with their tasks."""
    return service.delete_account(require_user(request))
