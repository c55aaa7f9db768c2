from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from railcomplaints.api.dependencies import get_current_identity, get_password_hasher, get_settings
from railcomplaints.core.config import Settings
from railcomplaints.core.database import get_db
from railcomplaints.core.errors import NotFoundError, RailComplaintsError, as_http_exception
from railcomplaints.core.security import PasswordHasher
from railcomplaints.schemas.auth import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)
from railcomplaints.services import credential_store, session_issuer
from railcomplaints.services.session_issuer import Identity

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: RegisterRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Register a new user"""
    try:
        user = credential_store.create_user(
            db, hasher, user_data.email, user_data.password, user_data.name)
    except RailComplaintsError as exc:
        raise as_http_exception(exc)

    return {"message": "User created successfully", "user_id": user.id}


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
):
    """Login and get a bearer token"""
    try:
        token, user = session_issuer.login(
            db, hasher, settings, credentials.email, credentials.password)
    except RailComplaintsError as exc:
        raise as_http_exception(exc)

    return {"message": "Login successful", "token": token, "user": UserOut.model_validate(user)}


@router.get("/profile", response_model=ProfileResponse)
def profile(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Get the authenticated user's profile"""
    try:
        user = credential_store.get_by_id(db, identity.user_id)
        if user is None:
            raise NotFoundError("User not found")
    except RailComplaintsError as exc:
        raise as_http_exception(exc)
    return user
