"""
Auth Router - user registration, login and token introspection.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from ..auth import PasswordHasher, TokenIssuer, get_password_hasher, get_token_issuer
from ..db import get_db
from ..errors import AuthenticationFailed, BadInput, InvalidToken
from ..models import User
from ..repository import UserRepository
from ..schemas import AuthenticationRequest, AuthenticationResponse, UserCreate, UserResponse
from ..services import AuthenticationManager, AuthenticationService, RegistrationService
from ..utils.event_logger import log_auth_event

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def get_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_registration_service(
    repository: UserRepository = Depends(get_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegistrationService:
    return RegistrationService(repository, hasher)


def get_authentication_service(
    repository: UserRepository = Depends(get_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthenticationService:
    return AuthenticationService(repository, AuthenticationManager(repository, hasher), issuer)


def get_current_user(
    repository: UserRepository = Depends(get_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise InvalidToken("missing bearer token")
    token = authorization.split(" ", 1)[1].strip()

    claims = issuer.verify(token)
    user = repository.find_by_username(claims["sub"])
    if not user:
        raise InvalidToken("token subject no longer exists")
    return user


@router.post("/register", response_model=UserResponse)
def register(
    payload: UserCreate,
    request: Request,
    service: RegistrationService = Depends(get_registration_service),
):
    try:
        user = service.register(payload)
    except BadInput as e:
        log_auth_event("register_failure", payload.username, request, reason=type(e).__name__)
        raise

    log_auth_event("register_success", user.username, request, user_id=user.id)
    return user


@router.post("/login", response_model=AuthenticationResponse)
def login(
    credentials: AuthenticationRequest,
    request: Request,
    service: AuthenticationService = Depends(get_authentication_service),
):
    try:
        response = service.authenticate(credentials)
    except AuthenticationFailed as e:
        log_auth_event("login_failure", credentials.username, request, reason=e.reason)
        raise

    log_auth_event("login_success", credentials.username, request)
    return response


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user
