"""Authentication routes.

This module handles sign up, sign in, password reset and e-mail
verification, and provides the session dependencies used by every other
router.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import (
    APP_BASE_URL,
    ENABLE_EMAIL_VERIFICATION,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS,
)
from core.dependencies import UserManagerDep
from core.exceptions import DuplicateError, InvalidTokenError, RateLimitExceededError
from core.rate_limit import get_client_ip, password_reset_limiter, register_limiter
from models.user import UserModel
from schemas.base import MessageResponse
from schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    RegisteredUser,
    RegisterRequest,
    RegisterResponse,
    VerifyEmailRequest,
)
from utils.converters import model_to_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Missing credentials are reported as 401 by get_current_user, not 403
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(seconds=SESSION_MAX_AGE_SECONDS)
    to_encode.update({"exp": datetime.now(pytz.utc) + expires_delta})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _unauthorized(detail: str = "Authentication required") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    user_manager: UserManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserModel:
    """Resolve the session from the bearer token or the session cookie.

    Returns:
        The signed-in user.

    Raises:
        HTTPException: 401 if there is no valid session.
    """
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise _unauthorized()
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid authentication credentials")

    user_id = payload.get("sub")
    if user_id is None:
        raise _unauthorized("Invalid authentication credentials")
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def require_roles(*roles: str) -> Callable[..., UserModel]:
    """Build a dependency that admits only the given roles.

    No session is a 401, a session with another role is a 403.
    """

    def dependency(current_user: UserModel = Depends(get_current_user)) -> UserModel:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action.",
            )
        return current_user

    return dependency


def _rate_limited(limiter) -> Callable[[Request], None]:
    def dependency(request: Request) -> None:
        try:
            limiter.check(get_client_ip(request))
        except RateLimitExceededError as e:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=str(e),
                headers={"Retry-After": str(e.retry_after)},
            )

    return dependency


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_rate_limited(register_limiter))],
    summary="Sign up",
)
def register(req: RegisterRequest, user_manager: UserManagerDep) -> RegisterResponse:
    """Register a student or teacher account.

    Raises:
        HTTPException: 400 if the e-mail is taken, 429 when rate limited.
    """
    try:
        user, token = user_manager.register(
            email=req.email,
            password=req.password,
            name=req.name,
            school=req.school,
            role=req.role,
        )
    except DuplicateError:
        # Same message whatever the reason, to avoid account probing
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Registration failed. Check your details and try again.",
        )

    if token:
        logger.info("Verification link for %s: %s/verify-email?token=%s", user.email, APP_BASE_URL, token)
        message = "Registration complete. Check your e-mail to verify your account."
    else:
        message = "Registration complete."
    return RegisterResponse(
        message=message,
        user=RegisteredUser(id=user.id, email=user.email, name=user.name),
    )


@router.post("/login", response_model=LoginResponse, summary="Sign in")
def login(req: LoginRequest, response: Response, user_manager: UserManagerDep) -> LoginResponse:
    """Login with e-mail and password.

    The session token is returned in the body and set as an httpOnly cookie.

    Raises:
        HTTPException: 401 for bad credentials, 403 for an unverified e-mail.
    """
    user = user_manager.authenticate(req.email, req.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if ENABLE_EMAIL_VERIFICATION and user.email_verified is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email address is not verified",
        )

    token = create_access_token(data={"sub": user.id, "role": user.role})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s signed in", user.id)
    return LoginResponse(user=model_to_user(user), token=token, expires_in=SESSION_MAX_AGE_SECONDS)


@router.post("/logout", response_model=MessageResponse, summary="Sign out")
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Bearer tokens are dropped client-side."""
    response.delete_cookie(SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    current_user: UserModel = Depends(get_current_user),
) -> CurrentUserResponse:
    return CurrentUserResponse(user=model_to_user(current_user))


@router.post(
    "/reset-password/request",
    response_model=MessageResponse,
    dependencies=[Depends(_rate_limited(password_reset_limiter))],
    summary="Request a password reset",
)
def request_password_reset(
    req: PasswordResetRequest, user_manager: UserManagerDep
) -> MessageResponse:
    """Always answers the same way whether or not the account exists."""
    token = user_manager.create_password_reset_token(req.email)
    if token:
        logger.info("Password reset link for %s: %s/reset-password?token=%s", req.email, APP_BASE_URL, token)
    return MessageResponse(
        message="If the address is registered, a password reset link has been sent."
    )


@router.post(
    "/reset-password/confirm",
    response_model=MessageResponse,
    summary="Reset password",
)
def confirm_password_reset(
    req: PasswordResetConfirmRequest, user_manager: UserManagerDep
) -> MessageResponse:
    try:
        user_manager.reset_password(req.token, req.password)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="Password has been reset.")


@router.post("/verify-email", response_model=MessageResponse, summary="Verify e-mail")
def verify_email(req: VerifyEmailRequest, user_manager: UserManagerDep) -> MessageResponse:
    try:
        user_manager.verify_email(req.token)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="Email verified.")
