"""
Authentication API endpoints.

Provides signup, login, logout, current-user and password reset endpoints
for the dashboard client.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fleetflow.app.db.session import get_db
from fleetflow.app.models.user import User
from fleetflow.app.models.enums import UserRole
from fleetflow.app.schemas.auth import (
    UserSignup, UserLogin, ForgotPasswordRequest, UserPublic, TokenResponse,
)
from fleetflow.app.schemas.common import DataResponse, MessageResponse
from fleetflow.app.core.exceptions import AppException, AuthenticationError, BusinessRuleError, ResourceNotFoundError
from fleetflow.app.core.security import get_password_hash, verify_password
from fleetflow.app.core.jwt import create_access_token
from fleetflow.app.core.dependencies import get_current_user, get_bearer_token
from fleetflow.app.core.token_revocation import revoke_token
from fleetflow.app.services.audit import log_event, log_user_action, client_ip, AuditAction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def build_token_response(user: User) -> TokenResponse:
    """Issue a JWT for `user` and wrap it with the public user fields."""
    jwt_payload = {
        "sub": user.email,
        "user_id": user.id,
        "role": user.role.value,
    }
    return TokenResponse(
        token=create_access_token(data=jwt_payload),
        user=UserPublic(id=user.id, name=user.name, email=user.email, role=user.role.value),
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    Role defaults to dispatcher; any value outside the four roles is rejected.
    """
    email = user_data.email.lower()

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise BusinessRuleError("User already exists with this email")

    if user_data.role is None:
        role = UserRole.DISPATCHER
    else:
        try:
            role = UserRole(user_data.role)
        except ValueError:
            raise BusinessRuleError("Invalid role")

    new_user = User(
        name=user_data.name,
        email=email,
        hashed_password=get_password_hash(user_data.password),
        role=role,
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    await log_event(
        db=db,
        action=AuditAction.USER_CREATED,
        actor_id=new_user.id,
        actor_email=new_user.email,
        metadata={"role": role.value},
        ip_address=client_ip(request),
    )
    logger.info("User %s signed up as %s", new_user.email, role.value)

    return build_token_response(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Logs successful and failed login attempts for security monitoring.
    """
    email = credentials.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        await log_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            actor_id=user.id if user else None,
            actor_email=email,
            metadata={"reason": "Invalid password" if user else "User not found"},
            ip_address=client_ip(request),
        )
        logger.warning("Failed login for %s", email)
        raise AuthenticationError("Invalid email or password")

    await log_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        actor_id=user.id,
        actor_email=user.email,
        ip_address=client_ip(request),
    )

    return build_token_response(user)


@router.get("/me", response_model=DataResponse[UserPublic])
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return DataResponse[UserPublic](
        data=UserPublic(
            id=current_user.id,
            name=current_user.name,
            email=current_user.email,
            role=current_user.role.value,
        )
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    token: str = Depends(get_bearer_token),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Revoke the presented token so it cannot be used again."""
    if not await revoke_token(token, current_user.id):
        raise AppException("Could not revoke token, try again", "ERR_LOGOUT", status.HTTP_503_SERVICE_UNAVAILABLE)
    await log_user_action(db, current_user, AuditAction.TOKEN_REVOKED, request=request)
    return MessageResponse(message="Logged out successfully")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Start a password reset.

    Email delivery is not wired up yet; the endpoint only confirms the
    account exists.
    """
    result = await db.execute(select(User).where(User.email == payload.email.lower()))
    if not result.scalar_one_or_none():
        raise ResourceNotFoundError("User")

    return MessageResponse(message="Password reset email sent (not implemented yet)")
