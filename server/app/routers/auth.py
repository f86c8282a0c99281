from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth.client import AuthClient, AuthError, complete_password_reset
from app.auth.deps import get_current_profile, get_current_user
from app.auth.session import Profile, is_admin_identity
from app.core.db import get_db
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    PasswordResetRequest,
    RecoveryRequest,
    TokenResponse,
    WhoAmIResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    client = AuthClient(db)
    try:
        session = client.sign_in_with_password(payload.email, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return TokenResponse(access_token=session.access_token, expires_at=session.expires_at)


@router.get("/whoami", response_model=WhoAmIResponse)
def whoami(
    user: User = Depends(get_current_user),
    profile: Profile = Depends(get_current_profile),
) -> WhoAmIResponse:
    return WhoAmIResponse(
        id=user.id,
        user=user.email,
        full_name=user.full_name,
        role=profile.role,
        is_admin=is_admin_identity(user.id, profile.role),
    )


@router.post("/recover", status_code=status.HTTP_202_ACCEPTED)
def request_password_recovery(payload: RecoveryRequest, db: Session = Depends(get_db)) -> dict[str, str]:
    AuthClient(db).reset_password_for_email(payload.email, redirect_to=payload.redirect_to)
    # Same answer whether or not the address is registered.
    return {"detail": "If that email is registered, a reset link is on its way."}


@router.post("/reset-password", response_model=TokenResponse)
def reset_password(payload: PasswordResetRequest, db: Session = Depends(get_db)) -> TokenResponse:
    client = AuthClient(db)
    try:
        complete_password_reset(client, payload.code, payload.password, payload.password_confirm)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    session = client.get_session()
    return TokenResponse(access_token=session.access_token, expires_at=session.expires_at)
