from datetime import datetime

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime | None = None


class WhoAmIResponse(BaseModel):
    id: int
    user: EmailStr
    full_name: str | None = None
    role: str | None = None
    is_admin: bool = False


class RecoveryRequest(BaseModel):
    email: EmailStr
    redirect_to: str | None = None


class PasswordResetRequest(BaseModel):
    code: str
    password: str
    password_confirm: str
