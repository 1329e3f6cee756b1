from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class AdminClaims(BaseModel):
    """Права, подтвержденные токеном; передаются в защищенные обработчики явно."""
    user_id: int
    username: str


class UserInfo(BaseModel):
    id: int
    username: str
    created_at: Optional[str] = None
