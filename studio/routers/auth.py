import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from studio.config import config
from studio.database import get_db
from studio.models.user import User
from studio.schemas.auth import AdminClaims, LoginRequest, TokenResponse, UserInfo
from studio.utils.auth_utils import (
    TOKEN_COOKIE_NAME,
    authenticate_user,
    create_access_token,
    require_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS_MESSAGE = "Неверные учетные данные"


@router.post("/auth/login", response_model=TokenResponse, tags=["auth"])
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Обмен логина и пароля на JWT. Токен также кладется в cookie."""
    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        logger.warning(f"Неудачная попытка входа: {credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE
        )

    expire_minutes = config.auth.token_expire_minutes
    access_token = create_access_token(
        data={"sub": str(user.id), "username": user.username},
        expires_delta=timedelta(minutes=expire_minutes)
    )

    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=access_token,
        httponly=True,
        max_age=expire_minutes * 60,
        samesite="lax"
    )

    logger.info(f"Вход выполнен: {user.username}")
    return {"token": access_token, "token_type": "bearer"}


@router.get("/auth/me", response_model=UserInfo, tags=["auth"])
async def get_user_info(admin: AdminClaims = Depends(require_admin), db: Session = Depends(get_db)):
    """Текущий администратор"""
    user = db.query(User).filter(User.id == admin.user_id).first()
    return {
        "id": user.id,
        "username": user.username,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


@router.post("/auth/logout", tags=["auth"])
async def logout(response: Response):
    """Выход (удаляет cookie с токеном)"""
    response.delete_cookie(key=TOKEN_COOKIE_NAME)
    return {"success": True}
