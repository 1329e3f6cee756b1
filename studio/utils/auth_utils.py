from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from studio.config import config
from studio.database import get_db
from studio.models.user import User
from studio.schemas.auth import AdminClaims

# Настройки JWT
SECRET_KEY = config.auth.secret_key
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = config.auth.token_expire_minutes
TOKEN_COOKIE_NAME = config.auth.cookie_name

bearer_scheme = HTTPBearer(auto_error=False)


def _to_bcrypt_secret(password: str) -> bytes:
    """bcrypt учитывает только первые 72 байта пароля."""
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(_to_bcrypt_secret(password), bcrypt.gensalt(rounds=12))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))
    except ValueError:
        # В базе лежит не bcrypt-хеш
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Создает JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _credentials_exception(detail: str = "Требуется авторизация") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str) -> AdminClaims:
    """Проверяет подпись и срок действия токена"""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _credentials_exception("Недействительный токен")

    user_id = payload.get("sub")
    username = payload.get("username")
    if user_id is None or username is None:
        raise _credentials_exception("Недействительный токен")

    return AdminClaims(user_id=int(user_id), username=username)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password):
        return None
    return user


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> AdminClaims:
    """
    Токен берется из заголовка Authorization или из cookie.
    Одного наличия cookie недостаточно: токен проверяется, пользователь должен существовать.
    """
    token = credentials.credentials if credentials else auth_token
    if not token:
        raise _credentials_exception()

    claims = verify_token(token)
    user = db.query(User).filter(User.id == claims.user_id).first()
    if user is None:
        raise _credentials_exception("Пользователь не найден")

    return claims
