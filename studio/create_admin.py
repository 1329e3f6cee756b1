"""
Создание учетной записи администратора.

    art-studio-create-admin --username admin --password <пароль>
"""
import argparse
import getpass
import logging

from sqlalchemy.orm import Session

from studio.database import SessionLocal, init_db
from studio.models.user import User
from studio.utils.auth_utils import hash_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def create_admin(db: Session, username: str, password: str, reset_password: bool = False) -> User:
    """
    Создает администратора, если его еще нет.

    Args:
        db: сессия БД
        username: логин
        password: пароль в открытом виде (хранится только bcrypt-хеш)
        reset_password: заменить пароль существующего пользователя

    Returns:
        User: созданный или найденный пользователь
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Пароль должен быть не короче {MIN_PASSWORD_LENGTH} символов")

    user = db.query(User).filter(User.username == username).first()
    if user is None:
        user = User(username=username, password=hash_password(password))
        db.add(user)
        logger.info(f"Администратор {username} создан")
    elif reset_password:
        user.password = hash_password(password)
        logger.info(f"Пароль администратора {username} обновлен")
    else:
        logger.info(f"Администратор {username} уже существует")

    db.commit()
    db.refresh(user)
    return user


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    parser = argparse.ArgumentParser(description="Создание администратора")
    parser.add_argument("--username", default="admin", help="логин (по умолчанию admin)")
    parser.add_argument("--password", help="пароль; если не указан, будет запрошен")
    parser.add_argument("--reset-password", action="store_true", help="заменить пароль существующего администратора")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Пароль: ")

    init_db()
    db = SessionLocal()
    try:
        create_admin(db, args.username, password, reset_password=args.reset_password)
    except ValueError as e:
        logger.error(str(e))
        raise SystemExit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
