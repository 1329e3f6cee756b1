from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from studio.config import config

DATABASE_URL = config.database["url"]

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # FastAPI обрабатывает запросы в пуле потоков
    connect_args["check_same_thread"] = False

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    echo=config.database.get("echo", False),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite по умолчанию не проверяет внешние ключи."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    """Сессия БД на время одного запроса."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Создает все таблицы, если их еще нет."""
    # Модели должны быть импортированы до create_all
    import studio.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
