import argparse
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio.config import config
from studio.database import init_db
from studio.logging_config import setup_logging
from studio.routers import attendances, auth, customers, groups
from studio.utils.error_utils import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Запуск приложения
    log_file = setup_logging(config.logging.level, config.logging.directory, config.logging.file_prefix)
    logger.info("Приложение запущено")
    if log_file:
        logger.info(f"Лог пишется в {log_file}")

    init_db()

    yield

    # Остановка приложения
    logger.info("Приложение остановлено")


app = FastAPI(title="Арт-студия", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Роутеры
app.include_router(customers.router, prefix="/api", tags=["customers"])
app.include_router(groups.router, prefix="/api", tags=["groups"])
app.include_router(attendances.router, prefix="/api", tags=["attendances"])
app.include_router(auth.router, prefix="/api", tags=["auth"])


@app.get("/health")
async def health():
    return {"status": "ok"}


def parse_args():
    """Аргументы командной строки"""
    parser = argparse.ArgumentParser(description="Арт-студия: клиенты, группы, посещаемость")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="хост сервера (по умолчанию 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="порт сервера (по умолчанию 8000)")
    parser.add_argument("--reload", action="store_true", help="перезапуск при изменении кода")
    return parser.parse_args()


def run():
    import uvicorn

    args = parse_args()
    uvicorn.run(
        "studio.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )


if __name__ == "__main__":
    run()
