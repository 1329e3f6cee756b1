import logging
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Внутренняя ошибка сервера"


def handle_validation_error(
    message: Union[str, Exception],
    field: Optional[str] = None
) -> HTTPException:
    """
    Ошибка проверки входных данных.

    Args:
        message: текст ошибки или исключение ValidationError
        field: имя поля, не прошедшего проверку (необязательно)

    Returns:
        HTTPException: 400 Bad Request
    """
    detail = str(message)
    if field:
        detail = f"{field}: {detail}"

    logger.warning(f"Ошибка валидации: {detail}")

    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail
    )


def handle_not_found_error(
    entity_type: str,
    entity_id
) -> HTTPException:
    """
    Сущность не найдена.

    Args:
        entity_type: тип сущности (например 'Клиент', 'Группа')
        entity_id: идентификатор

    Returns:
        HTTPException: 404 Not Found
    """
    detail = f"{entity_type} (id: {entity_id}) не найден(а)"
    logger.warning(f"Не найдено: {detail}")

    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail
    )


def _format_request_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(messages) or "Некорректный запрос"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = _format_request_validation_error(exc)
    logger.warning(f"Ошибка валидации запроса {request.method} {request.url.path}: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": detail},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Подробности только в лог, клиенту общий текст
    logger.error(f"Необработанная ошибка {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Все ошибки API отдаются в виде {"error": "..."}."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
