"""
Обработчики ошибок (Exception Handlers) для API.

Все ошибки отдаются в едином формате:
    {"error": {"code": "...", "message": "...", "details": [...]}}

Сервисы выбрасывают ValueError, роутеры превращают его в APIError
через from_service_error(): "not found" в тексте -> 404, иначе -> 400.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from ..core.logging import get_logger
from .schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = get_logger(__name__)


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class APIError(Exception):
    """
    Базовый класс для всех API ошибок.

    Использование:
        raise APIError(code="NOT_FOUND", message="Project not found", status_code=404)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: list[dict] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Ресурс не найден (404)."""

    def __init__(self, message: str):
        super().__init__(
            code="NOT_FOUND", message=message, status_code=status.HTTP_404_NOT_FOUND
        )


class ValidationError_(APIError):
    """
    Ошибка валидации бизнес-логики (400).

    Использование:
        raise ValidationError_("Cannot delete the last project")
    """

    def __init__(self, message: str, details: list[dict] | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


def from_service_error(exc: ValueError) -> APIError:
    """
    Преобразовать ValueError из сервиса в APIError.

    Использование в роутере:
        try:
            ...
        except ValueError as e:
            raise from_service_error(e) from e
    """
    message = str(exc)
    if "not found" in message.lower():
        return NotFoundError(message)
    return ValidationError_(message)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


def _error_json(code: str, message: str, details: list[ErrorDetail] | None = None) -> dict:
    return ErrorResponse(error=ErrorBody(code=code, message=message, details=details)).model_dump()


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Преобразует APIError в единый формат ErrorResponse."""
    logger.warning(
        "API error", extra={"code": exc.code, "error": exc.message, "path": request.url.path}
    )

    details = None
    if exc.details:
        details = [ErrorDetail(field=d["field"], message=d["message"]) for d in exc.details]

    return JSONResponse(
        status_code=exc.status_code, content=_error_json(exc.code, exc.message, details)
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Обработчик для ошибок валидации Pydantic (422).

    loc вида ["body", "name"] превращается в поле "name",
    ["query", "range_weeks"] - в "range_weeks".
    """
    logger.warning("Validation error", extra={"errors": len(exc.errors())})

    details = []
    for error in exc.errors():
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"

        if len(field_path) > 1 and field_path[0] == "body":
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(
            ErrorDetail(field=str(field_name), message=error.get("msg", "Validation error"))
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_json("VALIDATION_ERROR", "Request validation failed", details),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Превышение лимита slowapi (429) в том же формате."""
    logger.warning(
        "Rate limit exceeded", extra={"path": request.url.path, "limit": str(exc.detail)}
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=_error_json(
            "RATE_LIMIT_EXCEEDED",
            f"Too many requests. Limit: {exc.detail}",
            [ErrorDetail(field="rate_limit", message=str(exc.detail))],
        ),
    )


def register_error_handlers(app) -> None:
    """
    Регистрирует все error handlers в приложении FastAPI.

    Вызывается из main.py.
    """
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)  # type: ignore[arg-type]

    logger.debug("Error handlers registered")
