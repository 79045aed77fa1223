"""HTTP middleware for request logging and tracing."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.logging import generate_request_id, get_logger, request_id_var

logger = get_logger("api.requests")

# Служебные пути не логируем, чтобы не засорять логи
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})
REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Логирует каждый HTTP запрос одной строкой.

    Request ID берётся из заголовка X-Request-ID (если клиент его прислал)
    или генерируется, кладётся в contextvar (попадает во все логи запроса)
    и возвращается в ответе.

    Пример лога (JSON):
    {
        "level": "INFO",
        "logger": "api.requests",
        "message": "Request completed",
        "request_id": "3f2a9c1e",
        "extra": {"method": "PUT", "path": "/api/tasks/7", "status": 200, "duration_ms": 12}
    }
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()

        fields = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                fields["duration_ms"] = int((time.perf_counter() - start_time) * 1000)
                logger.error("Request failed", extra={**fields, "error": str(e)}, exc_info=True)
                raise

            fields["duration_ms"] = int((time.perf_counter() - start_time) * 1000)
            response.headers[REQUEST_ID_HEADER] = request_id

            if request.url.path not in QUIET_PATHS:
                fields["status"] = response.status_code
                if response.status_code < 400:
                    logger.info("Request completed", extra=fields)
                else:
                    logger.warning("Request completed", extra=fields)
            return response
        finally:
            request_id_var.reset(token)
