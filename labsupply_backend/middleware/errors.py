"""에러 핸들링: 404, 422, 503, 500 상태 코드 세분화."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ..services.exceptions import NotificationNotFound, StorageError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """전역 예외 핸들러 등록."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "요청 데이터 형식 오류",
                "errors": exc.errors(),
            },
        )

    @app.exception_handler(NotificationNotFound)
    async def not_found_handler(_: Request, exc: NotificationNotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"알림 없음: {exc.notification_id}"},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(_: Request, exc: StorageError):
        logger.error("Storage error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "로컬 저장소 오류. 잠시 후 다시 시도해 주세요."},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        detail = "서버 내부 오류"
        if request.app.state.container.settings.debug:
            detail = f"{type(exc).__name__}: {str(exc)}"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail},
        )
