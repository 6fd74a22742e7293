"""Lab Supply 알림 FastAPI 앱: CORS, /api/v1, polling 스케줄러 lifespan."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.logging_config import configure_logging
from .config.settings import Settings, get_settings
from .container import Container, build_container
from .middleware.errors import register_exception_handlers
from .routes.v1 import router as v1_router


def setup_cors(app: FastAPI, settings: Settings) -> None:
    if settings.debug:
        # DEBUG: 모든 origin 허용 ("*" 와 credentials 동시 사용 불가)
        allow_origins = ["*"]
        allow_credentials = False
    else:
        allow_origins = settings.cors_origin_list
        allow_credentials = True

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """기동 시 DB 초기화·배지 갱신, (설정 시) polling 시작. 종료 시 polling drain 후 정리."""
        app.state.container = container or build_container(settings)
        await app.state.container.startup()
        yield
        await app.state.container.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="Lab Supply 요청 상태 polling, 알림 이력, 안읽음 배지 API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    setup_cors(app, settings)
    register_exception_handlers(app)
    app.include_router(v1_router)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": settings.app_name,
            "polling": app.state.container.poller.is_running,
        }

    return app


app = create_app()
