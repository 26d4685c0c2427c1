from __future__ import annotations

import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ingestion.repositories.articles import StorageError
from ingestion.services.container import NewsServices, build_services
from ingestion.settings import Settings, get_settings
from ingestion.tasks.collect import EmptyResultError
from ingestion.utils.logging import configure_logging, get_logger

from .models import ErrorResponse
from .routes import router

logger = get_logger("api.http")


def _load_env_file() -> None:
    # 프로젝트 루트의 .env 파일 명시적 로딩 (이미 설정된 환경 변수가 우선)
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def _error_response(settings: Settings, error: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=error, details=None if settings.is_production else str(exc))
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


def create_app(settings: Settings | None = None, services: NewsServices | None = None) -> FastAPI:
    """Build the HTTP app with an explicit service container on ``app.state``."""
    if settings is None and services is None:
        _load_env_file()
    config = services.settings if services is not None else (settings or get_settings())
    configure_logging(config.log_level, json_enabled=config.log_json)

    app = FastAPI(title="Credential News API", version="0.1.0")
    app.state.services = services or build_services(config)
    app.state.services.ensure_schema()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):  # noqa: ANN001
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            logger.info(
                "http.request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": status,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )

    @app.exception_handler(EmptyResultError)
    async def _empty_result(request: Request, exc: EmptyResultError) -> JSONResponse:
        return _error_response(config, str(exc), exc)

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("storage.error", extra={"path": request.url.path, "error": str(exc)})
        return _error_response(config, "Storage error", exc)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("http.unhandled", extra={"path": request.url.path})
        return _error_response(config, "Internal server error", exc)

    app.include_router(router)

    @app.get("/healthz", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app
