from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from app.api.comics import router as comics_router
from app.core.config import get_settings
from app.core.errors import build_error
from app.services.request_context import (
    bind_request_id,
    generate_request_id,
    get_request_id,
    log_event,
)


def _json_safe_validation_errors(errors: Any) -> Any:
    return jsonable_encoder(
        errors,
        custom_encoder={
            BaseException: lambda value: str(value),
        },
    )


def _request_id_headers(request: Request) -> dict[str, str] | None:
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    return {"X-Request-ID": request_id} if request_id else None


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=logging.INFO)

    application = FastAPI(
        title="SnowBunny Comic Creator",
        version="0.1.0",
    )
    application.mount(
        "/static",
        StaticFiles(directory=str(settings.static_dir)),
        name="static",
    )
    application.include_router(comics_router)

    @application.middleware("http")
    async def request_context_middleware(
        request: Request,
        call_next,
    ) -> Response:
        request_id = (request.headers.get("X-Request-ID") or "").strip() or generate_request_id()
        request.state.request_id = request_id
        start = time.perf_counter()

        with bind_request_id(request_id):
            log_event(
                event="request.start",
                path=request.url.path,
                method=request.method,
            )

            response = None
            try:
                response = await call_next(request)
                return response
            finally:
                latency_ms = round((time.perf_counter() - start) * 1000, 2)
                status_code = response.status_code if response is not None else 500
                if response is not None:
                    response.headers["X-Request-ID"] = request_id

                log_event(
                    event="request.end",
                    path=request.url.path,
                    method=request.method,
                    status_code=status_code,
                    latency_ms=latency_ms,
                )

    @application.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(settings.static_dir / "index.html")

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @application.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload: dict[str, Any] = detail
        else:
            payload = build_error(
                code=f"HTTP_{exc.status_code}",
                message=str(detail),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=payload,
            headers=_request_id_headers(request),
        )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        safe_errors = _json_safe_validation_errors(exc.errors())
        return JSONResponse(
            status_code=400,
            content=build_error(
                code="VALIDATION_ERROR",
                message="Invalid request body",
                detail={"errors": safe_errors},
            ),
            headers=_request_id_headers(request),
        )

    @application.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log_event(
            event="request.unhandled_error",
            path=request.url.path,
            reason=str(exc),
            level=logging.ERROR,
        )
        return JSONResponse(
            status_code=500,
            content=build_error(
                code="INTERNAL_SERVER_ERROR",
                message="Internal server error",
            ),
            headers=_request_id_headers(request),
        )

    return application


app = create_app()
