from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import Awaitable, Callable
import logging

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse

from app.api.handlers.deps import ApiDeps
from app.api.handlers.submissions import submit_application_handler
from app.api.schemas import ErrorResponse, HealthResponse, ReadyResponse

SUBMISSION_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    415: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def build_app(
    role: str,
    run_id: str,
    api_deps: ApiDeps | None = None,
    on_startup: Callable[[], Awaitable[None]] | None = None,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    logger = logging.getLogger("runtime")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        del app
        logger.info(
            "role started",
            extra={"role": role, "service": role, "run_id": run_id},
        )

        if on_startup is not None:
            await on_startup()

        yield

        if on_shutdown is not None:
            await on_shutdown()

        logger.info(
            "role stopped",
            extra={"role": role, "service": role, "run_id": run_id},
        )

    app = FastAPI(title="submission-intake", version="0.1.0", lifespan=lifespan)

    def _require_deps() -> ApiDeps:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        return api_deps

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", role=role, mode=_mode())

    @app.get("/healthz", response_class=PlainTextResponse, tags=["System"])
    async def healthz() -> str:
        return "ok"

    @app.get("/ready", response_model=ReadyResponse, tags=["System"])
    async def ready() -> ReadyResponse:
        deps = _require_deps()
        transports = [transport.name for transport in deps.intake.notifier.transports]
        return ReadyResponse(
            status="ready",
            role=role,
            mode=_mode(),
            record_store=deps.modes.get("record_store", "unknown"),
            storage=deps.modes.get("storage", "unknown"),
            email_transports=transports,
            override_active=bool(deps.intake.recipient_resolver.override_address),
        )

    @app.post(
        "/submissions",
        response_class=PlainTextResponse,
        responses=SUBMISSION_RESPONSES,
        tags=["Submissions"],
    )
    async def submit_application(
        identity: str | None = Form(default=None),
        classification: str | None = Form(default=None),
        notes: str | None = Form(default=None),
        file: UploadFile | None = File(default=None),
    ) -> PlainTextResponse:
        return await submit_application_handler(
            identity=identity,
            classification=classification,
            notes=notes,
            file=file,
            api_deps=_require_deps(),
        )

    @app.post(
        "/upload",
        response_class=PlainTextResponse,
        responses=SUBMISSION_RESPONSES,
        tags=["Submissions"],
    )
    async def upload_application_form(
        submitter_email: str | None = Form(default=None, alias="submitterEmail"),
        class_of_business: str | None = Form(default=None, alias="classOfBusiness"),
        more_info: str | None = Form(default=None, alias="moreInfo"),
        application_file: UploadFile | None = File(default=None, alias="applicationFile"),
    ) -> PlainTextResponse:
        return await submit_application_handler(
            identity=submitter_email,
            classification=class_of_business,
            notes=more_info,
            file=application_file,
            api_deps=_require_deps(),
        )

    def _mode() -> str:
        if api_deps is None:
            return "empty"
        if "stub" in api_deps.modes.values():
            return "local"
        return "live"

    return app
