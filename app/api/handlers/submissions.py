from __future__ import annotations

import logging

from fastapi import UploadFile
from fastapi.responses import PlainTextResponse

from app.api.handlers.deps import ApiDeps
from app.domain.dto import SubmitApplicationCommand
from app.domain.error_taxonomy import http_status_for
from app.domain.errors import DomainDependencyError, DomainValidationError

COMPONENT_ID = "api.submit_application"

logger = logging.getLogger(__name__)


async def submit_application_handler(
    *,
    identity: str | None,
    classification: str | None,
    notes: str | None,
    file: UploadFile | None,
    api_deps: ApiDeps,
) -> PlainTextResponse:
    filename = ""
    content_type = ""
    payload = b""
    if file is not None:
        filename = file.filename or ""
        content_type = file.content_type or ""
        # One byte past the limit is enough to reject oversized uploads.
        payload = await file.read(api_deps.max_upload_bytes + 1)

    command = SubmitApplicationCommand(
        identity=identity or "",
        classification=classification or "",
        notes=notes or "",
        filename=filename,
        content_type=content_type,
        payload=payload,
    )
    try:
        result = await api_deps.intake.submit(command)
    except DomainValidationError as exc:
        logger.info("submission rejected: %s", exc, extra={"error_code": exc.code})
        return PlainTextResponse(str(exc), status_code=http_status_for(exc.code))
    except DomainDependencyError as exc:
        logger.exception("submission aborted", extra={"identity": command.identity, "error_code": exc.code})
        return PlainTextResponse("Server error", status_code=http_status_for(exc.code))
    except Exception:
        logger.exception("submission failed", extra={"identity": command.identity, "error_code": "internal_error"})
        return PlainTextResponse("Server error", status_code=http_status_for("internal_error"))

    return PlainTextResponse(result.message, status_code=200)
