"""
Maps workflow exceptions to HTTP responses
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from exceptions import (
    ValidationError,
    UnknownTemplateError,
    UnknownItemError,
    InvalidTransitionError,
    ConcurrentModificationError,
    RecordNotFoundError,
)
from logger import get_logger

logger = get_logger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "field": exc.field, "fields": exc.fields},
    )


async def unknown_template_handler(request: Request, exc: UnknownTemplateError):
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "template_name": exc.template_name},
    )


async def unknown_item_handler(request: Request, exc: UnknownItemError):
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "checklist_name": exc.checklist_name, "item_label": exc.item_label},
    )


async def record_not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "kind": exc.kind, "record_id": str(exc.record_id)},
    )


async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "current_state": exc.current_state,
            "attempted_state": exc.attempted_state,
            "reason": exc.reason,
        },
    )


async def concurrent_modification_handler(request: Request, exc: ConcurrentModificationError):
    logger.warning("Version conflict on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "kind": exc.kind,
            "record_id": str(exc.record_id),
            "expected_version": exc.expected_version,
            "actual_version": exc.actual_version,
        },
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UnknownTemplateError, unknown_template_handler)
    app.add_exception_handler(UnknownItemError, unknown_item_handler)
    app.add_exception_handler(RecordNotFoundError, record_not_found_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
    app.add_exception_handler(ConcurrentModificationError, concurrent_modification_handler)
