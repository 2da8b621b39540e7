"""Translate domain and request errors into the API's JSON envelope.

    ValidationError / RequestValidationError  → 400
    ObjectNotFoundError                       → 404
    ExpectedVersionError                      → 409
    anything else                             → 500
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.utils.logging import current_environment, get_logger

logger = get_logger(__name__)


def _field_errors(messages) -> list[dict]:
    if not isinstance(messages, dict):
        return [{"field": None, "message": str(messages)}]

    errors = []
    for field, field_messages in messages.items():
        if not isinstance(field_messages, list | tuple):
            field_messages = [field_messages]
        for message in field_messages:
            errors.append({"field": None if field == "_entity" else field, "message": str(message)})
    return errors


def _first_message(messages, default) -> str:
    errors = _field_errors(messages)
    return errors[0]["message"] if errors else default


def _validation_response(errors: list[dict], message: str | None = None) -> JSONResponse:
    if message is None:
        message = errors[0]["message"] if len(errors) == 1 else "Validation error"
    return JSONResponse(status_code=400, content={"success": False, "message": message, "errors": errors})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _validation_response(_field_errors(exc.messages))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors, missing = [], []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        field = ".".join(str(part) for part in error["loc"][1:]) or None
        errors.append({"field": field, "message": error["msg"]})
        if error["type"] == "missing":
            missing.append(field)

    if missing and len(missing) == len(errors):
        return _validation_response(errors, message=f"Missing required fields: {', '.join(missing)}")
    return _validation_response(errors)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = getattr(exc, "messages", None) or (exc.args[0] if exc.args else None)
    return JSONResponse(
        status_code=404,
        content={"success": False, "message": _first_message(messages, "Not found")},
    )


async def conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification rejected", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=409,
        content={
            "success": False,
            "message": "The resource was modified by another request. Please retry.",
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)

    content = {"success": False, "message": "Internal server error"}
    if current_environment() != "production":
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, conflict_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
