"""HTTP error mapping.

Every error leaves the API as `{"error": "<message>"}` with a status that
depends on its type.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException

from storefront.errors import AccessDenied, PaymentGatewayError, first_message

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    message = first_message(exc.messages)
    logger.info("Request rejected", path=request.url.path, error=message)
    return error_response(400, message)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{location}: {errors[0].get('msg')}" if location else str(errors[0].get("msg"))
    else:
        message = "Invalid request"
    logger.info("Malformed request", path=request.url.path, error=message)
    return error_response(400, message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    logger.info("Request refused", path=request.url.path, status_code=exc.status_code, error=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def access_denied_handler(request: Request, exc: AccessDenied) -> JSONResponse:
    logger.warning("Access denied", path=request.url.path, error=str(exc))
    return error_response(403, str(exc) or "Access denied")


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("Not found", path=request.url.path)
    return error_response(404, str(exc) or "Not found")


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.error("Concurrent update conflict", path=request.url.path)
    return error_response(409, "The resource was modified concurrently, please retry")


async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError) -> JSONResponse:
    logger.error(
        "Payment gateway error",
        path=request.url.path,
        gateway_status=exc.gateway_status,
        error=exc.message,
    )
    return error_response(502, exc.message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(AccessDenied, access_denied_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(PaymentGatewayError, payment_gateway_error_handler)
