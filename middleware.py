from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from errors import GENERIC_ERROR_MESSAGE, ErrorKind, SubmissionError
from logger import get_logger
from models import Envelope

logger = get_logger(__name__)

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.FILE_TYPE: 400,
    ErrorKind.FILE_SIZE: 400,
    ErrorKind.UPLOAD: 400,
    ErrorKind.MISSING_FILE: 400,
    ErrorKind.PERSISTENCE: 500,
    ErrorKind.UNHANDLED: 500,
}

# Kinds whose own message is safe to show the caller.
PUBLIC_KINDS = frozenset(kind for kind, status in STATUS_BY_KIND.items() if status < 500)


def envelope_response(status_code: int, message: Optional[str] = None, data: Any = None) -> JSONResponse:
    envelope = Envelope(success=status_code < 400, message=message, data=data)
    return JSONResponse(status_code=status_code, content=envelope.to_content())


def error_response(exc: SubmissionError, fallback: str = GENERIC_ERROR_MESSAGE) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    message = exc.public_message if exc.kind in PUBLIC_KINDS else fallback
    return envelope_response(status_code, message)


class ErrorEnvelopeMiddleware(BaseHTTPMiddleware):
    """Turns errors that escape the route handlers into the JSON envelope."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except SubmissionError as exc:
            if exc.kind in PUBLIC_KINDS:
                logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
            else:
                logger.exception("%s %s failed", request.method, request.url.path)
            return error_response(exc)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return envelope_response(500, GENERIC_ERROR_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = envelope_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
    return envelope_response(400, "Invalid request body")


def install_error_handling(app: FastAPI) -> None:
    app.add_middleware(ErrorEnvelopeMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
