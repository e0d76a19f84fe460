"""Domain errors raised by the public workflows and how they render over HTTP."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

TURNSTILE_TIMEOUT_OR_DUPLICATE = "TURNSTILE_TIMEOUT_OR_DUPLICATE"


class PortalError(Exception):
    """Base class for errors that map to a `{"error": ...}` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.code:
            body["code"] = self.code
        return body


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND


class BotProtectionError(PortalError):
    """Turnstile rejected the token.

    Only `timeout-or-duplicate` failures are retryable; those answer 400 with a
    machine readable code so the client can reset its widget. Everything else
    is a 403.
    """

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str, code: Optional[str] = None):
        retryable = code == TURNSTILE_TIMEOUT_OR_DUPLICATE
        super().__init__(
            message,
            code=code,
            status_code=status.HTTP_400_BAD_REQUEST if retryable else None,
        )


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Malformed requests answer 400 in the same `{"error": ...}`
    shape as every other client error, naming the first offending field.
    """
    errors = exc.errors()
    message = "Invalid input"
    if errors:
        field = ".".join(
            str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path")
        )
        if field:
            message = f"Invalid {field}: {errors[0].get('msg')}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "details": jsonable_encoder(errors)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
