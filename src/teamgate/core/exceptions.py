"""Access-control error taxonomy and exception handlers.

Every failure of the authorization path is one of the ``AccessError``
subclasses below. They are terminal for the current request: nothing in
this package retries them.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.teamgate.core.logging import get_logger

logger = get_logger(__name__)

DENIED_MESSAGE = "You do not have access to perform this action"


class AccessError(Exception):
    """Base class for authorization and membership failures."""

    status_code: int = 403
    code: str = "access_error"
    next_step: str | None = None
    public_message: str | None = None

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> str:
        return self.public_message or self.message or self.code


class Unauthenticated(AccessError):
    status_code = 401
    code = "unauthenticated"
    next_step = "sign_in"
    public_message = "Authentication required"


class IncompleteProvisioning(AccessError):
    """Valid credential, but no user record exists yet."""

    status_code = 403
    code = "incomplete_provisioning"
    next_step = "onboarding"
    public_message = "Account setup is not complete"


class NoTenantAssigned(AccessError):
    """Valid user without a tenant; must go through tenant selection."""

    status_code = 403
    code = "no_tenant_assigned"
    next_step = "tenant_selection"
    public_message = "No team selected"


class Forbidden(AccessError):
    status_code = 403
    code = "forbidden"
    public_message = DENIED_MESSAGE


class Inconsistent(AccessError):
    """Stored authorization data violates an invariant.

    Rendered exactly like ``Forbidden`` to the caller, logged at error level.
    """

    status_code = 403
    code = "forbidden"
    public_message = DENIED_MESSAGE


class Conflict(AccessError):
    status_code = 409
    code = "conflict"


class NotFound(AccessError):
    status_code = 404
    code = "not_found"


class InvalidRequest(AccessError):
    status_code = 400
    code = "invalid_request"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(AccessError)
    async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
        request_id = correlation_id.get()
        if isinstance(exc, Inconsistent):
            logger.error(
                "Authorization data inconsistent",
                reason=exc.message,
                request_id=request_id,
                path=request.url.path,
            )
        else:
            logger.info(
                "Access denied",
                error=type(exc).__name__,
                reason=exc.message,
                path=request.url.path,
            )

        content: dict[str, str | None] = {
            "detail": exc.detail,
            "code": exc.code,
            "request_id": request_id,
        }
        if exc.next_step:
            content["next"] = exc.next_step
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
