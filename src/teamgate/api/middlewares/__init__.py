"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.teamgate.core.config import Settings

from .audit_context import audit_context_middleware
from .logging_context import logging_context_middleware

__all__ = [
    "setup_middlewares",
    "audit_context_middleware",
    "logging_context_middleware",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Configure all application middlewares.

    The last one added runs first; correlation id must be outermost.
    """

    @app.middleware("http")
    async def _audit_context(request, call_next):  # type: ignore[no-untyped-def]
        return await audit_context_middleware(request, call_next)

    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Tenant-ID", "X-Request-ID"],
    )

    app.add_middleware(CorrelationIdMiddleware)
