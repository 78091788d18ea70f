"""Neighbors relay — FastAPI Application.

This module defines the application factory, all REST API routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is a synchronous relay with no state of its own:

- **Configuration** is loaded from the environment by
  :func:`~neighbors.core.config.load_config` when the app is created, so a
  missing variable stops the process at startup.
- **Collaborators** (image API, object store, record store) are built once
  in the lifespan handler and stored on ``app.state``.
- **Submissions** are run end-to-end by
  :class:`~neighbors.core.pipeline.SubmissionPipeline` inside the request.
  Route handlers are plain ``def`` functions so FastAPI runs the blocking
  SDK calls in its threadpool.
- **Errors** derive from :class:`~neighbors.core.errors.RelayError` and are
  turned into ``{"error": ...}`` bodies by one exception handler; malformed
  form fields get the same shape with status 400.
  Collaborator detail is logged, never returned.

Endpoints
---------
========  ==================  ==========================================
Method    Path                Purpose
========  ==================  ==========================================
POST      ``/submitMember``   Validate, transform photo, store, insert
GET       ``/community``      All members, newest first
GET       ``/health``         Liveness check
========  ==================  ==========================================

Usage
-----
CLI (installed entry point)::

    neighbors

Factory mode::

    uvicorn neighbors.api.main:create_app --factory
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neighbors import __version__
from neighbors.api.models import (
    ErrorResponse,
    HealthResponse,
    ImageStatus,
    MemberOut,
    SubmitResponse,
)
from neighbors.core.config import NeighborsConfig, configure_logging, load_config
from neighbors.core.errors import RelayError
from neighbors.core.pipeline import SubmissionPipeline
from neighbors.core.records import list_records
from neighbors.core.services import Services, build_services
from neighbors.core.validation import PhotoUpload, validate_submission

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def create_app(
    config: NeighborsConfig | None = None,
    services: Services | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application configuration.  Loaded from the environment
            when omitted.
        services: Collaborator handles.  Built from *config* at startup when
            omitted; tests pass fakes here.

    Returns:
        A configured :class:`FastAPI` instance.

    Raises:
        ConfigurationError: If *config* is omitted and the environment is
            incomplete.
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the process-wide collaborators once per process."""
        app.state.config = config
        app.state.services = services or build_services(config)
        app.state.pipeline = SubmissionPipeline(
            app.state.services,
            image_size=config.image_size,
            image_background=config.image_background,
        )
        logger.info("Submission pipeline ready.")

        yield  # Application runs here.

    app = FastAPI(
        title="Neighbors Relay",
        description="Community member sign-ups with generated portraits.",
        version=__version__,
        lifespan=lifespan,
    )

    # Only the configured frontend may call the API from a browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, _relay_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.add_api_route(
        "/submitMember",
        submit_member,
        methods=["POST"],
        response_model=SubmitResponse,
        response_model_exclude_unset=True,
        responses=_ERROR_RESPONSES,
    )
    app.add_api_route(
        "/community",
        get_community,
        methods=["GET"],
        response_model=list[MemberOut],
        responses={500: {"model": ErrorResponse}},
    )
    app.add_api_route("/health", health, methods=["GET"], response_model=HealthResponse)

    return app


# ---------------------------------------------------------------------------
# Exception handlers.
# ---------------------------------------------------------------------------


async def _relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Translate a :class:`RelayError` into an ``{"error": ...}`` response."""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed form fields in the same ``{"error": ...}`` shape."""
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = f"Invalid field(s): {', '.join(fields)}" if fields else "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed unexpectedly: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": RelayError.public_message})


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


def submit_member(
    request: Request,
    name: str | None = Form(None),
    firstname: str | None = Form(None),
    lastname: str | None = Form(None),
    email: str | None = Form(None),
    location: str | None = Form(None),
    activity: str | None = Form(None),
    image: UploadFile | None = File(None),
) -> SubmitResponse:
    """Accept a community member submission.

    This endpoint:

    1. Validates the name fields and email (400 on failure, nothing written).
    2. Stores the original photo and requests a generated portrait, if a
       photo was attached.  Failures here only null the image fields.
    3. Inserts the member record (500 on failure).

    Returns:
        ``{"ok": true}`` without a photo, otherwise
        ``{"ok": true, "image": {"status": ..., "url": ...}}``.
    """
    photo = None
    if image is not None:
        photo = PhotoUpload(
            content=image.file.read(),
            content_type=image.content_type or "application/octet-stream",
            filename=image.filename or "upload.png",
        )

    submission = validate_submission(
        {
            "name": name,
            "firstname": firstname,
            "lastname": lastname,
            "email": email,
            "location": location,
            "activity": activity,
        },
        photo,
    )

    pipeline: SubmissionPipeline = request.app.state.pipeline
    result = pipeline.submit(submission)

    if result.image is None:
        return SubmitResponse(ok=True)
    return SubmitResponse(
        ok=True,
        image=ImageStatus(status=result.image.status, url=result.image.url),
    )


def get_community(request: Request) -> list[dict]:
    """Return every community member, newest first.

    An empty table returns ``[]``.
    """
    services: Services = request.app.state.services
    return list_records(services.records)


def health() -> dict:
    """Liveness check."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Loads configuration first so a missing environment variable fails the
    process before the server binds.  Host and port come from ``HOST`` and
    ``PORT``.

    This function is registered as the ``neighbors`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    config = load_config()
    configure_logging(config.log_level)
    logger.info(f"Starting Neighbors relay on {config.host}:{config.port}")

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
