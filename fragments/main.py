"""Entry point for the Fragments service."""

import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from fragments import __version__, config
from fragments.auth import HtpasswdAuthenticator
from fragments.exceptions import (
    AuthenticationError,
    FragmentNotFoundError,
    FragmentsError,
    FragmentTooLargeError,
    InvalidArgumentError,
    StorageError,
    UnsupportedConversionError,
    UnsupportedTypeError,
)
from fragments.repositories.fragment_repository import FragmentRepository
from fragments.routes.fragment_routes import router as fragment_router
from fragments.routes.health_routes import router as health_router
from fragments.schemas.common import ErrorDetail, ErrorResponse
from fragments.storage import create_backend

logger = setup_logging('fragments', config.LOG_LEVEL)


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(message=message, code=status_code)).model_dump(),
        headers=headers,
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time
    user_id = getattr(request.state, 'user_id', None)

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s "
        f"[request_id={request_id}] [user_id={user_id or 'anonymous'}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    logger.warning(f"Authentication error: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return error_response(
        status.HTTP_401_UNAUTHORIZED,
        "Unauthorized",
        headers={"WWW-Authenticate": 'Basic realm="fragments"'},
    )


async def not_found_handler(request: Request, exc: FragmentNotFoundError):
    logger.warning(f"Fragment not found: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return error_response(status.HTTP_404_NOT_FOUND, "Fragment not found")


async def unsupported_type_handler(request: Request, exc: UnsupportedTypeError):
    logger.warning(f"Unsupported type: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return error_response(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(exc))


async def unsupported_conversion_handler(request: Request, exc: UnsupportedConversionError):
    logger.warning(f"Unsupported conversion: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return error_response(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(exc))


async def too_large_handler(request: Request, exc: FragmentTooLargeError):
    logger.warning(f"Fragment too large: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return error_response(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, str(exc))


async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    logger.warning(f"Invalid argument: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(
        f"Storage error: {exc} [request_id={_request_id(request)}] path={request.url.path}",
        exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


async def fragments_error_handler(request: Request, exc: FragmentsError):
    logger.error(
        f"Fragments error: {exc} [request_id={_request_id(request)}] path={request.url.path}",
        exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def create_app(
    repository: Optional[FragmentRepository] = None,
    authenticator: Optional[HtpasswdAuthenticator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        repository: Fragment repository; built from environment config when omitted
        authenticator: Credential checker; loaded from HTPASSWD_FILE when omitted

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Fragments",
        description="Owner-scoped fragment storage with format conversion",
        version=__version__,
    )

    if repository is None:
        repository = FragmentRepository(create_backend())

    if authenticator is None and config.HTPASSWD_FILE:
        authenticator = HtpasswdAuthenticator.from_file(config.HTPASSWD_FILE)
    if authenticator is None:
        logger.warning("HTPASSWD_FILE is not set; all /v1 requests will be rejected")

    app.state.repository = repository
    app.state.authenticator = authenticator

    app.middleware("http")(log_requests)

    # Starlette uses the handler of the most specific class in the exception MRO
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(FragmentNotFoundError, not_found_handler)
    app.add_exception_handler(UnsupportedTypeError, unsupported_type_handler)
    app.add_exception_handler(UnsupportedConversionError, unsupported_conversion_handler)
    app.add_exception_handler(FragmentTooLargeError, too_large_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(FragmentsError, fragments_error_handler)

    app.include_router(health_router)
    app.include_router(fragment_router)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    if not config.HTPASSWD_FILE:
        raise SystemExit("missing expected env var: HTPASSWD_FILE")

    logger.info(f"Fragments service starting on {config.FRAGMENTS_HOST}:{config.FRAGMENTS_PORT}")
    uvicorn.run(
        "fragments.main:app",
        host=config.FRAGMENTS_HOST,
        port=config.FRAGMENTS_PORT,
    )


if __name__ == "__main__":
    main()
