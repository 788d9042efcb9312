"""Entry point for the service node gateway."""

import time
import uuid
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from gateway import config
from gateway.database import get_db_connection, init_database
from gateway.exceptions import ErrorKind, GatewayException
from gateway.routes.file_routes import router as file_router
from gateway.service_locator import close_services, init_services

logger = setup_logging('gateway')

app = FastAPI(
    title="Service Node Gateway",
    description="Stages files, uploads and pays for them on the storage network, and resolves file keys",
    version="1.0.0"
)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.VALIDATION: 422,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@app.middleware("http")
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

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database, staging directory and services on application startup.
    """
    logger.info("Service node gateway starting up...")

    init_database()
    logger.info("Database initialized")

    Path(config.TEMPORARY_FILES_DIRECTORY).mkdir(parents=True, exist_ok=True)

    if not config.SERVICE_NODE_ADDRESS:
        logger.warning("SERVICE_NODE_ADDRESS is not set, new records will carry an empty service node address")

    init_services()
    logger.info("Services initialized")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Wait for running uploads and close collaborator clients.
    """
    logger.info("Service node gateway shutting down...")
    await close_services()
    logger.info("Services closed")


@app.exception_handler(GatewayException)
async def gateway_exception_handler(request: Request, exc: GatewayException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
    else:
        logger.warning(f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": exc.code}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(f"Malformed request [request_id={request_id}] path={request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=STATUS_BY_KIND[ErrorKind.VALIDATION],
        content={"detail": jsonable_encoder(exc.errors()), "code": "VALIDATION_ERROR"}
    )


app.include_router(file_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "Service Node Gateway API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    """
    return {"status": "healthy", "service": "gateway"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies database access and the staging directory.
    """
    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1 FROM local_file_records LIMIT 1")
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    files_dir = Path(config.TEMPORARY_FILES_DIRECTORY)
    storage_status = "ok" if files_dir.is_dir() else f"error: {files_dir} does not exist"

    ready = db_status == "ok" and storage_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "database": db_status,
            "storage": storage_status
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "gateway.main:app",
        host=config.GATEWAY_HOST,
        port=config.GATEWAY_PORT,
    )


if __name__ == "__main__":
    main()
