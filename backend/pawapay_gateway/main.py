"""
pawaPay Gateway - Callback Receiver Application

FastAPI app hosting the pawaPay callback receiver and a health check.
The client library itself does not need this app; it exists so a merchant
can point pawaPay's callback URLs at something during integration.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from . import __version__
from .config import settings
from .exceptions import PawaPayError
from .api.callbacks import router as callbacks_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Only logs the effective connection settings; there is nothing to
    open or close since callbacks are not persisted.
    """
    logger.info("Starting pawaPay callback receiver...")
    logger.info(f"Environment: {settings.pawapay_environment}")
    logger.info(f"API version: {settings.pawapay_api_version.value}")
    logger.info("Server startup complete")

    yield

    logger.info("Shutting down pawaPay callback receiver...")


app = FastAPI(
    title="pawaPay Gateway",
    description="pawaPay callback receiver for the V1/V2 gateway client",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(PawaPayError)
async def pawapay_error_handler(request: Request, exc: PawaPayError):
    """
    Handle gateway client errors with the standard error response format.

    Returns 400 Bad Request with error details from PawaPayError.to_dict().
    """
    logger.warning(
        f"Gateway error: {exc.error_code} - {exc.message}",
        extra={"details": exc.details}
    )

    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unexpected errors.

    Logs full exception for debugging but returns generic message to client.
    """
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error_code": "internal_error",
            "message": "An unexpected error occurred",
            "details": {"error_type": type(exc).__name__}
        }
    )


@app.get("/api/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        Server status, version and the configured pawaPay target
    """
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.pawapay_environment,
        "api_version": settings.pawapay_api_version.value,
    }


app.include_router(callbacks_router, tags=["Callbacks"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pawapay_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
