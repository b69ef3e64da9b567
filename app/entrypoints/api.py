import contextlib
import logging

import fastapi
import fastapi.exceptions
import fastapi.middleware.cors
import fastapi.responses
import starlette.exceptions
import uvicorn

from app import config
from app.bonus import router as bonus_router
from app.common import errors, http_client, tracing
from app.feedback import router as feedback_router
from app.health import router as health_router

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    app_config = config.get_config()

    if not app_config.telegram.bot_token or not app_config.telegram.chat_id:
        logger.error("TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID is not set")

    app.state.http_client = http_client.create_async_client(
        app_config, request_timeout=app_config.telegram.timeout
    )
    logger.info("HTTP client created")

    yield

    await app.state.http_client.aclose()
    logger.info("HTTP client closed")


app = fastapi.FastAPI(
    title="Clinic Feedback Relay",
    description="Relays patient feedback to the clinic Telegram group",
    version="1.0.0",
    lifespan=lifespan,
)


def _failure(status_code: int, message: str) -> fastapi.responses.JSONResponse:
    return fastapi.responses.JSONResponse(
        status_code=status_code,
        content={"ok": False, "message": message},
    )


@app.exception_handler(fastapi.exceptions.RequestValidationError)
async def validation_exception_handler(
    _: fastapi.Request, exc: fastapi.exceptions.RequestValidationError
):
    logger.info("Request validation failed", extra={"detail": exc.errors()})
    return _failure(400, errors.ValidationError.default_message)


@app.exception_handler(starlette.exceptions.HTTPException)
async def http_exception_handler(
    _: fastapi.Request, exc: starlette.exceptions.HTTPException
):
    return _failure(exc.status_code, str(exc.detail))


@app.exception_handler(errors.ServiceError)
async def service_exception_handler(request: fastapi.Request, exc: errors.ServiceError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error": exc.message},
        )
    else:
        logger.info(
            "Request rejected",
            extra={"path": request.url.path, "error": exc.message},
        )

    return _failure(exc.status_code, exc.message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: fastapi.Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return _failure(500, errors.ServiceError.default_message)


app.add_middleware(tracing.TraceIdMiddleware)
app.add_middleware(
    fastapi.middleware.cors.CORSMiddleware,
    allow_origins=config.get_config().cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health_router.router)
app.include_router(feedback_router.router)
app.include_router(bonus_router.router)


def main() -> None:  # pragma: no cover
    app_config = config.get_config()
    uvicorn.run(
        "app.entrypoints.api:app",
        host=app_config.host,
        port=app_config.port,
        log_config=app_config.log_config,
        reload=app_config.python_env == "development",
    )


if __name__ == "__main__":  # pragma: no cover
    main()
