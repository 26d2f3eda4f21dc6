from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from talentmatch.api.router import api_router
from talentmatch.config import BaseConfig, get_config
from talentmatch.core.monitoring.correlation_tracker import (
    CorrelationMiddleware,
    get_correlation_tracker,
)
from talentmatch.db.session import create_tables, dispose_engine
from talentmatch.utils.error_handling import BaseApplicationError, ErrorHandler
from talentmatch.utils.logger import configure_logging, logger
from talentmatch.utils.responses import APIResponse, ResponseHelper


def _build_lifespan(config: BaseConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        # Application startup
        configure_logging(
            level=config.LOG_LEVEL.value, json_logs=config.LOG_JSON, log_file=config.LOG_FILE
        )
        logger.info("Configured logging for environment", environment=config.ENVIRONMENT.value)

        if config.CREATE_TABLES_ON_STARTUP:
            await create_tables()
            logger.info("Database tables created/verified")

        logger.info(
            "Application started successfully",
            app_name=config.APP_NAME,
            version=config.APP_VERSION,
            environment=config.ENVIRONMENT.value,
        )
        yield

        # Application shutdown
        logger.info("Shutting down application")
        await dispose_engine()
        logger.info("Application shutdown completed")

    return lifespan


async def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    """SYS_1501 envelope for exceptions no other handler claimed."""
    correlation_id = ResponseHelper.get_correlation_id(request)
    error_info = ErrorHandler.classify_error(exc)
    ErrorHandler.log_error(exc, correlation_id=correlation_id, additional_context={"path": request.url.path})
    return JSONResponse(
        status_code=error_info["status_code"],
        content=APIResponse.error(
            error_code=error_info["error_code"],
            message=error_info["message"],
            details=error_info["details"],
            correlation_id=correlation_id,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BaseApplicationError)
    async def application_error_handler(request: Request, exc: BaseApplicationError):
        correlation_id = exc.correlation_id or ResponseHelper.get_correlation_id(request)
        error_info = ErrorHandler.classify_error(exc)
        ErrorHandler.log_error(exc, correlation_id=correlation_id, additional_context={"path": request.url.path})
        return JSONResponse(
            status_code=error_info["status_code"],
            content=APIResponse.error(
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
                correlation_id=correlation_id,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=APIResponse.validation_error(
                exc.errors(), correlation_id=ResponseHelper.get_correlation_id(request)
            ),
        )

    app.add_exception_handler(Exception, unexpected_error_response)


def create_app(config: Optional[BaseConfig] = None) -> FastAPI:
    """Build the FastAPI application for ``config`` (defaults to the environment's)."""
    config = config or get_config()

    app = FastAPI(
        title=config.APP_NAME,
        description=config.APP_DESCRIPTION,
        version=config.APP_VERSION,
        debug=config.DEBUG,
        docs_url=config.DOCS_URL or None,
        redoc_url=config.REDOC_URL or None,
        openapi_url=config.OPENAPI_URL,
        lifespan=_build_lifespan(config),
    )

    app.add_middleware(
        CorrelationMiddleware,
        tracker=get_correlation_tracker(),
        error_responder=unexpected_error_response,
    )
    app.add_middleware(CORSMiddleware, **config.get_cors_config())

    register_exception_handlers(app)
    app.include_router(api_router, prefix=config.API_V1_STR)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run("talentmatch.main:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)
