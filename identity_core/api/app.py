import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from identity_core.app.services.worker_pool import shutdown_executor
from identity_core.shared.errors import AppError
from .error import ClientError, ServerError, to_http_error

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(
        f"Server error: {exc.base_error.code} {exc.base_error.message} "
        f"({exc.base_error.reason})"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_app_error(request: Request, exc: AppError):
    http_error = to_http_error(exc.error)
    if isinstance(http_error, ClientError):
        return await handle_client_error(request, http_error)
    return await handle_server_error(request, http_error)


def _start_cleanup_jobs(ApplicationConfig) -> list:
    from identity_core.depends import unit_of_work_scope
    from identity_core.jobs.cleanup import run_periodic_cleanup

    return [
        asyncio.create_task(
            run_periodic_cleanup(
                unit_of_work_scope,
                ApplicationConfig.CLEANUP_SESSIONS_INTERVAL_SECONDS,
                tokens=False,
            )
        ),
        asyncio.create_task(
            run_periodic_cleanup(
                unit_of_work_scope,
                ApplicationConfig.CLEANUP_TOKENS_INTERVAL_SECONDS,
                sessions=False,
            )
        ),
    ]


def create_app(ApplicationConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        tasks = []
        if ApplicationConfig.ENABLE_CLEANUP_JOBS:
            tasks = _start_cleanup_jobs(ApplicationConfig)
            logger.info("Cleanup jobs started")
        yield
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        shutdown_executor()

    app = FastAPI(title="Identity API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from identity_core.api.routes import auth, user, web

    app.include_router(auth.router, prefix=ApplicationConfig.API_PREFIX, tags=["Authentication"])
    app.include_router(web.router, prefix=ApplicationConfig.API_PREFIX, tags=["Web Session"])
    app.include_router(user.router, prefix=ApplicationConfig.API_PREFIX, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(AppError, handle_app_error)

    return app
