"""
Main entrypoint for the Todo RPC API.

This module assembles the FastAPI application: it sets up logging,
creates one repository and one service per resource kind, builds the
procedure router and mounts its HTTP transport under the RPC prefix.
``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app``, so it can be served
with uvicorn directly::

    uvicorn todo_rpc_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.router import build_app_router
from .api.transport import build_transport, error_response
from .core.config import Settings, settings as default_settings
from .core.errors import InternalError
from .core.logging_config import setup_logging
from .repositories import create_repository
from .schemas.todo import TodoRead
from .schemas.user import UserRead
from .services import TodoService, UserService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the process-wide settings read
        from the environment.

    Returns
    -------
    FastAPI
        A configured application.  The procedure router, the services
        and the settings are available on ``app.state``.
    """
    settings = settings or default_settings

    # Initialise logging before anything else so that the set-up below
    # can already log.
    setup_logging(settings.log_level, settings.log_file)

    user_service = UserService(create_repository(UserRead, "user", settings))
    todo_service = TodoService(create_repository(TodoRead, "todo", settings))
    if settings.seed_demo_data:
        user_service.seed_demo_users()

    rpc_router = build_app_router(user_service, todo_service)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.rpc_router = rpc_router
    app.state.user_service = user_service
    app.state.todo_service = todo_service

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", settings.identity_header],
        )

    app.include_router(
        build_transport(
            rpc_router,
            identity_header=settings.identity_header,
            expose_internal=settings.is_development,
        ),
        prefix=settings.rpc_prefix,
        tags=["rpc"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        # Anything that escaped the router; the details stay in the log
        # unless running in development mode.
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            InternalError(str(exc) or type(exc).__name__),
            expose_internal=settings.is_development,
        )

    logger.info(
        "Mounted %d procedures under %s (storage: %s)",
        len(rpc_router),
        settings.rpc_prefix,
        settings.storage_backend,
    )
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
