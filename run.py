"""Entry point for the Todo RPC API.

Loads a ``.env`` file from the project root (if present), then serves
the application with uvicorn.  It is intended to be executed from the
project root, for example under Docker, where you only specify a
single Python file to run.

Configuration such as PORT, ENVIRONMENT, STORAGE_BACKEND or
DATABASE_URL can be placed in the ``.env`` file; see
``todo_rpc_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv
from uvicorn import Config, Server

# Settings are read when the package is imported, so the .env file must
# be loaded first.
load_dotenv(Path(__file__).resolve().parent / ".env")

from todo_rpc_api.app.core.config import settings  # noqa: E402
from todo_rpc_api.app.main import app  # noqa: E402

logger = logging.getLogger("todo_rpc_api.run")


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logger.info("Server running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
