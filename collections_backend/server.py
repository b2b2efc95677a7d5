"""
Process entry point: runs the API under uvicorn and stops the process when
a fault escapes a background task or thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading

import uvicorn

from collections_backend.app import create_app
from collections_backend.config import get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class FatalErrorGuard:
    """
    Turns an unhandled fault into an orderly stop: the listener closes,
    lifespan shutdown runs, and the process exits with status 1.
    """

    def __init__(self, server: uvicorn.Server):
        self.server = server
        self.exit_code = 0

    def trip(self, description: str, exc: BaseException | None) -> None:
        logger.error("%s, shutting down", description, exc_info=exc)
        self.exit_code = 1
        self.server.should_exit = True

    def handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        self.trip(
            context.get("message", "Unhandled exception in event loop"),
            context.get("exception"),
        )

    def handle_thread_exception(self, args: threading.ExceptHookArgs) -> None:
        self.trip(
            f"Uncaught exception in thread {args.thread.name if args.thread else '?'}",
            args.exc_value,
        )

    def install(self) -> None:
        asyncio.get_running_loop().set_exception_handler(self.handle_loop_exception)
        threading.excepthook = self.handle_thread_exception


def main() -> int:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    app = create_app(settings)
    config = uvicorn.Config(
        app, host=settings.host, port=settings.port, log_config=None
    )
    server = uvicorn.Server(config)
    guard = FatalErrorGuard(server)

    async def serve() -> None:
        guard.install()
        await server.serve()

    try:
        asyncio.run(serve())
    except SystemExit as exc:
        # uvicorn exits from inside startup when the lifespan fails.
        logger.error("Server failed to start (exit status %s)", exc.code)
        return 1
    if not server.started:
        logger.error("Server failed to start")
        return 1
    logger.info("Server stopped")
    return guard.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
