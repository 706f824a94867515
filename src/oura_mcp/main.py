"""Process entry point."""

import asyncio
import logging
import os
import sys
import threading
from typing import TextIO

import anyio
from pydantic import ValidationError as PydanticValidationError

from .client import OuraClient
from .config import get_config, setup_logging
from .dispatcher import RequestDispatcher
from .exceptions import ConfigurationError
from .output_guard import OutputGuard
from .server import create_mcp_server, serve

logger = logging.getLogger("oura-mcp.main")

MAX_FATAL_MESSAGE_LENGTH = 200


def short_message(error: BaseException) -> str:
    """One-line description of an error, truncated so payloads can't flood logs."""
    lines = str(error).strip().splitlines()
    text = lines[0] if lines else type(error).__name__
    if len(text) > MAX_FATAL_MESSAGE_LENGTH:
        text = text[:MAX_FATAL_MESSAGE_LENGTH] + "..."
    return text


def _report(diagnostic: TextIO, prefix: str, message: str) -> None:
    diagnostic.write(f"{prefix}: {message}\n")
    diagnostic.flush()


def install_fatal_handlers(diagnostic: TextIO) -> None:
    """Report uncaught exceptions in one line on the diagnostic channel.

    An exception escaping a worker thread ends the process, since the
    protocol stream cannot be trusted afterwards.
    """

    def excepthook(exc_type, exc_value, exc_traceback) -> None:
        _report(diagnostic, "Uncaught exception", short_message(exc_value))

    def thread_excepthook(args: threading.ExceptHookArgs) -> None:
        if args.exc_type is SystemExit:
            return
        message = (
            short_message(args.exc_value)
            if args.exc_value is not None
            else "Unknown error"
        )
        _report(diagnostic, "Uncaught exception in thread", message)
        os._exit(1)

    sys.excepthook = excepthook
    threading.excepthook = thread_excepthook


def install_loop_exception_handler(diagnostic: TextIO) -> None:
    """Make errors the running event loop would only log fatal."""

    def handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        error = context.get("exception")
        if error is not None:
            message = short_message(error)
        else:
            message = context.get("message") or "Unknown error"
        _report(diagnostic, "Unhandled async exception", message)
        os._exit(1)

    asyncio.get_running_loop().set_exception_handler(handler)


async def _run(mcp, guard: OutputGuard, client: OuraClient) -> None:
    install_loop_exception_handler(guard.diagnostic)
    async with client:
        await serve(mcp, guard)


def main() -> None:
    """Main entry point."""
    guard = OutputGuard.for_stdio()
    guard.install()
    install_fatal_handlers(guard.diagnostic)

    try:
        config = get_config()
    except PydanticValidationError as e:
        fields = ", ".join(".".join(map(str, err["loc"])) for err in e.errors())
        guard.diagnostic.write(f"Invalid configuration: {fields}\n")
        sys.exit(1)

    setup_logging(config.log_level, stream=guard.diagnostic)
    logger.debug("Starting main")

    try:
        client = OuraClient(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        sys.exit(1)

    logger.info(f"Authentication mode: {client.credential_provider.mode}")
    dispatcher = RequestDispatcher(client)
    mcp = create_mcp_server(dispatcher, log_level=config.log_level)

    try:
        logger.info("Starting MCP server")
        anyio.run(_run, mcp, guard, client)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as e:
        logger.error(f"Server error: {short_message(e)}")
        sys.exit(1)
    finally:
        guard.close()


if __name__ == "__main__":
    main()
