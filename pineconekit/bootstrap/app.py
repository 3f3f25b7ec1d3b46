from __future__ import annotations

import asyncio
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from ..errors import ClientError, ConfigurationError, ErrorCode, UncaughtError
from ..pineconeclient import PineconeClient, PineconeSettings

log = logging.getLogger("pineconekit.bootstrap")

T = TypeVar("T")
ErrorHandler = Callable[[ClientError], None]
ClientFactory = Callable[[PineconeSettings], PineconeClient]


@dataclass
class AppOptions:
    name: str
    version: str = ""
    description: str = ""
    required_env: List[str] = field(default_factory=lambda: ["PINECONE_KEY", "PINECONE_ENV"])


def validate_env(names: Iterable[str], environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return the values of the named variables; raise if any is unset or blank."""
    env = os.environ if environ is None else environ
    values: Dict[str, str] = {}
    missing: List[str] = []
    for name in names:
        value = env.get(name)
        if value is None or not value.strip():
            missing.append(name)
        else:
            values[name] = value
    if missing:
        raise ConfigurationError(f"Environment variable(s) not set: {', '.join(missing)}")
    return values


def _resolved_env(settings: PineconeSettings, environ: Optional[Mapping[str, str]]) -> Dict[str, str]:
    # loaded settings (.env included) fill names the process env leaves unset
    env = dict(os.environ if environ is None else environ)
    for name, value in settings.model_dump().items():
        if value is not None and str(value).strip() and not (env.get(name) or "").strip():
            env[name] = str(value)
    return env


def _log_error(err: ClientError) -> None:
    log.error("app.uncaught code=%s message=%s", err.code.value, err.message, exc_info=err.cause)


def install_error_handlers(
    on_error: ErrorHandler,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> Callable[[], None]:
    """
    Route uncaught exceptions (sys.excepthook) and unhandled task failures
    (loop exception handler) to on_error as UncaughtError.
    Returns a callable restoring the previous handlers.
    """
    previous_hook = sys.excepthook

    def _excepthook(exc_type, exc, tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            previous_hook(exc_type, exc, tb)
            return
        on_error(UncaughtError(f"Uncaught Exception: {exc}", code=ErrorCode.UNCAUGHT_EXCEPTION, cause=exc))

    sys.excepthook = _excepthook

    previous_loop_handler = None
    if loop is not None:
        previous_loop_handler = loop.get_exception_handler()

        def _loop_handler(_loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
            exc = context.get("exception")
            reason = exc if exc is not None else context.get("message")
            on_error(UncaughtError(f"Unhandled Task Exception: {reason}", code=ErrorCode.UNHANDLED_REJECTION, cause=exc))

        loop.set_exception_handler(_loop_handler)

    def restore() -> None:
        sys.excepthook = previous_hook
        if loop is not None:
            loop.set_exception_handler(previous_loop_handler)

    return restore


async def run_app(
    options: AppOptions,
    main: Callable[[PineconeClient], Awaitable[T]],
    settings: Optional[PineconeSettings] = None,
    *,
    client_factory: ClientFactory = PineconeClient,
    on_error: Optional[ErrorHandler] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> T:
    """
    Application entry: load settings, check the required names against the
    environment and the loaded settings, build and initialize the client,
    run main(client), then close the client and restore error handlers.
    """
    settings = settings or PineconeSettings()
    validate_env(options.required_env, _resolved_env(settings, environ))

    log.info("Initializing %s v%s", options.name, options.version or "-")
    if options.description:
        log.info("%s", options.description)

    restore = install_error_handlers(on_error or _log_error, asyncio.get_running_loop())
    try:
        async with client_factory(settings) as client:
            await client.initialize()
            return await main(client)
    finally:
        restore()
