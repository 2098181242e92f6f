from __future__ import annotations

import asyncio
from contextvars import copy_context
from inspect import isawaitable, iscoroutine
from threading import Lock, Thread, current_thread
from time import monotonic
from typing import TYPE_CHECKING, Any, Coroutine

from ._caller import get_caller_info
from ._errors import LogDockConfigError, LogDockTransportError
from ._log import LOG, enable_debug_output
from ._models import CallerInfo, LogDockConfig, LogEntry, LogLevel
from ._requests import HttpTransport

if TYPE_CHECKING:
    from ._requests import SupportsSend


_LOGGER: LogDockLogger | None = None
_INIT_LOCK = Lock()


def init(config: LogDockConfig | None = None,
         *,
         reset: bool = False,
         **overrides: Any) -> LogDockLogger:
    """
    Create the package-wide logger used by `logdock.info()` and friends.

    With no ``config``, settings are read from ``LOGDOCK_*`` environment
    variables (``overrides`` win over the environment).
    """
    global _LOGGER

    with _INIT_LOCK:
        if _LOGGER is not None and not reset:
            return _LOGGER

        _LOGGER = create_logger(config, **overrides)
        return _LOGGER


def get_logger() -> LogDockLogger:
    """Return the package-wide logger, creating it from the environment if needed."""
    if _LOGGER is None:
        return init()
    return _LOGGER


def get_logger_or_none() -> LogDockLogger | None:
    """
    Like `get_logger`, but a missing or invalid environment config is
    reported to the ``logdock`` logger instead of raised.
    """
    try:
        return get_logger()
    except LogDockConfigError as e:
        LOG.warning('LogDock is not configured, dropping log entry: %s', e)
        return None


def _close_all(coro: Coroutine, args) -> None:
    # unscheduled work: close it so nothing warns about a never-awaited coroutine
    coro.close()
    for arg in args:
        if iscoroutine(arg):
            arg.close()


def create_logger(config: LogDockConfig | None = None,
                  **overrides: Any) -> LogDockLogger:
    if config is None:
        config = LogDockConfig.from_env(**overrides)
    elif overrides:
        raise TypeError('Pass either a LogDockConfig or keyword overrides, not both')

    return LogDockLogger(config)


class LogDockLogger:
    """
    LogDock client.

    Each call to `debug` / `info` / `warn` / `error`:
        * captures the call site (method, file, line) from the stack
        * resolves the user id: explicit > `get_user_id()` > default
        * sends the entry to ``{api_url}/v1/logs`` in the background

    Logging calls return immediately and never raise; failures are only
    reported (to the ``logdock`` logger) when ``debug`` is enabled.
    """
    __slots__ = (
        '_config',
        '_transport',
        '_lock',
        '_threads',
        '_tasks',
    )

    def __init__(self, config: LogDockConfig, *,
                 transport: SupportsSend | None = None):
        config.validate()

        self._config = config
        self._transport = (transport if transport is not None
                           else HttpTransport(config.timeout))
        self._lock = Lock()
        self._threads: set[Thread] = set()
        self._tasks: set[asyncio.Task] = set()

        if config.debug:
            enable_debug_output()

    @property
    def config(self) -> LogDockConfig:
        return self._config

    def debug(self, message: str, user_id: str | None = None,
              metadata: dict[str, Any] | None = None) -> None:
        """Log a message with level DEBUG."""
        self._log(LogLevel.DEBUG, message, user_id, metadata)

    def info(self, message: str, user_id: str | None = None,
             metadata: dict[str, Any] | None = None) -> None:
        """Log a message with level INFO."""
        self._log(LogLevel.INFO, message, user_id, metadata)

    def warn(self, message: str, user_id: str | None = None,
             metadata: dict[str, Any] | None = None) -> None:
        """Log a message with level WARN."""
        self._log(LogLevel.WARN, message, user_id, metadata)

    warning = warn

    def error(self, message: str, user_id: str | None = None,
              metadata: dict[str, Any] | None = None) -> None:
        """Log a message with level ERROR."""
        self._log(LogLevel.ERROR, message, user_id, metadata)

    def log(self, level: LogLevel | str, message: str, user_id: str | None = None,
            metadata: dict[str, Any] | None = None) -> None:
        """Log a message with an explicit ``level`` ('DEBUG', 'INFO', 'WARN', 'ERROR')."""
        self._log(level, message, user_id, metadata)

    def dispatch(self,
                 level: LogLevel | str,
                 message: str,
                 user_id: str | None = None,
                 metadata: dict[str, Any] | None = None,
                 *,
                 caller: CallerInfo | None = None) -> None:
        """
        Send an entry whose call site is already known (e.g. from a
        `logging.LogRecord`) without inspecting the stack.
        """
        pending_user_id = self._start_user_id(user_id)
        self._schedule(self._emit, level, message, pending_user_id, metadata, caller)

    def _log(self, level, message, user_id, metadata) -> None:
        # the stack must be captured here, before anything is scheduled
        caller = get_caller_info(debug=self._config.debug)
        pending_user_id = self._start_user_id(user_id)
        self._schedule(self._emit, level, message, pending_user_id, metadata, caller)

    # -- scheduling

    def _schedule(self, emit, *args) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            coro = emit(*args, offload=True)
            try:
                task = loop.create_task(coro)
            except Exception:
                _close_all(coro, args)
                self._debug_error('Failed to schedule log delivery')
                return
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        # no event loop in this thread: run the chain on its own thread,
        # in a copy of the caller's context (see `set_user_id`)
        coro = emit(*args, offload=False)
        ctx = copy_context()
        thread = Thread(target=ctx.run,
                        args=(self._run_in_thread, coro),
                        name='logdock-dispatch',
                        daemon=True)
        with self._lock:
            self._threads.add(thread)
        try:
            thread.start()
        except Exception:
            with self._lock:
                self._threads.discard(thread)
            _close_all(coro, args)
            self._debug_error('Failed to schedule log delivery')

    def _run_in_thread(self, coro: Coroutine) -> None:
        try:
            asyncio.run(coro)
        finally:
            with self._lock:
                self._threads.discard(current_thread())

    def flush(self, timeout: float | None = None) -> None:
        """
        Wait for entries dispatched from threads without an event loop
        to finish sending. ``timeout`` is the total time to wait, in seconds.
        """
        with self._lock:
            threads = list(self._threads)

        deadline = None if timeout is None else monotonic() + timeout
        for t in threads:
            remaining = None if deadline is None else max(0.0, deadline - monotonic())
            t.join(remaining)

    async def aflush(self) -> None:
        """Wait for entries dispatched on the running event loop to finish sending."""
        loop = asyncio.get_running_loop()
        tasks = [t for t in self._tasks if t.get_loop() is loop]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -- resolve and send

    async def _emit(self, level, message, user_id, metadata, caller,
                    *, offload: bool) -> None:
        try:
            resolved_user_id = await self._resolve_user_id(user_id)
            entry = LogEntry.build(
                self._config.app,
                LogLevel.coerce(level),
                message,
                user_id=resolved_user_id,
                caller=caller,
                metadata=metadata,
            )
        except Exception:
            self._debug_error('Failed to build log entry')
            return

        await self._send(entry, offload=offload)

    def _start_user_id(self, user_id: str | None):
        """
        Runs in the caller's thread: an explicit id, else whatever
        `get_user_id()` returns (a value or an awaitable), else `None`.
        """
        # 1. explicitly provided
        if user_id:
            return user_id

        # 2. `get_user_id` callback, called now so it sees the caller's state
        get_user_id = self._config.get_user_id
        if get_user_id is None:
            return None
        try:
            return get_user_id()
        except Exception:
            self._debug_error('get_user_id callback failed')
            return None

    async def _resolve_user_id(self, pending) -> str | None:
        if isawaitable(pending):
            try:
                pending = await pending
            except Exception:
                self._debug_error('get_user_id callback failed')
                pending = None

        # 3. default
        return pending or self._config.default_user_id

    async def _send(self, entry: LogEntry, *, offload: bool) -> None:
        config = self._config
        args = (config.endpoint, entry.to_payload(), config.headers())

        try:
            if offload:
                await asyncio.to_thread(self._transport.send, *args)
            else:
                self._transport.send(*args)

        except LogDockTransportError as e:
            if config.debug:
                LOG.error('Failed to send log: %s', e)

        except Exception:
            self._debug_error('Network error')

    def _debug_error(self, msg: str) -> None:
        if self._config.debug:
            LOG.error(msg, exc_info=True)
