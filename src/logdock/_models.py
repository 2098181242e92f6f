from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from logging import ERROR, INFO, WARNING
from os import getenv
from time import time
from typing import Any, Awaitable, Callable, Union

from ._constants import (API_KEY_ENV_VAR,
                         API_KEY_HEADER,
                         API_URL_ENV_VAR,
                         APP_ENV_VAR,
                         CF_ACCESS_CLIENT_ID_ENV_VAR,
                         CF_ACCESS_CLIENT_ID_HEADER,
                         CF_ACCESS_CLIENT_SECRET_ENV_VAR,
                         CF_ACCESS_CLIENT_SECRET_HEADER,
                         CONTENT_TYPE_HEADER,
                         DEBUG_ENV_VAR,
                         DEFAULT_TIMEOUT,
                         DEFAULT_USER_ID,
                         DEFAULT_USER_ID_ENV_VAR,
                         LOGS_PATH,
                         TIMEOUT_ENV_VAR)
from ._env_helpers import non_empty, parse_bool, parse_float
from ._errors import LogDockConfigError


# fn() -> str | None, or an async fn returning the same
UserIdGetter = Callable[[], Union[str, None, Awaitable[Union[str, None]]]]


def now_ms() -> int:
    return int(time() * 1000)


class LogLevel(str, Enum):
    DEBUG = 'DEBUG'
    INFO = 'INFO'
    WARN = 'WARN'
    ERROR = 'ERROR'

    @classmethod
    def coerce(cls, value: LogLevel | str) -> LogLevel:
        if isinstance(value, cls):
            return value

        s = str(value).strip().upper()
        if s == 'WARNING':
            return cls.WARN
        if s in ('CRITICAL', 'FATAL'):
            return cls.ERROR
        return cls(s)

    @classmethod
    def from_stdlib(cls, levelno: int) -> LogLevel:
        """Map a `logging` level number onto the closest LogDock level."""
        if levelno >= ERROR:
            return cls.ERROR
        if levelno >= WARNING:
            return cls.WARN
        if levelno >= INFO:
            return cls.INFO
        return cls.DEBUG


@dataclass(frozen=True, slots=True)
class LogDockConfig:
    api_url: str
    api_key: str
    app: str

    # Used when no explicit user id is passed and `get_user_id` yields nothing
    default_user_id: str | None = DEFAULT_USER_ID
    # Optional callback resolving the current user id (sync or async)
    get_user_id: UserIdGetter | None = field(default=None, repr=False)
    # Print diagnostics for swallowed errors
    debug: bool = False

    # Cloudflare Access service token (optional, for protected endpoints)
    cf_access_client_id: str | None = None
    cf_access_client_secret: str | None = field(default=None, repr=False)

    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        # an explicit None still means "use the default"
        if self.default_user_id is None:
            object.__setattr__(self, 'default_user_id', DEFAULT_USER_ID)

    def validate(self) -> None:
        missing = [name for name in ('api_url', 'api_key', 'app')
                   if not getattr(self, name)]
        if missing:
            raise LogDockConfigError(
                f'LogDock config is missing required field(s): {", ".join(missing)}'
            )

    @property
    def endpoint(self) -> str:
        return f'{self.api_url.rstrip("/")}{LOGS_PATH}'

    def headers(self) -> dict[str, str]:
        headers = {
            CONTENT_TYPE_HEADER: 'application/json',
            API_KEY_HEADER: self.api_key,
        }
        if self.cf_access_client_id:
            headers[CF_ACCESS_CLIENT_ID_HEADER] = self.cf_access_client_id
        if self.cf_access_client_secret:
            headers[CF_ACCESS_CLIENT_SECRET_HEADER] = self.cf_access_client_secret
        return headers

    @classmethod
    def from_env(cls, **overrides: Any) -> LogDockConfig:
        """
        Build a config from ``LOGDOCK_*`` environment variables.

        Keyword arguments take precedence over the environment. The result
        is not validated here; `LogDockLogger` does that on construction.
        """
        values: dict[str, Any] = {
            'api_url': getenv(API_URL_ENV_VAR, ''),
            'api_key': getenv(API_KEY_ENV_VAR, ''),
            'app': getenv(APP_ENV_VAR, ''),
            'default_user_id': non_empty(getenv(DEFAULT_USER_ID_ENV_VAR)),
            'debug': parse_bool(getenv(DEBUG_ENV_VAR), default=False),
            'cf_access_client_id': non_empty(getenv(CF_ACCESS_CLIENT_ID_ENV_VAR)),
            'cf_access_client_secret': non_empty(getenv(CF_ACCESS_CLIENT_SECRET_ENV_VAR)),
            'timeout': parse_float(getenv(TIMEOUT_ENV_VAR), default=DEFAULT_TIMEOUT),
        }

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f'Unknown LogDockConfig field(s): {", ".join(sorted(unknown))}')

        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True, slots=True)
class CallerInfo:
    """
    Where a log call came from. Every field is optional; an empty
    instance means the call site could not be determined.
    """
    method: str | None = None
    file: str | None = None
    line_number: int | None = None

    def __bool__(self) -> bool:
        return any(v is not None for v in (self.method, self.file, self.line_number))

    def as_dict(self) -> dict[str, Any]:
        return {k: v for k, v in (('method', self.method),
                                  ('file', self.file),
                                  ('line_number', self.line_number))
                if v is not None}


@dataclass(frozen=True, slots=True)
class LogEntry:
    app: str
    level: LogLevel
    message: str
    user_id: str | None = None

    # call-site (filled from `CallerInfo`, omitted when unknown)
    method: str | None = None
    file: str | None = None
    line_number: int | None = None

    # free-form structured context
    metadata: dict[str, Any] | None = None

    # epoch milliseconds
    ts: int = field(default_factory=now_ms)

    @classmethod
    def build(cls,
              app: str,
              level: LogLevel,
              message: str,
              *,
              user_id: str | None = None,
              caller: CallerInfo | None = None,
              metadata: dict[str, Any] | None = None) -> LogEntry:
        return cls(
            app=app,
            level=LogLevel.coerce(level),
            message=message,
            user_id=user_id,
            metadata=metadata,
            **(caller.as_dict() if caller else {}),
        )

    def to_payload(self) -> dict[str, Any]:
        payload = {
            'app': self.app,
            'level': self.level.value,
            'message': self.message,
            'user_id': self.user_id,
            'method': self.method,
            'file': self.file,
            'line_number': self.line_number,
            'metadata': self.metadata,
            'ts': self.ts,
        }
        return {k: v for k, v in payload.items() if v is not None}
