from __future__ import annotations

import logging
from logging import DEBUG, Formatter, Handler, LogRecord

from .._caller import clean_file_path
from .._env_helpers import parse_level
from .._log import LOG
from .._models import CallerInfo, LogLevel


_exc_formatter = Formatter()


class DropInternalLogsFilter(logging.Filter):
    """
    Filter that drops records from LogDock's own logger, so its
    diagnostics are never sent back to LogDock.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        return not (record.name == LOG.name
                    or record.name.startswith(f'{LOG.name}.'))


class LogDockHandler(Handler):
    """
    Forwards standard library log records to LogDock.

    The call site comes from the record itself (``funcName``,
    ``pathname``, ``lineno``) rather than from the stack. A user id and
    extra metadata can be attached per record::

        log.info('paid', extra={'user_id': 'u-1', 'logdock': {'amount': 10}})
    """

    def __init__(
        self,
        logger=None,  # LogDockLogger; defaults to `logdock.get_logger()`
        *,
        level: str | int = DEBUG,
        user_id_attr: str = 'user_id',
        metadata_attr: str = 'logdock',
    ):
        super().__init__(level=parse_level(level, default=DEBUG))
        self._logger = logger
        self._user_id_attr = user_id_attr
        self._metadata_attr = metadata_attr

        self.addFilter(DropInternalLogsFilter())

    def _get_logger(self):
        if self._logger is None:
            from .._client import get_logger
            self._logger = get_logger()
        return self._logger

    def emit(self, record: LogRecord) -> None:
        # noinspection PyBroadException
        try:
            metadata: dict = {}
            extra = getattr(record, self._metadata_attr, None)
            if isinstance(extra, dict):
                metadata.update(extra)

            metadata['logger'] = record.name
            if record.exc_info:
                metadata['exception'] = _exc_formatter.formatException(record.exc_info)
            elif record.stack_info:
                metadata['stack'] = record.stack_info

            user_id = getattr(record, self._user_id_attr, None)
            if not isinstance(user_id, str):
                user_id = None

            caller = CallerInfo(
                method=record.funcName or None,
                file=clean_file_path(record.pathname) if record.pathname else None,
                line_number=record.lineno,
            )

            self._get_logger().dispatch(
                LogLevel.from_stdlib(record.levelno),
                record.getMessage(),
                user_id,
                metadata,
                caller=caller,
            )

        except Exception:
            # never raise from logging handler; report only in debug mode
            if self._logger is not None and self._logger.config.debug:
                LOG.debug(f'{self.__class__.__name__} failed', exc_info=True)
