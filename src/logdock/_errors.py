class LogDockError(Exception):
    """Base class for errors raised by LogDock."""


class LogDockConfigError(LogDockError, ValueError):
    """A client was configured without a required setting."""


class LogDockTransportError(LogDockError, RuntimeError):
    """The collection endpoint answered with a non-success status."""

    def __init__(self, status: int, body: str = ''):
        self.status = status
        self.body = body
        super().__init__(f'LogDock API responded with status {status}: {body}')
