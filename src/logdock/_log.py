from logging import DEBUG, Formatter, StreamHandler, getLogger

LOG = getLogger('logdock')

_DEBUG_FORMAT = '[LogDock] %(levelname)s %(message)s'


def enable_debug_output(level: int = DEBUG) -> None:
    """
    Attach a console handler to the ``logdock`` logger (once), so that
    diagnostics show up when a client is created with ``debug=True``.
    """
    for handler in LOG.handlers:
        if getattr(handler, 'logdock_debug', False):
            return

    handler = StreamHandler()
    handler.setFormatter(Formatter(_DEBUG_FORMAT))
    handler.logdock_debug = True
    LOG.addHandler(handler)

    if LOG.level == 0 or LOG.level > level:
        LOG.setLevel(level)
