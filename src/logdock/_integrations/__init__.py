__all__ = ['DropInternalLogsFilter',
           'LogDockHandler']

from ._logging import (
                       DropInternalLogsFilter,
                       LogDockHandler,
)
