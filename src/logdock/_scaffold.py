from __future__ import annotations

from enum import Enum
from os import getenv
from pathlib import Path

from ._constants import (API_KEY_ENV_VAR,
                         API_URL_ENV_VAR,
                         APP_ENV_VAR,
                         DEBUG_ENV_VAR,
                         FORCE_INIT_ENV_VAR)
from ._env_helpers import parse_bool
from ._log import LOG


DEFAULT_FILENAME = 'logdock_logger.py'

# Variables the generated module needs at runtime
REQUIRED_ENV_VARS = (API_URL_ENV_VAR, API_KEY_ENV_VAR, APP_ENV_VAR)

_TEMPLATE = '''\
"""
LogDock logger for this project. Generated by `logdock init`.

Reads its settings from the environment:

    {api_url}=https://logdock.example.com/api
    {api_key}=<your API key>
    {app_var}=<application name>
    {debug}=false

Usage:

    from {module} import logger

    logger.info('Payment processed', metadata={{'amount': 100}})
"""
from logdock import create_logger

logger = create_logger({overrides})
'''


class ScaffoldResult(str, Enum):
    CREATED = 'created'
    OVERWRITTEN = 'overwritten'
    SKIPPED = 'skipped'


def force_from_env() -> bool:
    return parse_bool(getenv(FORCE_INIT_ENV_VAR), default=False)


def render_scaffold(module: str, app: str | None = None) -> str:
    return _TEMPLATE.format(
        api_url=API_URL_ENV_VAR,
        api_key=API_KEY_ENV_VAR,
        app_var=APP_ENV_VAR,
        debug=DEBUG_ENV_VAR,
        module=module,
        overrides=f'app={app!r}' if app else '',
    )


def write_scaffold(directory: Path,
                   filename: str = DEFAULT_FILENAME,
                   *,
                   app: str | None = None,
                   force: bool | None = None) -> tuple[Path, ScaffoldResult]:
    """
    Write the logger module into ``directory``.

    An existing file is left alone unless ``force`` is true; when
    ``force`` is not given, ``LOGDOCK_FORCE_INIT`` decides.
    """
    if force is None:
        force = force_from_env()

    path = Path(directory) / filename
    existed = path.exists()

    if existed and not force:
        LOG.debug('Scaffold %s already exists, skipping', path)
        return path, ScaffoldResult.SKIPPED

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_scaffold(path.stem, app), encoding='utf-8')
    LOG.debug('Wrote scaffold %s', path)

    return path, ScaffoldResult.OVERWRITTEN if existed else ScaffoldResult.CREATED
