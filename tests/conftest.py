import threading

import pytest

import logdock._client
from logdock import LogDockConfig, LogDockLogger
from logdock._constants import (API_KEY_ENV_VAR,
                                API_URL_ENV_VAR,
                                APP_ENV_VAR,
                                CF_ACCESS_CLIENT_ID_ENV_VAR,
                                CF_ACCESS_CLIENT_SECRET_ENV_VAR,
                                DEBUG_ENV_VAR,
                                DEFAULT_USER_ID_ENV_VAR,
                                FORCE_INIT_ENV_VAR,
                                TIMEOUT_ENV_VAR)


class RecordingTransport:
    """Collects what would have been sent to the LogDock API."""

    def __init__(self):
        self._lock = threading.Lock()
        self.sent = []

    def send(self, url, payload, headers):
        with self._lock:
            self.sent.append((url, dict(payload), dict(headers)))

    @property
    def payloads(self):
        return [p for _, p, _ in self.sent]


class FailingTransport:
    def __init__(self, exc=None):
        self.exc = exc or ConnectionError('connection refused')
        self.calls = 0

    def send(self, url, payload, headers):
        self.calls += 1
        raise self.exc


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (API_URL_ENV_VAR, API_KEY_ENV_VAR, APP_ENV_VAR,
                 DEFAULT_USER_ID_ENV_VAR, DEBUG_ENV_VAR,
                 CF_ACCESS_CLIENT_ID_ENV_VAR, CF_ACCESS_CLIENT_SECRET_ENV_VAR,
                 TIMEOUT_ENV_VAR, FORCE_INIT_ENV_VAR):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(logdock._client, '_LOGGER', None)


@pytest.fixture
def config():
    return LogDockConfig(
        api_url='http://logdock.test/api',
        api_key='test-key',
        app='billing',
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def logger(config, transport):
    return LogDockLogger(config, transport=transport)
