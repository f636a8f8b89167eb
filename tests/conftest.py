# tests/conftest.py
import httpx
import pytest
import structlog

from httplatency.config import Config
from httplatency.prober import HTTPProber


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


# --- Keep the host environment from leaking into config tests ---
@pytest.fixture
def clean_env(monkeypatch):
    for env_var in Config.ENV_MAPPINGS:
        # set first so teardown also removes values loaded from a .env file
        monkeypatch.setenv(env_var, "")
        monkeypatch.delenv(env_var)
    return monkeypatch


class RecordingLog:
    """Stands in for a structlog logger and remembers every event."""

    def __init__(self):
        self.events = []

    def _record(self, level, event, **kw):
        self.events.append((level, event, kw))

    def debug(self, event, **kw):
        self._record("debug", event, **kw)

    def info(self, event, **kw):
        self._record("info", event, **kw)

    def warning(self, event, **kw):
        self._record("warning", event, **kw)

    def error(self, event, **kw):
        self._record("error", event, **kw)

    def names(self, level=None):
        return [event for lvl, event, _ in self.events if level is None or lvl == level]


@pytest.fixture
def recording_log():
    return RecordingLog()


# --- Fake web: hosts in `down` refuse connections, everything else answers 200 ---
class FakeWeb:
    def __init__(self, down=(), status_code=200):
        self.down = set(down)
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host in self.down:
            raise httpx.ConnectError("Connection refused", request=request)
        return httpx.Response(self.status_code, text="hello")


@pytest.fixture
def fake_web():
    return FakeWeb()


@pytest.fixture
def make_web():
    return FakeWeb


@pytest.fixture
def make_prober():
    probers = []

    def _make(handler, **kwargs):
        prober = HTTPProber(transport=httpx.MockTransport(handler), **kwargs)
        probers.append(prober)
        return prober

    yield _make
    for prober in probers:
        prober.close()


@pytest.fixture
def address_file(tmp_path):
    def _write(lines):
        path = tmp_path / "addresses.txt"
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write
