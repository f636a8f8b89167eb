import pytest
from structlog.testing import capture_logs

from httplatency.canonicalizer import canonicalize, is_http_url


@pytest.mark.parametrize("raw, expected", [
    ("www.example.com", "http://www.example.com"),
    ("www.example.com/", "http://www.example.com/"),
    ("www.example.com:80", "http://www.example.com:80"),
    ("www.example.com:80/", "http://www.example.com:80/"),
    ("www.example.com:443", "https://www.example.com:443"),
    ("www.example.com:443/", "https://www.example.com:443/"),
    ("www.example.com:8080", "http://www.example.com:8080"),
    ("www.example.com/search?q=rust+lang", "http://www.example.com/search?q=rust+lang"),
    ("http://www.example.com", "http://www.example.com/"),
    ("https://www.example.com", "https://www.example.com/"),
    ("http://www.example.com:80", "http://www.example.com/"),
    ("https://www.example.com:443", "https://www.example.com/"),
    ("http://www.example.com:8080/path", "http://www.example.com:8080/path"),
    ("https://www.example.com.au/?q=rust+lang", "https://www.example.com.au/?q=rust+lang"),
    ("HTTP://www.example.com", "http://www.example.com/"),
    ("HtTpS://WWW.Example.com", "https://www.example.com/"),
])
def test_canonicalize_accepts(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize("raw", [
    "ftp://www.example.com",
    "ftp://www.example.com:443",
    "FTP://www.example.com",
    "mailto://someone@example.com",
    "file:///etc/passwd",
])
def test_canonicalize_rejects_foreign_scheme(raw):
    assert canonicalize(raw) is None


@pytest.mark.parametrize("raw", [
    "",
    "/just/a/path",
    ":8080",
    "http://",
    "https://:443",
    "http://www.example.com:abc",
    "http://www.example.com:99999",
    "http://exa mple.com",
    "www.exa mple.com",
    "[::1",
])
def test_canonicalize_rejects_unparseable(raw):
    assert canonicalize(raw) is None


def test_port_443_infers_https():
    assert canonicalize("api.example.org:443").startswith("https://")
    assert canonicalize("10.0.0.1:443").startswith("https://")
    assert canonicalize("[::1]:443") == "https://[::1]:443"


@pytest.mark.parametrize("raw", ["api.example.org", "api.example.org:80", "api.example.org:4433", "[::1]:8443"])
def test_other_ports_infer_http(raw):
    assert canonicalize(raw).startswith("http://")


def test_malformed_port_drops_one_trailing_character():
    assert canonicalize("www.example.com:443.") == "https://www.example.com:443."
    assert canonicalize("www.example.com:80a") == "http://www.example.com:80a"


def test_malformed_port_falls_back_to_http():
    # still not a number after one character is dropped
    assert canonicalize("www.example.com:44xx") == "http://www.example.com:44xx"
    assert canonicalize("www.example.com:") == "http://www.example.com:"


@pytest.mark.parametrize("raw", [
    "www.example.com",
    "www.example.com:443",
    "www.example.com:8080/a?b=c",
    "http://www.example.com",
    "HTTPS://www.example.com:443/x",
])
def test_canonicalize_is_idempotent_after_normalization(raw):
    second = canonicalize(canonicalize(raw))
    assert second is not None
    assert canonicalize(second) == second


@pytest.mark.parametrize("raw", ["http://a.example", "https://a.example:8443/x", "HTTP://a.example"])
def test_explicit_scheme_is_preserved(raw):
    scheme = raw.split("://", 1)[0].lower()
    assert canonicalize(raw).startswith(f"{scheme}://")


def test_second_pass_keeps_inferred_https():
    assert canonicalize(canonicalize("www.example.com:443")) == "https://www.example.com/"


def test_rejection_is_logged():
    with capture_logs() as cap_logs:
        assert canonicalize("ftp://www.example.com") is None

    assert cap_logs[0]["event"] == "invalid_url_scheme"
    assert cap_logs[0]["log_level"] == "warning"
    assert cap_logs[0]["scheme"] == "ftp"


def test_injected_logger_receives_diagnostics(recording_log):
    canonicalize("ftp://www.example.com", log=recording_log)
    canonicalize("", log=recording_log)
    canonicalize("www.example.com", log=recording_log)

    assert recording_log.names("warning") == ["invalid_url_scheme", "url_missing_host"]
    assert "url_scheme_inferred" in recording_log.names("debug")


@pytest.mark.parametrize("raw, expected", [
    ("http://www.example.com", True),
    ("https://www.example.com", True),
    ("HTTPS://www.example.com:8443/x", True),
    ("www.example.com", False),
    ("ftp://www.example.com", False),
    ("http://", False),
])
def test_is_http_url(raw, expected):
    assert is_http_url(raw) is expected


@pytest.mark.parametrize("raw, expected", [
    ("http:/www.example.com", "http://www.example.com/"),
    ("HTTP:www.example.com", "http://www.example.com/"),
    ("https:www.example.com:8443/x", "https://www.example.com:8443/x"),
    ("http:///www.example.com", "http://www.example.com/"),
])
def test_malformed_scheme_delimiter_keeps_the_host(raw, expected):
    assert canonicalize(raw) == expected
    assert canonicalize(expected) == expected


def test_is_http_url_accepts_malformed_scheme_delimiter():
    assert is_http_url("http:/www.example.com") is True
    assert is_http_url("HTTPS:www.example.com") is True
