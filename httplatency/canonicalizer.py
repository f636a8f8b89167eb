"""
Turns user supplied addresses into fully qualified http(s) URLs.

- An explicit http or https scheme is kept and the URL is normalized.
- Any other explicit scheme is rejected.
- A missing scheme is inferred from the port: 443 means https, anything
  else (or no port at all) means http.
"""

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

import structlog

logger = structlog.get_logger(__name__)

HTTP_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}
TLS_PORT = 443

# Stand-in scheme so urlsplit treats a scheme-less address as an authority
PLACEHOLDER_SCHEME = "fake"

EXPLICIT_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*)://")
# http: or https: followed by any number of slashes, including none
HTTP_SCHEME_PREFIX = re.compile(r"^(https?):/*", re.IGNORECASE)
FORBIDDEN_HOST_CHARS = re.compile(r"[\s#/<>?@\[\\\]^|\"{}`]")
IPV6_LITERAL = re.compile(r"^[0-9a-f:.]+$")


def canonicalize(raw: str, log=None) -> Optional[str]:
    """Return the fully qualified http(s) form of ``raw`` or None.

    ``log`` is the structlog logger used for diagnostics, the module logger
    when omitted.
    """
    log = log or logger

    match = EXPLICIT_SCHEME.match(raw)
    if match and match.group(1).lower() not in HTTP_SCHEMES:
        log.warning("invalid_url_scheme", url=raw, scheme=match.group(1).lower())
        return None

    http_url = _explicit_http_url(raw)
    if http_url is not None:
        return _normalize_http_url(http_url, log)

    try:
        parts = urlsplit(f"{PLACEHOLDER_SCHEME}://{raw}")
    except ValueError as e:
        log.warning("url_parse_failed", url=raw, error=str(e))
        return None

    if not _valid_host(parts.hostname):
        log.warning("url_missing_host", url=raw)
        return None

    scheme = _infer_scheme(_port_text(parts.netloc), log)
    canonical = urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))
    log.debug("url_scheme_inferred", url=raw, canonical=canonical, scheme=scheme)
    return canonical


def is_http_url(raw: str, log=None) -> bool:
    """Check that ``raw`` already is a valid http or https URL.

    Unlike canonicalize, a missing scheme is not inferred: ``www.example.com``
    is not an http URL, ``http://www.example.com`` is.
    """
    log = log or logger
    http_url = _explicit_http_url(raw)
    if http_url is None:
        log.warning("invalid_url_scheme", url=raw)
        return False
    return _normalize_http_url(http_url, log) is not None


def _explicit_http_url(raw: str) -> Optional[str]:
    """Rewrite ``http:host``, ``http:/host`` and the like to ``http://host``.

    None when ``raw`` does not start with an http or https scheme.
    """
    match = HTTP_SCHEME_PREFIX.match(raw)
    if not match:
        return None
    return f"{match.group(1)}://{raw[match.end():]}"


def _normalize_http_url(raw: str, log) -> Optional[str]:
    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as e:
        log.warning("url_parse_failed", url=raw, error=str(e))
        return None

    host = parts.hostname
    if not _valid_host(host):
        log.warning("url_missing_host", url=raw)
        return None

    canonical = urlunsplit((
        parts.scheme.lower(),
        _build_netloc(parts, host, port),
        parts.path or "/",
        parts.query,
        parts.fragment,
    ))
    log.debug("valid_url", url=raw, canonical=canonical)
    return canonical


def _build_netloc(parts: SplitResult, host: str, port: Optional[int]) -> str:
    userinfo, sep, _ = parts.netloc.rpartition("@")
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != DEFAULT_PORTS[parts.scheme.lower()]:
        netloc = f"{netloc}:{port}"
    return f"{userinfo}{sep}{netloc}"


def _valid_host(host: Optional[str]) -> bool:
    if not host:
        return False
    if ":" in host:
        return IPV6_LITERAL.match(host) is not None
    return FORBIDDEN_HOST_CHARS.search(host) is None


def _port_text(netloc: str) -> Optional[str]:
    """Return whatever follows the host in ``netloc``, None when there is no port."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        _, _, rest = hostport.partition("]")
        return rest[1:] if rest.startswith(":") else None
    _, sep, port = hostport.partition(":")
    return port if sep else None


def _parse_port(text: str) -> Optional[int]:
    if text and text.isascii() and text.isdigit():
        return int(text)
    return None


def _infer_scheme(port_text: Optional[str], log) -> str:
    if port_text is None:
        return "http"

    port = _parse_port(port_text)
    if port is None:
        # Tolerate one stray trailing character glued to the port
        port = _parse_port(port_text[:-1])
        if port is None:
            log.debug("unparseable_port", port=port_text)
            return "http"

    return "https" if port == TLS_PORT else "http"
