"""Canonicalize loosely specified host strings into absolute base URLs."""

from __future__ import annotations

from urllib.parse import urlsplit

from .exceptions import InvalidHostError

DEFAULT_HOSTNAME = "127.0.0.1"
DEFAULT_PORT = 11434
DEFAULT_HOST = f"http://{DEFAULT_HOSTNAME}:{DEFAULT_PORT}"

_SCHEME_DEFAULT_PORTS = {"https": 443, "http": 80}


def format_host(host: str) -> str:
    """Return ``scheme://hostname:port[path]`` for a raw host string.

    Accepted shapes are ``""``, ``":<port>"``, ``"<host>"``, ``"<host>:<port>"``
    and the same with a ``<scheme>://`` prefix or a trailing path. Hosts given
    without a scheme always land on the service port (11434); hosts with an
    explicit scheme and no port get the scheme's well-known port.
    """
    if not host:
        return DEFAULT_HOST

    explicit_scheme = "://" in host
    if host.startswith(":"):
        host = f"http://{DEFAULT_HOSTNAME}{host}"
        explicit_scheme = False
    if not explicit_scheme:
        host = f"http://{host}"

    parsed = urlsplit(host)
    hostname = parsed.hostname
    if not parsed.scheme or not hostname:
        raise InvalidHostError(f"invalid host: {host!r}")
    try:
        port = parsed.port
    except ValueError as exc:
        raise InvalidHostError(f"invalid port in host {host!r}: {exc}") from exc

    if port is None:
        if explicit_scheme:
            port = _SCHEME_DEFAULT_PORTS.get(parsed.scheme, _SCHEME_DEFAULT_PORTS["http"])
        else:
            port = DEFAULT_PORT

    if ":" in hostname:
        hostname = f"[{hostname}]"

    formatted = f"{parsed.scheme}://{hostname}:{port}{parsed.path}"
    if formatted.endswith("/"):
        formatted = formatted[:-1]
    return formatted


def join_url(base_url: str, path: str) -> str:
    """Append an API path to a canonical base URL."""
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
