"""Profile link helpers: validation and normalization of profile URLs."""

from urllib.parse import urlsplit, urlunsplit

_DEFAULT_PORTS = (80, 443)


def is_valid_profile_url(url: str | None) -> bool:
    """Return True if *url* has a scheme, a host and a path."""
    if not url:
        return False
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return False
    return bool(parts.scheme and host and parts.path)


def normalise_link(url: str) -> str:
    """Return the canonical comparison form of a profile link.

    The scheme is forced to ``http``, the host is lowercased and loses any
    ``www.`` prefix and default port, and trailing slashes are stripped.
    User info is kept as given.
    Normalizing an already normalized link returns it unchanged.
    """
    parts = urlsplit(url)
    if not parts.netloc:
        return url.rstrip("/")

    scheme = parts.scheme.lower()
    if scheme in ("http", "https"):
        scheme = "http"

    host = parts.hostname or ""
    while host.startswith("www."):
        host = host[len("www."):]
    if ":" in host:
        host = f"[{host}]"

    try:
        port = parts.port
    except ValueError:
        port = None
    netloc = host if port is None or port in _DEFAULT_PORTS else f"{host}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((scheme, netloc, parts.path.rstrip("/"), parts.query, parts.fragment))


def secure_link(url: str) -> str:
    """Return *url* with a leading ``http://`` replaced by ``https://``."""
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url
