"""Parse ``^mapi:`` redirect replies into a :class:`RedirectTarget`."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from ..exc import AuthenticationError
from .constants import REDIRECT_PREFIX, RedirectScheme


@dataclass(frozen=True)
class RedirectTarget:
    scheme: RedirectScheme
    host: str = ""
    port: int | None = None
    database: str = ""

    @property
    def is_proxy(self) -> bool:
        return self.scheme is RedirectScheme.MEROVINGIAN


def find_redirect_uri(response: str) -> str:
    """Return the URI of the first ``^mapi:`` line in *response*."""
    for line in response.split("\n"):
        if line.startswith(REDIRECT_PREFIX):
            return line[len(REDIRECT_PREFIX):].strip()
    raise AuthenticationError(f"Authentication redirect not supported: {response}")


def parse_redirect_uri(uri: str) -> RedirectTarget:
    """Split a redirect URI into scheme, host, port and database.

    ``merovingian`` redirects need nothing beyond the scheme. ``monetdb``
    redirects must name a host.

    Raises
    ------
    AuthenticationError
        If the URI is malformed or uses a scheme we cannot follow.
    """
    try:
        parts = urlsplit(uri)
        port = parts.port
    except ValueError:
        raise AuthenticationError(f"Invalid authentication redirect URI: {uri}") from None
    if not parts.scheme or not uri.lower().startswith(f"{parts.scheme}://"):
        raise AuthenticationError(f"Invalid authentication redirect URI: {uri}")

    try:
        scheme = RedirectScheme(parts.scheme)
    except ValueError:
        raise AuthenticationError("Cannot authenticate") from None

    host = parts.hostname or ""
    if scheme is RedirectScheme.MONETDB and not host:
        raise AuthenticationError(f"Invalid authentication redirect URI: {uri}")
    return RedirectTarget(
        scheme=scheme,
        host=host,
        port=port,
        database=parts.path.lstrip("/"),
    )


def parse_redirect(response: str) -> RedirectTarget:
    """Find and parse the redirect carried by a server reply."""
    return parse_redirect_uri(find_redirect_uri(response))
