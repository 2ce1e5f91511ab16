"""MAPI authentication handshake.

The server speaks first::

    server: salt:serverName:9:SHA512,SHA256,MD5,PLAIN:LIT:SHA512
    client: BIG:monetdb:{SHA512}<hash>:sql:demo:
    server: <reply>

The reply's first character decides what happens next:

* ``!``  authentication failed
* ``^``  redirect; ``^mapi:merovingian://...`` asks us to authenticate
  again on the same socket (at most 5 times), ``^mapi:monetdb://host:port/db``
  asks us to reconnect elsewhere, which is left to the caller
* anything else means we are in
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exc import AuthenticationError
from ..protocol.challenge import ServerChallenge, parse_challenge
from ..protocol.constants import MAX_PROXY_REDIRECTS, MSG_ERROR, MSG_REDIRECT
from ..protocol.credentials import authentication_line
from ..protocol.negotiate import negotiate
from ..protocol.redirect import RedirectTarget, parse_redirect

if TYPE_CHECKING:
    from ..config import ClientConfig
    from .base import BaseTransport


log = logging.getLogger("pymapi.handshake")


class HandshakeState(enum.Enum):
    AWAITING_CHALLENGE = "awaiting_challenge"
    NEGOTIATING = "negotiating"
    AWAITING_AUTH_REPLY = "awaiting_auth_reply"
    AUTHENTICATED = "authenticated"
    REDIRECTING = "redirecting"
    FAILED = "failed"


@dataclass(frozen=True)
class HandshakeResult:
    """Outcome of one handshake run.

    ``redirect`` is set only when the server sent us to another host;
    the caller must reconnect and start a fresh run.
    """

    config: ClientConfig
    challenge: ServerChallenge
    redirects: int = 0
    redirect: RedirectTarget | None = None

    @property
    def authenticated(self) -> bool:
        return self.redirect is None


def reply_marker(response: str) -> str:
    """First character of a server reply, or ``""`` for an empty prompt."""
    return response[:1]


class Handshake:
    """One authentication attempt over an already connected transport."""

    def __init__(self, transport: BaseTransport, config: ClientConfig) -> None:
        self.transport = transport
        self.config = config
        self.state = HandshakeState.AWAITING_CHALLENGE
        self.redirects: int | None = None

    def run(self) -> HandshakeResult:
        """Authenticate, following proxy redirects in place.

        Raises
        ------
        ProtocolError
            If the server speaks an unsupported protocol version.
        AuthenticationError
            On a rejected login, an unusable redirect, or too many proxy
            redirects.
        """
        self.redirects = None
        try:
            while True:
                result = self._attempt()
                if result is not None:
                    return result
        except Exception:
            self.state = HandshakeState.FAILED
            raise

    def _attempt(self) -> HandshakeResult | None:
        self.state = HandshakeState.AWAITING_CHALLENGE
        challenge = parse_challenge(self.transport.read())

        self.state = HandshakeState.NEGOTIATING
        config = negotiate(challenge, self.config)
        log.debug("Negotiated protocol %s, auth type %s with %s",
                  config.protocol_version, config.auth_type, challenge.server_name)

        self.transport.write(authentication_line(config, challenge))
        self.state = HandshakeState.AWAITING_AUTH_REPLY
        response = self.transport.read()

        marker = reply_marker(response)
        if marker == MSG_ERROR:
            raise AuthenticationError(f"Authentication failed: {response}")
        if marker == MSG_REDIRECT:
            return self._redirect(response, config, challenge)

        self.config = config
        self.state = HandshakeState.AUTHENTICATED
        redirects = self.redirects or 0
        self.redirects = None
        log.debug("Authenticated as %r on %s", config.username, challenge.server_name)
        return HandshakeResult(config=config, challenge=challenge, redirects=redirects)

    def _redirect(self, response: str, config: ClientConfig,
                  challenge: ServerChallenge) -> HandshakeResult | None:
        self.state = HandshakeState.REDIRECTING
        target = parse_redirect(response)

        if target.is_proxy:
            if self.redirects is None:
                self.redirects = 0
            if self.redirects >= MAX_PROXY_REDIRECTS:
                raise AuthenticationError("Merovingian: Too many redirects while proxying")
            self.redirects += 1
            log.debug("Proxy redirect %d/%d, authenticating again",
                      self.redirects, MAX_PROXY_REDIRECTS)
            return None

        log.debug("Redirected to %s:%s", target.host, target.port)
        self.config = config
        return HandshakeResult(config=config, challenge=challenge,
                               redirects=self.redirects or 0, redirect=target)
