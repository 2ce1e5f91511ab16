"""Exception hierarchy for pymapi."""


class MonetError(Exception):
    """Base exception for all pymapi errors."""


class ConnectionError(MonetError):
    """Failed to connect to, or talk to, a MonetDB server."""


class HandshakeError(ConnectionError):
    """MAPI handshake failed."""


class ProtocolError(HandshakeError):
    """Server announced a MAPI protocol version we do not speak."""


class AuthenticationError(HandshakeError):
    """Authentication rejected, unsupported, or redirected too often."""


class CommandError(MonetError):
    """Session setup command rejected by the server."""

    def __init__(self, message: str, response: str = "") -> None:
        self.response = response
        super().__init__(message)
