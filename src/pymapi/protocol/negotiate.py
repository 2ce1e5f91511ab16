"""Protocol version and auth-type negotiation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exc import AuthenticationError, ProtocolError
from .constants import SUPPORTED_PROTOCOLS, AuthType

if TYPE_CHECKING:
    from ..config import ClientConfig
    from .challenge import ServerChallenge

_KNOWN = frozenset(t.value for t in AuthType)


def check_protocol(challenge: ServerChallenge) -> str:
    """Return the challenge's protocol version if we speak it."""
    version = challenge.protocol_version
    if version not in SUPPORTED_PROTOCOLS:
        supported = ", ".join(f"'{v}'" for v in SUPPORTED_PROTOCOLS)
        raise ProtocolError(f"Protocol '{version}' not supported. Only {supported}.")
    return version


def select_auth_type(client_types: tuple[str, ...] | list[str],
                     server_types: tuple[str, ...] | list[str]) -> str:
    """Pick the first client-preferred auth type the server also offers.

    Client order decides, so a server listing weak mechanisms first cannot
    talk the client down.
    """
    offered = set(server_types)
    for auth_type in client_types:
        if auth_type in _KNOWN and auth_type in offered:
            return auth_type
    raise AuthenticationError(
        f"Authentication types ({', '.join(server_types)}) not supported. "
        f"Only {', '.join(client_types)}."
    )


def negotiate(challenge: ServerChallenge, config: ClientConfig) -> ClientConfig:
    """Validate *challenge* and return *config* with the negotiated fields set.

    Raises
    ------
    ProtocolError
        If the protocol version is not supported.
    AuthenticationError
        If no auth type is shared between client and server.
    """
    version = check_protocol(challenge)
    auth_type = select_auth_type(config.auth_types, challenge.auth_types)
    return config.replace(auth_type=auth_type, protocol_version=version)
