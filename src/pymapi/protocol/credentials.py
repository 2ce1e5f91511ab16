"""Build the authentication line sent in answer to a server challenge."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exc import AuthenticationError
from .constants import ENDIANNESS, LATEST_PROTOCOL, AuthType
from .digest import hexdigest, is_hashed

if TYPE_CHECKING:
    from ..config import ClientConfig
    from .challenge import ServerChallenge

_DIGEST_METHODS = frozenset(t.value for t in AuthType if is_hashed(t))


def authentication_hash(config: ClientConfig, challenge: ServerChallenge) -> str:
    """Hash the password against the challenge salt.

    On the latest protocol the server stores passwords pre-hashed with its
    ``password_digest_method``, so the plaintext is hashed with that first.
    """
    password = config.password
    if not is_hashed(config.auth_type):
        return password + challenge.salt
    if config.protocol_version == LATEST_PROTOCOL:
        method = challenge.password_digest_method
        if method not in _DIGEST_METHODS:
            raise AuthenticationError(
                f"Password digest method '{method}' not supported. "
                f"Only {', '.join(sorted(_DIGEST_METHODS))}."
            )
        password = hexdigest(method, password)
    return hexdigest(config.auth_type, password + challenge.salt)


def authentication_line(config: ClientConfig, challenge: ServerChallenge) -> str:
    """Return ``BIG:<user>:{<type>}<hash>:<lang>:<database>:``."""
    auth_type = AuthType(config.auth_type).value
    return ":".join([
        ENDIANNESS,
        config.username,
        f"{{{auth_type}}}{authentication_hash(config, challenge)}",
        config.language,
        config.database,
        "",
    ])
