"""Parse the server greeting that opens every MAPI connection.

The greeting is one colon-delimited line::

    salt:serverName:protocolVersion:authType1,authType2,...:endianness:digestMethod

Field count is not validated here. A short line leaves the trailing
fields empty and the negotiator rejects it.
"""

from __future__ import annotations

from dataclasses import dataclass

_FIELDS = 6


@dataclass(frozen=True)
class ServerChallenge:
    salt: str = ""
    server_name: str = ""
    protocol_version: str = ""
    auth_types: tuple[str, ...] = ()
    endianness: str = ""
    password_digest_method: str = ""


def parse_challenge(line: str) -> ServerChallenge:
    """Split a greeting line into a :class:`ServerChallenge`."""
    parts = line.rstrip("\n").split(":")
    parts += [""] * (_FIELDS - len(parts))
    salt, server_name, protocol, auth_types, endianness, digest = parts[:_FIELDS]
    return ServerChallenge(
        salt=salt,
        server_name=server_name,
        protocol_version=protocol,
        auth_types=tuple(t for t in auth_types.split(",") if t),
        endianness=endianness,
        password_digest_method=digest,
    )
