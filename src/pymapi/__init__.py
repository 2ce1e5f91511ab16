"""pymapi — MonetDB MAPI authentication handshake for Python.

Usage::

    from pymapi import ClientConfig, Connection

    config = ClientConfig(username="monetdb", password="monetdb",
                          database="demo", host="localhost", port=50000)

    with Connection(config) as conn:
        print(conn.challenge.server_name, conn.config.auth_type)
"""

from .config import ClientConfig, load_config, config_from_file
from .protocol.constants import AuthType, RedirectScheme
from .protocol.challenge import ServerChallenge, parse_challenge
from .protocol.digest import hexdigest
from .protocol.negotiate import negotiate
from .protocol.credentials import authentication_hash, authentication_line
from .protocol.redirect import RedirectTarget, parse_redirect
from .connection.base import BaseTransport
from .connection.transport import SocketTransport
from .connection.handshake import Handshake, HandshakeResult, HandshakeState
from .connection.setup import SessionConfigurator, SessionFlags
from .connection.sync_conn import Connection
from .exc import (
    MonetError, ConnectionError, HandshakeError, ProtocolError,
    AuthenticationError, CommandError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    'ClientConfig', 'load_config', 'config_from_file',
    'Connection',
    # Protocol
    'AuthType', 'RedirectScheme',
    'ServerChallenge', 'parse_challenge',
    'hexdigest', 'negotiate',
    'authentication_hash', 'authentication_line',
    'RedirectTarget', 'parse_redirect',
    # Transport and handshake
    'BaseTransport', 'SocketTransport',
    'Handshake', 'HandshakeResult', 'HandshakeState',
    'SessionConfigurator', 'SessionFlags',
    # Exceptions
    'MonetError', 'ConnectionError', 'HandshakeError', 'ProtocolError',
    'AuthenticationError', 'CommandError',
]
