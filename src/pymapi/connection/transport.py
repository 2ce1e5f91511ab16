"""Blocking socket transport speaking MAPI block framing."""

from __future__ import annotations

import logging
import socket

from ..exc import ConnectionError as MonetConnError
from ..protocol.constants import BLOCK_HEADER_SIZE
from ..protocol.framing import frame_message, unpack_header
from .base import BaseTransport


log = logging.getLogger("pymapi.connection")


class SocketTransport(BaseTransport):
    """TCP transport: one ``write`` or ``read`` is one framed message."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        self.host: str | None = None
        self.port: int | None = None
        self._sock: socket.socket | None = None

    def connect(self, host: str, port: int) -> None:
        """Connect to *host*:*port*, closing any previous socket first."""
        self.close()
        try:
            sock = socket.create_connection((host, port), timeout=self.timeout)
        except OSError as e:
            raise MonetConnError(f"Cannot connect to {host}:{port}: {e}") from e
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._sock = sock
        self.host, self.port = host, port
        log.debug("Socket open to %s:%s", host, port)

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def write(self, message: str) -> None:
        if self._sock is None:
            raise MonetConnError("Connection is not open")
        try:
            self._sock.sendall(frame_message(message.encode('utf-8')))
        except OSError as e:
            raise MonetConnError(f"Write to {self.host}:{self.port} failed: {e}") from e

    def _recv_exact(self, n: int) -> bytes:
        """Receive exactly n bytes from the socket."""
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = self._sock.recv(n - len(buf))
            except OSError as e:
                raise MonetConnError(f"Read from {self.host}:{self.port} failed: {e}") from e
            if not chunk:
                raise MonetConnError("Connection closed by server")
            buf.extend(chunk)
        return bytes(buf)

    def read(self) -> str:
        if self._sock is None:
            raise MonetConnError("Connection is not open")
        payload = bytearray()
        last = False
        while not last:
            length, last = unpack_header(self._recv_exact(BLOCK_HEADER_SIZE))
            if length:
                payload.extend(self._recv_exact(length))
        try:
            return payload.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MonetConnError(f"Invalid UTF-8 from {self.host}:{self.port}: {e}") from e
