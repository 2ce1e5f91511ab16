"""Test fixtures including a scripted transport and a mock MAPI server."""

from __future__ import annotations

import socket
import threading
from typing import Callable

import pytest

from pymapi.connection.base import BaseTransport
from pymapi.protocol.constants import BLOCK_HEADER_SIZE
from pymapi.protocol.framing import frame_message, unpack_header


CHALLENGE_V9 = "saltsalt:merovingian:9:SHA512,SHA256,MD5,PLAIN:LIT:SHA512:"


class FakeTransport(BaseTransport):
    """In-memory transport replaying scripted replies and recording writes."""

    def __init__(self, replies: list[str] | None = None) -> None:
        self.replies = list(replies or [])
        self.writes: list[str] = []
        self.connects: list[tuple[str, int]] = []
        self.closes = 0
        self._open = False

    def connect(self, host: str, port: int) -> None:
        self.connects.append((host, port))
        self._open = True

    def close(self) -> None:
        self.closes += 1
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def write(self, message: str) -> None:
        self.writes.append(message)

    def read(self) -> str:
        if not self.replies:
            raise AssertionError("FakeTransport ran out of scripted replies")
        return self.replies.pop(0)


class MockMapiServer:
    """A minimal mock MonetDB server that speaks MAPI block framing.

    Each accepted client is sent ``challenge`` (text or raw bytes); every
    message the client sends afterwards is answered by ``responder(message)``, which returns
    one reply or a list of replies sent back to back.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 0) -> None:
        self.host = host
        self.port = port
        self.challenge: str | bytes = CHALLENGE_V9
        self.responder: Callable[[str], str | list[str]] = lambda message: ""
        self.received: list[str] = []
        self._sock: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> int:
        """Start the mock server and return the port number."""
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind((self.host, self.port))
        self._sock.listen(5)
        self._sock.settimeout(1.0)
        self.port = self._sock.getsockname()[1]
        self._running = True
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()
        return self.port

    def stop(self) -> None:
        """Stop the mock server."""
        self._running = False
        if self._sock:
            self._sock.close()
        if self._thread:
            self._thread.join(timeout=3)

    def _serve(self) -> None:
        while self._running:
            try:
                client, addr = self._sock.accept()
            except (socket.timeout, OSError):
                continue
            threading.Thread(
                target=self._handle_client, args=(client,), daemon=True
            ).start()

    def _handle_client(self, client: socket.socket) -> None:
        try:
            challenge = self.challenge
            if isinstance(challenge, str):
                challenge = challenge.encode('utf-8')
            client.sendall(frame_message(challenge))
            while self._running:
                message = self._read_message(client)
                if message is None:
                    break
                self.received.append(message)
                replies = self.responder(message)
                if isinstance(replies, str):
                    replies = [replies]
                for reply in replies:
                    client.sendall(frame_message(reply.encode('utf-8')))
        except OSError:
            pass
        finally:
            try:
                client.close()
            except OSError:
                pass

    def _read_message(self, sock: socket.socket) -> str | None:
        payload = bytearray()
        last = False
        while not last:
            header = self._recv_exact(sock, BLOCK_HEADER_SIZE)
            if header is None:
                return None
            length, last = unpack_header(header)
            if length:
                chunk = self._recv_exact(sock, length)
                if chunk is None:
                    return None
                payload.extend(chunk)
        return payload.decode('utf-8')

    def _recv_exact(self, sock: socket.socket, n: int) -> bytes | None:
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = sock.recv(n - len(buf))
            except OSError:
                return None
            if not chunk:
                return None
            buf.extend(chunk)
        return bytes(buf)


@pytest.fixture
def fake_transport():
    """Factory fixture: ``fake_transport(reply, reply, ...)``."""
    def make(*replies: str) -> FakeTransport:
        return FakeTransport(list(replies))
    return make


@pytest.fixture
def mock_server():
    """Fixture providing a running MockMapiServer."""
    server = MockMapiServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def second_server():
    """A second MockMapiServer, e.g. the target of a direct redirect."""
    server = MockMapiServer()
    server.start()
    yield server
    server.stop()
