"""Abstract transport interface the handshake talks through."""

from __future__ import annotations

import abc
from typing import Any


class BaseTransport(abc.ABC):
    """Line-oriented, blocking message transport to a MonetDB server."""

    @abc.abstractmethod
    def connect(self, host: str, port: int) -> None:
        """Open (or re-open) the underlying stream to *host*:*port*."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close the stream. Safe to call when already closed."""

    @abc.abstractmethod
    def write(self, message: str) -> None:
        """Send one whole message."""

    @abc.abstractmethod
    def read(self) -> str:
        """Receive one whole message."""

    @property
    @abc.abstractmethod
    def is_open(self) -> bool:
        """Whether the stream is currently open."""

    def __enter__(self) -> BaseTransport:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
