"""One-time session commands issued right after authentication."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exc import CommandError
from ..protocol.constants import CONTROL_PREFIX, DEFAULT_REPLY_SIZE, LANG_SQL_PREFIX, MSG_ERROR

if TYPE_CHECKING:
    from .base import BaseTransport


log = logging.getLogger("pymapi.setup")


@dataclass
class SessionFlags:
    """Which session commands a connection has already applied."""

    timezone_set: bool = False
    reply_size_set: bool = False


def local_utc_offset() -> int:
    """Local UTC offset in seconds (negative west of Greenwich)."""
    offset = datetime.datetime.now().astimezone().utcoffset()
    return int(offset.total_seconds()) if offset is not None else 0


def timezone_interval(offset_seconds: int) -> str:
    """Format a UTC offset as the quoted interval literal, e.g. ``'-05:00'``.

    Only whole hours are sent; partial hours round down.
    """
    hours = offset_seconds // 3600
    sign = "-" if hours < 0 else "+"
    return f"'{sign}{abs(hours):02d}:00'"


def timezone_command(offset_seconds: int) -> str:
    return f"SET TIME ZONE INTERVAL {timezone_interval(offset_seconds)} HOUR TO MINUTE;"


def reply_size_command(size: int) -> str:
    return f"reply_size {size}\n"


class SessionConfigurator:
    """Sends the timezone and reply-size commands, each at most once."""

    def __init__(self, transport: BaseTransport, flags: SessionFlags | None = None) -> None:
        self.transport = transport
        self.flags = flags if flags is not None else SessionFlags()

    def _command(self, message: str) -> str:
        self.transport.write(message)
        return self.transport.read()

    def set_timezone_interval(self, offset_seconds: int | None = None) -> bool:
        """Send the local UTC offset. Returns False if already sent."""
        if self.flags.timezone_set:
            return False
        if offset_seconds is None:
            offset_seconds = local_utc_offset()
        command = timezone_command(offset_seconds)
        log.debug("Session setup: %s", command)
        response = self._command(LANG_SQL_PREFIX + command)
        if response.startswith(MSG_ERROR):
            raise CommandError(f"Unable to set timezone interval: {response}", response)
        self.flags.timezone_set = True
        return True

    def set_reply_size(self, size: int = DEFAULT_REPLY_SIZE) -> bool:
        """Send the reply-size directive. Returns False if already sent."""
        if self.flags.reply_size_set:
            return False
        log.debug("Session setup: reply_size %d", size)
        response = self._command(CONTROL_PREFIX + reply_size_command(size))
        if response.startswith(MSG_ERROR):
            raise CommandError(f"Unable to set reply size: {response}", response)
        self.flags.reply_size_set = True
        return True

    def configure(self, reply_size: int = DEFAULT_REPLY_SIZE,
                  offset_seconds: int | None = None) -> None:
        """Apply both commands, timezone first."""
        self.set_timezone_interval(offset_seconds)
        self.set_reply_size(reply_size)
