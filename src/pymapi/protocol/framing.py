"""MAPI block framing: 2-byte header pack/unpack and message splitting."""

from __future__ import annotations

import struct
from typing import Iterator

from .constants import MAX_BLOCK_SIZE

# Header layout: little-endian uint16 of (payload_length << 1) | last_flag
_HEADER = struct.Struct('<H')


def pack_header(length: int, last: bool) -> bytes:
    """Pack a 2-byte block header.

    Parameters
    ----------
    length : int
        Payload length of this block (at most ``MAX_BLOCK_SIZE``).
    last : bool
        Whether this block ends the message.
    """
    if not 0 <= length <= MAX_BLOCK_SIZE:
        raise ValueError(f"Block length out of range: {length}")
    return _HEADER.pack((length << 1) | int(last))


def unpack_header(data: bytes | bytearray | memoryview) -> tuple[int, bool]:
    """Unpack a 2-byte block header.

    Returns
    -------
    (length, last)
    """
    if len(data) < _HEADER.size:
        raise ValueError(f"Header too short: {len(data)} < {_HEADER.size}")
    (value,) = _HEADER.unpack(bytes(data[:_HEADER.size]))
    return value >> 1, bool(value & 1)


def iter_blocks(payload: bytes) -> Iterator[bytes]:
    """Yield framed blocks (header + chunk) carrying *payload*.

    An empty payload still produces one empty final block.
    """
    if not payload:
        yield pack_header(0, True)
        return
    for start in range(0, len(payload), MAX_BLOCK_SIZE):
        chunk = payload[start:start + MAX_BLOCK_SIZE]
        last = start + MAX_BLOCK_SIZE >= len(payload)
        yield pack_header(len(chunk), last) + chunk


def frame_message(payload: bytes) -> bytes:
    """Frame a whole message into one contiguous byte string."""
    return b''.join(iter_blocks(payload))
