"""MAPI protocol constants."""

from __future__ import annotations

import enum

# ── Protocol versions ──────────────────────────────────────────────
MAPI_V8 = "8"
MAPI_V9 = "9"
SUPPORTED_PROTOCOLS = (MAPI_V8, MAPI_V9)
LATEST_PROTOCOL = MAPI_V9


class AuthType(str, enum.Enum):
    """Credential hashing mechanisms a MonetDB server may advertise."""
    MD5 = "MD5"
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"
    PLAIN = "PLAIN"


# Client priority, strongest first.
DEFAULT_AUTH_TYPES: tuple[str, ...] = (
    AuthType.SHA512.value,
    AuthType.SHA384.value,
    AuthType.SHA256.value,
    AuthType.SHA1.value,
    AuthType.MD5.value,
    AuthType.PLAIN.value,
)

# ── Reply status markers (first character of a server message) ─────
MSG_ERROR = "!"
MSG_REDIRECT = "^"

REDIRECT_PREFIX = "^mapi:"


class RedirectScheme(str, enum.Enum):
    """URI schemes a redirect line may carry."""
    MEROVINGIAN = "merovingian"  # proxy: re-authenticate on the same socket
    MONETDB = "monetdb"          # direct: reconnect to another host/port


MAX_PROXY_REDIRECTS = 5

# ── Client identity ────────────────────────────────────────────────
ENDIANNESS = "BIG"
LANG_SQL = "sql"
LANG_SQL_PREFIX = "s"
CONTROL_PREFIX = "X"

# ── Defaults ───────────────────────────────────────────────────────
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 50000
DEFAULT_REPLY_SIZE = -1  # fetch everything

# ── Block framing ──────────────────────────────────────────────────
BLOCK_HEADER_SIZE = 2
MAX_BLOCK_SIZE = (1 << 13) - 2  # 8190 payload bytes
