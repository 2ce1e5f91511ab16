"""Hex digests keyed by MAPI auth-type name."""

from __future__ import annotations

import hashlib
from typing import Any, Callable

from .constants import AuthType

_HASHERS: dict[AuthType, Callable[..., Any]] = {
    AuthType.MD5: hashlib.md5,
    AuthType.SHA1: hashlib.sha1,
    AuthType.SHA256: hashlib.sha256,
    AuthType.SHA384: hashlib.sha384,
    AuthType.SHA512: hashlib.sha512,
}


def is_hashed(auth_type: str | AuthType) -> bool:
    """Whether *auth_type* digests the password (everything but PLAIN)."""
    return AuthType(auth_type) in _HASHERS


def hexdigest(algorithm: str | AuthType, value: str) -> str:
    """Return the lowercase hex digest of *value* using *algorithm*.

    ``PLAIN`` passes *value* through untouched.

    Raises
    ------
    ValueError
        If *algorithm* is not one of the known auth types.
    """
    try:
        auth_type = AuthType(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported digest algorithm: {algorithm!r}") from None
    if auth_type is AuthType.PLAIN:
        return value
    return _HASHERS[auth_type](value.encode("utf-8")).hexdigest()
