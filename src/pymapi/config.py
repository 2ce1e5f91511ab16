"""Client configuration: keyword, DSN, and YAML/TOML/JSON file sources."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping
from urllib.parse import unquote, urlsplit

from .protocol.constants import (
    DEFAULT_AUTH_TYPES, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_REPLY_SIZE, LANG_SQL,
)


@dataclass(frozen=True)
class ClientConfig:
    """Everything one connection attempt needs to know about the client.

    Instances are immutable. Handshake stages return updated copies
    (see :meth:`replace`), so each transition leaves an auditable snapshot.

    ``auth_type`` and ``protocol_version`` are empty until negotiated.
    """

    username: str = ""
    password: str = field(default="", repr=False)
    database: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    language: str = LANG_SQL
    reply_size: int = DEFAULT_REPLY_SIZE
    auth_types: tuple[str, ...] = DEFAULT_AUTH_TYPES
    max_redirect_hops: int | None = None
    timeout: float | None = None
    auth_type: str = ""
    protocol_version: str = ""

    def replace(self, **changes: Any) -> ClientConfig:
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ClientConfig:
        """Build a config from a flat mapping of field names.

        Raises
        ------
        ValueError
            If the mapping carries keys that are not config fields.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        kwargs = dict(data)
        if 'auth_types' in kwargs:
            value = kwargs['auth_types']
            if isinstance(value, str):
                value = value.split(',')
            kwargs['auth_types'] = tuple(value)
        if 'port' in kwargs:
            kwargs['port'] = int(kwargs['port'])
        return cls(**kwargs)

    @classmethod
    def from_dsn(cls, dsn: str, **overrides: Any) -> ClientConfig:
        """Create a config from a DSN string.

        Format: ``[mapi:]monetdb://[user[:password]@]host[:port]/database``
        """
        raw = dsn.removeprefix('mapi:')
        parts = urlsplit(raw)
        if parts.scheme != 'monetdb' or not parts.hostname:
            raise ValueError(f"Invalid MonetDB DSN: {dsn!r}")
        try:
            port = parts.port or DEFAULT_PORT
        except ValueError:
            raise ValueError(f"Invalid port in MonetDB DSN: {dsn!r}") from None
        kwargs: dict[str, Any] = {
            'host': parts.hostname,
            'port': port,
            'database': parts.path.lstrip('/'),
            'username': unquote(parts.username or ''),
            'password': unquote(parts.password or ''),
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def __str__(self) -> str:
        return f"mapi:monetdb://{self.host}:{self.port}/{self.database}"


def load_config(path: str | Path) -> dict[str, Any]:
    """Read MAPI connection settings from a JSON, TOML or YAML file.

    The file must hold a mapping: either the settings themselves or one
    table per server, picked later with ``config_from_file(section=...)``.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the extension is unknown, the file does not parse, or it does
        not hold a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Connection settings file not found: {path}")

    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise ValueError(
            f"Cannot read connection settings from {path.name}: "
            f"expected one of {', '.join(sorted(_LOADERS))}"
        )
    data = loader(path)
    if not isinstance(data, dict):
        raise ValueError(f"Connection settings in {path} must be a mapping, "
                         f"got {type(data).__name__}")
    return data


def config_from_file(path: str | Path, section: str | None = None) -> ClientConfig:
    """Load a :class:`ClientConfig` from a config file.

    A ``dsn`` key, when present, is parsed first and the remaining keys
    override it. *section* selects a nested table (e.g. one per server).
    """
    data = load_config(path)
    if section is not None:
        if section not in data:
            raise ValueError(f"Section {section!r} not found in {path}")
        data = data[section]
    data = dict(data)
    dsn = data.pop('dsn', None)
    if dsn is not None:
        base = ClientConfig.from_dsn(dsn)
        return ClientConfig.from_dict({**dataclasses.asdict(base), **data})
    return ClientConfig.from_dict(data)


# ── Internal loaders ─────────────────────────────────────────────

def _load_json(path: Path) -> Any:
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON connection settings in {path}: {e}") from e


def _load_toml(path: Path) -> Any:
    """TOML via ``tomllib`` on 3.11+, else the ``tomli`` backport."""
    try:
        import tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ModuleNotFoundError:
            raise ImportError(
                f"Reading {path.name} needs Python 3.11+ or the 'tomli' package. "
                "Install with: pip install pymapi[toml]"
            )
    with open(path, 'rb') as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Malformed TOML connection settings in {path}: {e}") from e


def _load_yaml(path: Path) -> Any:
    """YAML via ``pyyaml``; ``safe_load`` only, plain data in settings files."""
    try:
        import yaml
    except ModuleNotFoundError:
        raise ImportError(
            f"Reading {path.name} needs the 'pyyaml' package. "
            "Install with: pip install pymapi[yaml]"
        )
    with open(path) as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML connection settings in {path}: {e}") from e


_LOADERS: dict[str, Callable[[Path], Any]] = {
    '.json': _load_json,
    '.toml': _load_toml,
    '.yaml': _load_yaml,
    '.yml': _load_yaml,
}
