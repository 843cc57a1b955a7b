"""Database configuration: read from a URL, a mapping, or the ``[sql]`` section of an INI file."""

from __future__ import annotations

import configparser
import urllib.parse
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from .errors import DBError


class DatabaseConfig(BaseModel):
    """Connection settings for one database.

    ``type`` selects the dialect (``mysql``, ``postgresql``, ``sqlite``). For SQLite,
    ``database`` is the file path (``:memory:`` when empty). When ``lazy`` is False,
    the connection is opened as soon as a :class:`wasp.database.Database` is created.
    """

    type: Optional[str] = None
    hostname: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    lazy: bool = True

    @property
    def scheme(self) -> str:
        """Normalized dialect scheme (e.g. ``postgresql`` for ``postgresql+psycopg2``)."""
        if not self.type:
            raise DBError("No database type configured")
        return self.type.split("+")[0].lower()

    @classmethod
    def from_url(cls, url: str, **overrides: Any) -> DatabaseConfig:
        """Parse a URL such as ``mysql://user:pw@host:3306/app`` or ``sqlite:////tmp/app.db``."""
        parsed = urllib.parse.urlparse(url)
        if not parsed.scheme:
            raise DBError(f"Invalid database URL: {url}")
        if parsed.scheme.split("+")[0].lower() == "sqlite":
            database = (parsed.path or "")[1:] or parsed.hostname or ":memory:"
        else:
            database = (parsed.path or "")[1:] or None
        settings = {
            "type": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "username": urllib.parse.unquote(parsed.username) if parsed.username else None,
            "password": urllib.parse.unquote(parsed.password) if parsed.password else None,
            "database": database,
        }
        settings.update(overrides)
        return cls(**settings)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> DatabaseConfig:
        """Build from a mapping; a ``dsn`` (or ``url``) key is parsed first, other keys override it."""
        settings = {key: value for key, value in settings.items() if value not in (None, "")}
        url = settings.pop("dsn", None) or settings.pop("url", None)
        if url:
            return cls.from_url(url, **settings)
        return cls(**settings)

    @classmethod
    def from_ini(cls, path: str, section: str = "sql") -> DatabaseConfig:
        """Load the given section of an INI file (keys as in :meth:`from_mapping`)."""
        parser = configparser.ConfigParser()
        if not parser.read(path):
            raise DBError(f"Cannot read configuration file {path}")
        if not parser.has_section(section):
            raise DBError(f"Configuration file {path} has no [{section}] section")
        settings: dict[str, Any] = dict(parser.items(section))
        if "lazy" in settings:
            settings["lazy"] = parser.getboolean(section, "lazy")
        return cls.from_mapping(settings)


__all__ = ["DatabaseConfig"]
