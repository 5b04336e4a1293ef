"""Runtime settings.

Configuration via environment variables (a ``.env`` file in the working
directory is read first and never overrides variables already set):

- GUM_HOST (default: localhost)
- PORT or GUM_PORT (default: 8080; PORT wins, as set by most PaaS hosts)
- GUM_REDIRECTS: comma separated ``prefix=destination`` pairs
- GUM_STATIC_ROOTS: directories of static HTML, separated by os.pathsep
- GUM_JEKYLL_ROOT: Jekyll site directory
- GUM_DOCUMENT_EXTENSIONS: comma separated extensions scanned in static roots
- GUM_LOG_LEVEL (default: INFO)
"""
from __future__ import annotations

import logging
import os
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from gum.errors import ConfigurationError


class RedirectSpec(BaseModel):
    prefix: str
    destination: str


class Settings(BaseModel):
    host: str = "localhost"
    port: int = Field(8080, ge=0, le=65535)
    redirects: List[RedirectSpec] = Field(default_factory=list)
    static_roots: List[str] = Field(default_factory=list)
    jekyll_root: Optional[str] = None
    document_extensions: List[str] = Field(default_factory=lambda: [".html"])
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level


def parse_redirect(value: str) -> RedirectSpec:
    """Parse ``prefix=destination``; the destination may itself contain '='."""
    if "=" not in value:
        raise ConfigurationError(f"redirect must be PREFIX=DESTINATION, got {value!r}")
    prefix, destination = value.split("=", 1)
    return RedirectSpec(prefix=prefix.strip(), destination=destination.strip())


def parse_addr(value: str) -> Tuple[str, int]:
    host, sep, port = value.rpartition(":")
    if not sep:
        raise ConfigurationError(f"address must be HOST:PORT, got {value!r}")
    try:
        return host or "localhost", int(port)
    except ValueError:
        raise ConfigurationError(f"invalid port in address {value!r}") from None


def _split(value: Optional[str], sep: str) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(sep) if item.strip()]


def load_env_file(path: str = ".env") -> None:
    """Load KEY=VALUE lines from ``path`` into os.environ if present.

    Only sets variables that aren't already present in the process environment.
    """
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or "=" not in s:
                continue
            key, val = s.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            if key and not os.environ.get(key):
                os.environ[key] = val


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """Build Settings from the environment, raising ConfigurationError on bad values."""
    if env_file:
        load_env_file(env_file)

    values = {}
    if os.getenv("GUM_HOST"):
        values["host"] = os.getenv("GUM_HOST")
    port = os.getenv("PORT") or os.getenv("GUM_PORT")
    if port:
        values["port"] = port
    values["redirects"] = [parse_redirect(r) for r in _split(os.getenv("GUM_REDIRECTS"), ",")]
    values["static_roots"] = _split(os.getenv("GUM_STATIC_ROOTS"), os.pathsep)
    if os.getenv("GUM_JEKYLL_ROOT"):
        values["jekyll_root"] = os.getenv("GUM_JEKYLL_ROOT")
    extensions = _split(os.getenv("GUM_DOCUMENT_EXTENSIONS"), ",")
    if extensions:
        values["document_extensions"] = extensions
    if os.getenv("GUM_LOG_LEVEL"):
        values["log_level"] = os.getenv("GUM_LOG_LEVEL")

    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc
