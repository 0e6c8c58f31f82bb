"""
=============================================================================
CONFIGURATION
=============================================================================

Two configuration objects, both plain dataclasses:

    StaticOptions   What the static middleware serves (prefix, directory,
                    embedded or on-disk, index files). Frozen: built once,
                    shared by every request thread.

    ServerConfig    How the bundled HTTP bridge listens and logs.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    RESOLUTION ORDER                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Values passed in code / on the command line                    │
    │      └── StaticOptions(directory="./public")                        │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEBROOT=/srv/www                                           │
    │                                                                      │
    │   3. Dataclass defaults                                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The environment is read exactly once, by resolve_options() at setup time.
Nothing in the request path touches os.environ, so tests can pass a plain
dict instead of patching the process environment.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


WEBROOT_ENV = "WEBROOT"

_TRUTHY = {"1", "true", "yes", "on"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


class StaticConfigError(ValueError):
    """
    Raised when the static middleware cannot be set up.

    Always raised while constructing handlers, never while serving a
    request. A missing embedded root, for example, aborts startup instead of
    turning every request into a miss.
    """


def _env_flag(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class StaticOptions:
    """
    Options for the static middleware.

    =========================================================================
    FIELDS
    =========================================================================

        prefix:     URL path prefix to strip before lookup ("static" and
                    "/static" are equivalent). Empty = serve from "/".
        directory:  Directory on disk, or the slash-separated path of a
                    node in the embedded filesystem when `binfs` is set.
                    Empty = take WEBROOT from the environment.
        binfs:      Look files up in the embedded filesystem instead of
                    on disk.
        index:      Serve "index.html" for directory requests.

    =========================================================================
    """

    prefix: str = ""
    directory: str = ""
    binfs: bool = False
    index: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StaticOptions":
        """
        Build options from environment variables.

        STATIC_PREFIX   URL prefix (default: "")
        WEBROOT         Directory to serve (default: "")
        STATIC_BINFS    Use the embedded filesystem (1/true/yes/on)
        STATIC_INDEX    Serve index.html for directories (1/true/yes/on)
        """
        environ = os.environ if environ is None else environ
        return cls(
            prefix=environ.get("STATIC_PREFIX", ""),
            directory=environ.get(WEBROOT_ENV, ""),
            binfs=_env_flag(environ, "STATIC_BINFS"),
            index=_env_flag(environ, "STATIC_INDEX"),
        )

    def validate(self) -> None:
        """Fail fast on options that can never work."""
        if self.binfs and ".." in self.directory.split("/"):
            raise StaticConfigError(
                f"Embedded directory may not contain '..': {self.directory!r}"
            )


def resolve_options(
    options: Optional[StaticOptions] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StaticOptions:
    """
    Turn user-supplied options into the options a handler runs with.

    An empty directory falls back to WEBROOT from `environ` (os.environ if
    not given). Explicit values always win.

    Example:
        resolve_options(StaticOptions(prefix="static"), {"WEBROOT": "/srv"})
        # StaticOptions(prefix='static', directory='/srv', ...)
    """
    resolved = options or StaticOptions()
    if not resolved.directory:
        environ = os.environ if environ is None else environ
        resolved = replace(resolved, directory=environ.get(WEBROOT_ENV, ""))
    resolved.validate()
    return resolved


@dataclass
class ServerConfig:
    """Listening and logging settings for the bundled HTTP bridge."""

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 8080

    log_level: str = "INFO"

    log_format: str = "text"
    """
    Access log format: 'json' or 'text'.
    JSON suits log aggregators, text suits humans.
    """

    server_name: str = "static-fallback/1.0"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 8080)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        HTTP_LOG_FORMAT  Access log format (default: text)
        """
        environ = os.environ if environ is None else environ
        try:
            port = int(environ.get("HTTP_PORT", "8080"))
        except ValueError as e:
            raise StaticConfigError(f"Invalid HTTP_PORT: {environ.get('HTTP_PORT')!r}") from e
        return cls(
            host=environ.get("HTTP_HOST", "127.0.0.1"),
            port=port,
            log_level=environ.get("HTTP_LOG_LEVEL", "INFO").upper(),
            log_format=environ.get("HTTP_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        if not 0 <= self.port < 65536:
            raise StaticConfigError(f"Invalid port: {self.port}. Must be 0-65535.")
        if self.log_level.upper() not in LOG_LEVELS:
            raise StaticConfigError(f"Invalid log level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise StaticConfigError(f"Invalid log format: {self.log_format}")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and the package logger level."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("staticfallback").setLevel(numeric)
