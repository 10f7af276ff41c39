import os
import re
from typing import Final, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .errors import ConfigError, EnvironmentVariableError

# Configuration defaults
DEFAULT_MAIN_PORT: Final[int] = 8080
DEFAULT_APP_PORT: Final[int] = 4242
DEFAULT_BIND_ADDRESS: Final[str] = "0.0.0.0"
DEFAULT_LOG_LEVEL: Final[str] = "info"

MAX_PORT: Final[int] = 65535
LOG_LEVELS: Final[tuple] = ("critical", "error", "warning", "info", "debug")

_PORT_PATTERN = re.compile(r"\+?[0-9]+")


class Config(BaseModel):
    """Process configuration, read once at startup."""

    model_config = ConfigDict(frozen=True)

    main_port: int = DEFAULT_MAIN_PORT
    app_port: int = DEFAULT_APP_PORT
    bind_address: str = DEFAULT_BIND_ADDRESS
    log_level: str = DEFAULT_LOG_LEVEL


def parse_port(var_name: str, value: str) -> int:
    """Parse ``value`` as an unsigned 16-bit port number."""
    error = EnvironmentVariableError(
        var_name, f"must be a valid port number (1-65535), got: {value}"
    )
    if _PORT_PATTERN.fullmatch(value) is None:
        raise error
    # Leading zeros are allowed; anything longer than 5 significant digits is out of range
    digits = value.lstrip("+").lstrip("0") or "0"
    if len(digits) > len(str(MAX_PORT)) or int(digits) > MAX_PORT:
        raise error
    return int(digits)


def _port_from_env(environ: Mapping[str, str], var_name: str, default: int) -> int:
    value = environ.get(var_name)
    if value is None:
        return default
    return parse_port(var_name, value)


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build a Config from environment variables.

    ``environ`` defaults to the live process environment; pass any mapping
    to load from somewhere else.

    Environment variables:
    - PORT: main server port (default 8080)
    - PORT_APP: application server port (default 4242)
    - BIND_ADDRESS: bind address for both servers (default "0.0.0.0")
    - LOG_LEVEL: root log level (default "info")
    """
    if environ is None:
        environ = os.environ

    main_port = _port_from_env(environ, "PORT", DEFAULT_MAIN_PORT)
    app_port = _port_from_env(environ, "PORT_APP", DEFAULT_APP_PORT)
    bind_address = environ.get("BIND_ADDRESS", DEFAULT_BIND_ADDRESS)

    log_level = environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).lower()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: {log_level}"
        )

    return Config(
        main_port=main_port,
        app_port=app_port,
        bind_address=bind_address,
        log_level=log_level,
    )
