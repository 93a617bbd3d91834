from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

from .constants import DEFAULT_LISTEN_HOST, DEFAULT_LISTEN_PORT, DEFAULT_LOGLEVEL, DEFAULT_LOGTARGET
from .errors import ConfigError, DataParsingError
from .logging import LOG_LEVELS, LogTarget
from .utils.parsing import try_to_parse


@dataclass
class ListenConfig:
    host: str = DEFAULT_LISTEN_HOST
    port: int = DEFAULT_LISTEN_PORT


@dataclass
class LoggingConfig:
    level: str = DEFAULT_LOGLEVEL
    target: str = DEFAULT_LOGTARGET


@dataclass
class ServerConfig:
    """
    Configuration of the document server.

    'document' is the file with the initial document, relative paths are resolved against
    the directory of the configuration file. With 'persist' enabled, every change is written back to it.
    """

    listen: ListenConfig = field(default_factory=ListenConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    document: Optional[Path] = None
    persist: bool = False


def _check_keys(data: Dict[str, Any], allowed: Tuple[str, ...], object_path: str) -> None:
    for key in data:
        if key not in allowed:
            expected = ", ".join(f"'{a}'" for a in allowed)
            raise ConfigError(f"unknown key '{key}', expected one of: {expected}", f"{object_path}/{key}")


def _get(data: Dict[str, Any], key: str, typ: Type[Any], default: Any, object_path: str) -> Any:
    if key not in data:
        return default
    value = data[key]
    # bool is an int, but 'port: true' is not a port
    if not isinstance(value, typ) or (typ is int and isinstance(value, bool)):
        raise ConfigError(
            f"expected {typ.__name__}, got '{type(value).__name__}' with value '{value}'", f"{object_path}/{key}"
        )
    return value


def _section(data: Dict[str, Any], key: str, object_path: str) -> Dict[str, Any]:
    return _get(data, key, dict, {}, object_path)


def config_from_dict(data: Any, base_dir: Optional[Path] = None) -> ServerConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"configuration must be an object, got '{type(data).__name__}'", "/")
    _check_keys(data, ("listen", "logging", "document", "persist"), "")

    listen_data = _section(data, "listen", "")
    _check_keys(listen_data, ("host", "port"), "/listen")
    listen = ListenConfig(
        host=_get(listen_data, "host", str, DEFAULT_LISTEN_HOST, "/listen"),
        port=_get(listen_data, "port", int, DEFAULT_LISTEN_PORT, "/listen"),
    )
    if not 0 < listen.port < 65536:
        raise ConfigError(f"port {listen.port} is out of range", "/listen/port")

    logging_data = _section(data, "logging", "")
    _check_keys(logging_data, ("level", "target"), "/logging")
    logging_config = LoggingConfig(
        level=_get(logging_data, "level", str, DEFAULT_LOGLEVEL, "/logging"),
        target=_get(logging_data, "target", str, DEFAULT_LOGTARGET, "/logging"),
    )
    if logging_config.level not in LOG_LEVELS:
        raise ConfigError(f"unknown logging level '{logging_config.level}'", "/logging/level")
    if logging_config.target not in {t.value for t in LogTarget}:
        raise ConfigError(f"unknown logging target '{logging_config.target}'", "/logging/target")

    document: Optional[Path] = None
    raw_document = _get(data, "document", str, None, "")
    if raw_document is not None:
        document = Path(raw_document)
        if not document.is_absolute() and base_dir is not None:
            document = base_dir / document

    persist = _get(data, "persist", bool, False, "")
    if persist and document is None:
        raise ConfigError("'persist' requires a 'document' file", "/persist")

    return ServerConfig(listen=listen, logging=logging_config, document=document, persist=persist)


def load_config(path: Path) -> ServerConfig:
    """Load the server configuration from a YAML or JSON file."""

    try:
        with open(path, "r", encoding="utf8") as f:
            data = try_to_parse(f.read())
    except OSError as e:
        raise ConfigError(f"failed to read configuration file '{path}': {e}") from e
    except DataParsingError as e:
        raise ConfigError(f"failed to parse configuration file '{path}': {e}") from e
    return config_from_dict(data, path.absolute().parent)
