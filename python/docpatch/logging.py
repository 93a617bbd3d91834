from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from enum import Enum
from typing import Any, cast

from .constants import NO_PREFIX_FORMAT_ENV_VAR, SERVICE_NAME


class LogTarget(str, Enum):
    STDOUT = "stdout"
    SYSLOG = "syslog"
    STDERR = "stderr"


NOTICE = (logging.WARNING + logging.INFO) // 2

LOG_LEVELS = ("critical", "error", "warning", "notice", "info", "debug")

_config_to_level = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "notice": NOTICE,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_level_to_name = {
    logging.CRITICAL: "CRIT",
    logging.ERROR: "ERRO",
    logging.WARNING: "WARN",
    NOTICE: "NOTI",
    logging.INFO: "INFO",
    logging.DEBUG: "DEBG",
}


class DocpatchLogger(logging.Logger):
    def notice(self, message: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(NOTICE):
            self._log(NOTICE, message, args, **kwargs)


logging.setLoggerClass(DocpatchLogger)


for level, name in _level_to_name.items():
    logging.addLevelName(level, name)


def get_logger(name: str) -> DocpatchLogger:
    return cast(DocpatchLogger, logging.getLogger(name))


SERVICE_NAME_LEN = 13

BASIC_FORMAT = "%(name)s: %(message)s"
NO_PREFIX_FORMAT = f"[%(levelname)s] {BASIC_FORMAT}"


def get_level(name: str) -> int:
    return _config_to_level[name]


def get_pretty_format(service: str, stream: str) -> str:
    service = service.rjust(SERVICE_NAME_LEN)
    return f"%(asctime)s {service}[%(process)d]{stream}: [%(levelname)s] {BASIC_FORMAT}"


def get_formatter(service: str, target: LogTarget) -> logging.Formatter:
    no_prefix = bool(os.environ.get(NO_PREFIX_FORMAT_ENV_VAR) == "true")

    if target == LogTarget.SYSLOG:
        return logging.Formatter(BASIC_FORMAT)
    if no_prefix:
        return logging.Formatter(NO_PREFIX_FORMAT)

    stream = ""
    if target == LogTarget.STDERR:
        stream = "(stderr)"
    return logging.Formatter(get_pretty_format(service, stream))


def get_logging_handler(target: LogTarget) -> logging.Handler:
    if target == LogTarget.SYSLOG:
        return logging.handlers.SysLogHandler(address="/dev/log")
    if target == LogTarget.STDERR:
        return logging.StreamHandler(sys.stderr)
    return logging.StreamHandler(sys.stdout)


def startup_logging(loglevel: str, logtarget: str = LogTarget.STDERR.value) -> None:
    """Log into a memory buffer until the final logging configuration is known."""

    level = get_level(loglevel)
    handler = get_logging_handler(LogTarget(logtarget))
    handler.setFormatter(get_formatter(SERVICE_NAME, LogTarget(logtarget)))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(logging.handlers.MemoryHandler(10_000, logging.ERROR, handler))


def configure_logging(loglevel: str, logtarget: str, service: str = SERVICE_NAME) -> None:
    target = LogTarget(logtarget)
    handler = get_logging_handler(target)
    handler.setFormatter(get_formatter(service, target))

    root = logging.getLogger()

    if root.handlers:
        old = root.handlers[0]
        # if we had a MemoryHandler before, we should give it the new handler where we can flush it
        if isinstance(old, logging.handlers.MemoryHandler):
            old.setTarget(handler)

        # stop the old handler
        old.flush()
        old.close()
        root.removeHandler(old)

    # configure the new handler
    root.addHandler(handler)
    root.setLevel(get_level(loglevel))
