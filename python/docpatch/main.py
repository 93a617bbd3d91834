from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, List, NoReturn, Optional

from .args import DocpatchArgs, create_parser, parse_args
from .config import ServerConfig, load_config
from .constants import CONFIG_FILE
from .errors import ApplyError, BadStringEncodingError, ConfigError, DataParsingError, ParseError
from .logging import configure_logging, get_logger, startup_logging
from .patch import Patch
from .patcher import Patcher, resolve
from .pointer import JsonPointer
from .server import run_server
from .utils.parsing import DataFormat, try_to_parse

logger = get_logger(__name__)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "rb") as f:
        data = f.read()
    try:
        return data.decode("utf8")
    except UnicodeDecodeError as e:
        raise BadStringEncodingError(f"file '{path}' is not UTF-8 encoded: {e}") from e


def load_data(path: str) -> Any:
    return try_to_parse(_read_input(path))


def _write_output(args: DocpatchArgs, document: Any) -> None:
    text = args.format.dict_dump(document, indent=4)
    if args.output:
        with open(args.output, "w", encoding="utf8") as f:
            f.write(text)
        print(f"saved to: {args.output}")
    else:
        print(text)


def command_apply(args: DocpatchArgs) -> int:
    assert args.patch is not None and args.document is not None
    patch = Patch.from_json(load_data(args.patch))
    document = load_data(args.document)

    logger.debug(f"Applying {len(patch)} operation(s) from '{args.patch}' to '{args.document}'")
    result = Patcher.apply(patch, document)
    _write_output(args, result)
    return 0


def command_validate(args: DocpatchArgs) -> int:
    assert args.patch is not None
    patch = Patch.from_json(load_data(args.patch))
    print(DataFormat.JSON.dict_dump(patch.to_json(), indent=4))
    return 0


def command_get(args: DocpatchArgs) -> int:
    assert args.document is not None
    document = load_data(args.document)
    value = resolve(document, JsonPointer(args.pointer))
    print(args.format.dict_dump(value, indent=4))
    return 0


def command_serve(args: DocpatchArgs) -> int:
    config: ServerConfig
    if args.config is not None:
        config = load_config(Path(args.config))
    elif CONFIG_FILE.exists():
        config = load_config(CONFIG_FILE)
    else:
        logger.notice(f"No configuration file found at '{CONFIG_FILE}', using defaults")
        config = ServerConfig()
    return run_server(config)


_commands = {
    "apply": command_apply,
    "validate": command_validate,
    "get": command_get,
    "serve": command_serve,
}


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.command is None:
        create_parser().print_help()
        return 0

    # the server reconfigures logging once its configuration is loaded
    if args.command == "serve":
        startup_logging(args.loglevel, args.logtarget)
    else:
        configure_logging(args.loglevel, args.logtarget)

    try:
        return _commands[args.command](args)
    except (ParseError, DataParsingError, ConfigError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except ApplyError as e:
        print(f"patch failed: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def main() -> NoReturn:
    sys.exit(run())
