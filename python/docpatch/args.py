from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Optional

from .constants import CONFIG_FILE, DEFAULT_LOGLEVEL, DEFAULT_LOGTARGET, VERSION
from .logging import LOG_LEVELS, LogTarget
from .utils.parsing import DataFormat


@dataclass
class DocpatchArgs:
    loglevel: str
    logtarget: str
    command: Optional[str]
    patch: Optional[str] = None
    document: Optional[str] = None
    output: Optional[str] = None
    format: DataFormat = DataFormat.JSON
    pointer: str = ""
    config: Optional[str] = None


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "docpatch",
        description="Apply RFC 6902 JSON patches to JSON or YAML documents, or serve a document over HTTP.",
    )
    parser.add_argument(
        "-V",
        "--version",
        help="Get version",
        action="version",
        version=VERSION,
    )
    parser.add_argument(
        "--loglevel",
        default=DEFAULT_LOGLEVEL,
        choices=LOG_LEVELS,
        help="Logging level.",
    )
    parser.add_argument(
        "--logtarget",
        default=DEFAULT_LOGTARGET,
        choices=[t.value for t in LogTarget],
        help="Logging target.",
    )
    subparsers = parser.add_subparsers(dest="command", help="command type")

    apply = subparsers.add_parser("apply", help="Apply a patch to a document and print or save the result.")
    apply.add_argument("patch", help="Path to the patch file (JSON or YAML), '-' for standard input.", type=str)
    apply.add_argument("document", help="Path to the document file (JSON or YAML).", type=str)
    apply.add_argument(
        "-o",
        "--output",
        help="Optional, path to the file where to save the patched document. If not specified, it is printed.",
        type=str,
        default=None,
    )
    formats = apply.add_mutually_exclusive_group()
    formats.add_argument(
        "--json",
        help="Output the document in JSON format, default.",
        const=DataFormat.JSON,
        action="store_const",
        dest="format",
    )
    formats.add_argument(
        "--yaml",
        help="Output the document in YAML format.",
        const=DataFormat.YAML,
        action="store_const",
        dest="format",
    )

    validate = subparsers.add_parser("validate", help="Check a patch and print its normalized JSON form.")
    validate.add_argument("patch", help="Path to the patch file (JSON or YAML), '-' for standard input.", type=str)

    get = subparsers.add_parser("get", help="Print the value a JSON pointer references in a document.")
    get.add_argument("document", help="Path to the document file (JSON or YAML).", type=str)
    get.add_argument(
        "-p",
        "--pointer",
        help="Optional, JSON pointer (RFC 6901). By default, the whole document is selected.",
        type=str,
        default="",
    )

    serve = subparsers.add_parser("serve", help="Serve a document over HTTP with a JSON patch API.")
    serve.add_argument(
        "-c",
        "--config",
        help=f"Optional, path to the configuration file (YAML/JSON). Defaults to '{CONFIG_FILE}' if it exists.",
        type=str,
        default=None,
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> DocpatchArgs:
    args_ns = create_parser().parse_args(argv)
    values = vars(args_ns)
    if values.get("format") is None:
        values["format"] = DataFormat.JSON
    return DocpatchArgs(**values)
