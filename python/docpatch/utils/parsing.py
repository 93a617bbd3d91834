"""JSON and YAML reading and writing. Duplicate object keys are rejected in both formats."""

import json
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Tuple

import yaml
from yaml.constructor import ConstructorError
from yaml.nodes import MappingNode, Node

from docpatch.errors import DataParsingError, InvalidJsonError
from docpatch.value import JsonKind, kind_of


def _unique_pairs(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    # 'object_pairs_hook' for 'json.loads()'
    obj: Dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise DataParsingError(f"duplicate object key '{key}'")
        obj[key] = value
    return obj


class _UniqueKeysLoader(yaml.SafeLoader):
    """yaml.SafeLoader that fails on duplicate mapping keys."""

    def construct_mapping(self, node: Node, deep: bool = False) -> Dict[Hashable, Any]:
        if not isinstance(node, MappingNode):
            raise ConstructorError(None, None, f"expected a mapping node, but found {node.id}", node.start_mark)

        # resolves merge keys ('<<') into plain key/value pairs
        self.flatten_mapping(node)

        mapping: Dict[Hashable, Any] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)  # type: ignore
            if not isinstance(key, Hashable):
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark, "found unhashable key", key_node.start_mark
                )
            if key in mapping:
                raise DataParsingError(f"duplicate mapping key '{key}' {key_node.start_mark}")
            mapping[key] = self.construct_object(value_node, deep=deep)  # type: ignore
        return mapping


def check_json_value(data: Any, path: str = "") -> None:
    """
    Make sure decoded data is made of JSON values only.

    YAML has more types than JSON, timestamps become 'datetime' objects and mapping keys may be
    numbers or booleans. Such data could not be addressed by a pointer or written back as JSON.
    """

    try:
        kind = kind_of(data, path)
    except InvalidJsonError as e:
        raise DataParsingError(f"value of type '{type(data).__name__}' is not a JSON value", path) from e

    if kind is JsonKind.OBJECT:
        for key, value in data.items():
            if not isinstance(key, str):
                raise DataParsingError(f"object key '{key}' of type '{type(key).__name__}' is not a string", path)
            check_json_value(value, f"{path}/{key}")
    elif kind is JsonKind.ARRAY:
        for i, item in enumerate(data):
            check_json_value(item, f"{path}/{i}")


class DataFormat(Enum):
    YAML = auto()
    JSON = auto()

    @staticmethod
    def from_path(path: Path) -> "DataFormat":
        if path.suffix in (".yaml", ".yml"):
            return DataFormat.YAML
        return DataFormat.JSON

    def parse_to_dict(self, text: str) -> Any:
        if self is DataFormat.YAML:
            data = yaml.load(text, Loader=_UniqueKeysLoader)  # type: ignore
            check_json_value(data)
            return data
        if self is DataFormat.JSON:
            return json.loads(text, object_pairs_hook=_unique_pairs)
        raise NotImplementedError(f"Parsing of format '{self}' is not implemented")

    def dict_dump(self, data: Any, indent: Optional[int] = None) -> str:
        if self is DataFormat.YAML:
            return yaml.safe_dump(data, indent=indent, sort_keys=False, allow_unicode=True)  # type: ignore
        if self is DataFormat.JSON:
            return json.dumps(data, indent=indent, ensure_ascii=False)
        raise NotImplementedError(f"Exporting to '{self}' format is not implemented")


def parse_yaml(data: str) -> Any:
    return DataFormat.YAML.parse_to_dict(data)


def parse_json(data: str) -> Any:
    return DataFormat.JSON.parse_to_dict(data)


def try_to_parse(data: str) -> Any:
    """Parse the data as JSON, or as YAML when it is not valid JSON."""

    try:
        return parse_json(data)
    except json.JSONDecodeError as je:
        try:
            return parse_yaml(data)
        except yaml.YAMLError as ye:
            raise DataParsingError(f"failed to parse data, JSON: {je}, YAML: {ye}") from ye
