"""
Decoding of JSON response bodies into caller-supplied target types.
"""

import dataclasses
import enum
import json
import types
import typing
from collections.abc import Mapping
from typing import Any

from .exceptions import DecodeError

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


class _Mismatch(Exception):
    """A decoded value does not fit the target type at some location."""

    def __init__(self, where: str, message: str):
        self.where = where
        super().__init__(f"{where}: {message}")


def decode_json(body: bytes, into: Any, status: int) -> Any:
    """
    Decode the first JSON value in body into the target type.

    Anything after the first value is ignored. The target may be a
    dataclass, a plain type such as dict or int, a parameterized generic
    such as list[Item] or dict[str, int], an optional or union type, an
    Enum, or Any. Dataclass fields are filled recursively from their type
    hints; unknown keys are ignored. JSON null decodes to None at any level.

    Raises:
        DecodeError: If the body is not JSON or does not fit the target
    """
    try:
        text = body.decode("utf-8").lstrip()
        value, _ = json.JSONDecoder().raw_decode(text)
    except ValueError as e:
        raise DecodeError(f"Invalid JSON response: {e}", status, body) from e

    try:
        return _convert(value, into, "$")
    except _Mismatch as e:
        raise DecodeError(f"Cannot decode into {_type_name(into)}: {e}", status, body) from e


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def _json_type(value: Any) -> str:
    return type(value).__name__


def _convert(value: Any, tp: Any, where: str) -> Any:
    if tp is Any or tp is object or value is None:
        return value

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        return _convert_union(value, args, where)
    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        return _convert_dataclass(value, tp, where)
    if origin in _SEQUENCE_ORIGINS or tp in _SEQUENCE_ORIGINS:
        return _convert_sequence(value, origin or tp, args, where)
    if origin is dict or origin is Mapping or tp is Mapping:
        return _convert_mapping(value, args, where)
    if origin is not None:
        # Other generics are checked against their unparameterized type only.
        tp = origin

    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        try:
            return tp(value)
        except ValueError as e:
            raise _Mismatch(where, str(e)) from e
    if tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif tp is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif isinstance(tp, type) and isinstance(value, tp):
        return value
    raise _Mismatch(where, f"expected {_type_name(tp)}, got {_json_type(value)}")


def _convert_union(value: Any, args: tuple[Any, ...], where: str) -> Any:
    errors = []
    for arm in args:
        if arm is type(None):
            continue
        try:
            return _convert(value, arm, where)
        except _Mismatch as e:
            errors.append(str(e))
    raise _Mismatch(where, f"no union member matches {_json_type(value)} ({'; '.join(errors)})")


def _convert_dataclass(value: Any, tp: type, where: str) -> Any:
    if not isinstance(value, dict):
        raise _Mismatch(where, f"expected a JSON object for {tp.__name__}, got {_json_type(value)}")

    try:
        hints = typing.get_type_hints(tp)
    except (NameError, TypeError):
        hints = {}

    kwargs = {}
    for f in dataclasses.fields(tp):
        if not f.init or f.name not in value:
            continue
        field_type = hints.get(f.name, f.type)
        if isinstance(field_type, str):
            field_type = Any
        kwargs[f.name] = _convert(value[f.name], field_type, f"{where}.{f.name}")

    try:
        return tp(**kwargs)
    except TypeError as e:
        raise _Mismatch(where, f"cannot build {tp.__name__}: {e}") from e


def _convert_sequence(value: Any, origin: type, args: tuple[Any, ...], where: str) -> Any:
    if not isinstance(value, list):
        raise _Mismatch(where, f"expected a JSON array, got {_json_type(value)}")

    if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        if len(args) != len(value):
            raise _Mismatch(where, f"expected {len(args)} items, got {len(value)}")
        return tuple(_convert(item, arg, f"{where}[{i}]") for i, (item, arg) in enumerate(zip(value, args, strict=True)))

    item_type = args[0] if args else Any
    items = [_convert(item, item_type, f"{where}[{i}]") for i, item in enumerate(value)]
    return items if origin is list else origin(items)


def _convert_mapping(value: Any, args: tuple[Any, ...], where: str) -> dict[Any, Any]:
    if not isinstance(value, dict):
        raise _Mismatch(where, f"expected a JSON object, got {_json_type(value)}")

    key_type, value_type = args if len(args) == 2 else (Any, Any)
    return {
        _convert(key, key_type, f"{where}.<key {key!r}>"): _convert(item, value_type, f"{where}.{key}")
        for key, item in value.items()
    }
