# openai_cost/api/decode.py
"""
Raw response bytes -> typed models.

Wire keys are normalized by one structural pass (``normalize_keys``) and the
result is mapped onto the frozen dataclasses in ``openai_cost.models`` by
walking their type hints. Adding a field to a model is enough to decode it.
"""

from __future__ import annotations

import json
import re
from dataclasses import MISSING, fields, is_dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from ..models.costs import CostResponse, ErrorResponse
from ..models.errors import OpenAICostError

T = TypeVar("T")

_KEY_DELIMITERS = re.compile(r"[^0-9A-Za-z]+")
_NONE_TYPE = type(None)


class DecodeError(ValueError):
    """Structural mismatch between a payload and the expected model."""


# --------------------------------------------------------------------
# Key normalization
# --------------------------------------------------------------------
def normalize_key(key: str) -> str:
    """``"has_more"`` -> ``"has_more"``, ``"Next-Page"`` -> ``"next_page"``."""
    parts = [p for p in _KEY_DELIMITERS.split(key) if p]
    return "_".join(p.lower() for p in parts)


def normalize_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {normalize_key(str(k)): normalize_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [normalize_keys(v) for v in obj]
    return obj


# --------------------------------------------------------------------
# Generic dataclass construction
# --------------------------------------------------------------------
@lru_cache(maxsize=None)
def _hints(cls: type) -> Dict[str, Any]:
    return get_type_hints(cls)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _convert(tp: Any, value: Any, path: str) -> Any:
    origin = get_origin(tp)

    if origin is Union:
        args = get_args(tp)
        if value is None and _NONE_TYPE in args:
            return None
        inner = [a for a in args if a is not _NONE_TYPE]
        return _convert(inner[0], value, path)

    if value is None:
        raise DecodeError(f"{path}: unexpected null")

    if origin in (tuple, list):
        if not isinstance(value, list):
            raise DecodeError(f"{path}: expected array, got {type(value).__name__}")
        item_type = get_args(tp)[0]
        items = [_convert(item_type, v, f"{path}[{i}]") for i, v in enumerate(value)]
        return tuple(items) if origin is tuple else items

    if is_dataclass(tp):
        return build(tp, value, path)

    if tp is datetime:
        # Whole seconds since the epoch; integral floats are accepted as-is.
        if not _is_number(value) or (isinstance(value, float) and not value.is_integer()):
            raise DecodeError(f"{path}: expected integer epoch seconds, got {value!r}")
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as ex:
            raise DecodeError(f"{path}: timestamp out of range: {value!r}") from ex

    if tp is float:
        if not _is_number(value):
            raise DecodeError(f"{path}: expected number, got {value!r}")
        return float(value)

    if tp is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise DecodeError(f"{path}: expected integer, got {value!r}")
        return value

    for simple in (bool, str):
        if tp is simple:
            if not isinstance(value, simple):
                raise DecodeError(f"{path}: expected {simple.__name__}, got {type(value).__name__}")
            return value

    return value


def build(cls: Type[T], data: Any, path: str = "$") -> T:
    """Instantiate dataclass ``cls`` from a key-normalized mapping.

    Unknown keys are ignored. A missing key is an error unless the field has a
    default.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"{path}: expected object, got {type(data).__name__}")

    hints = _hints(cls)
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _convert(hints[f.name], data[f.name], f"{path}.{f.name}")
        elif f.default is MISSING and f.default_factory is MISSING:
            raise DecodeError(f"{path}: missing required key '{f.name}'")
    return cls(**kwargs)


def loads(cls: Type[T], content: bytes) -> T:
    try:
        payload = json.loads(content)
    except ValueError as ex:
        # JSONDecodeError and UnicodeDecodeError both land here.
        raise DecodeError(f"invalid JSON: {ex}") from ex
    except RecursionError as ex:
        raise DecodeError("invalid JSON: nested too deeply") from ex
    try:
        return build(cls, normalize_keys(payload))
    except RecursionError as ex:
        raise DecodeError("payload nested too deeply") from ex


# --------------------------------------------------------------------
# Public decoders
# --------------------------------------------------------------------
def body_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def decode_cost_response(content: bytes) -> CostResponse:
    try:
        return loads(CostResponse, content)
    except DecodeError as ex:
        raise OpenAICostError.decode_failure(str(ex), raw_body=body_text(content)) from ex


def decode_error_response(content: bytes) -> ErrorResponse:
    return loads(ErrorResponse, content)


__all__ = [
    "DecodeError",
    "normalize_key",
    "normalize_keys",
    "build",
    "loads",
    "body_text",
    "decode_cost_response",
    "decode_error_response",
]
