"""Marshal free-form argument text into ABI-typed values and back.

Arguments arrive as one comma-delimited string. There is no escaping, so a
comma can never appear inside a single argument: multi-element arrays,
tuples, and strings containing commas cannot be expressed. Array and tuple
tokens are read as JSON, which leaves single-element arrays usable.
"""

from __future__ import annotations

import json
import re
from typing import Any, List, Sequence, Tuple

from eth_abi import abi as eth_abi
from eth_abi.exceptions import ParseError
from eth_utils import decode_hex, encode_hex, is_address, is_hex, to_checksum_address

from .errors import ArityMismatch, TypeCoercionFailure
from .models import FunctionDescriptor, Parameter

DELIMITER = ","
_ARRAY_TYPE = re.compile(r"^(?P<inner>.+)\[(?P<size>\d*)\]$")
_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


class _Invalid(ValueError):
    """Internal signal that a token does not fit its declared type."""


def split_arguments(raw_text: str, expected: int) -> List[str]:
    """Split ``raw_text`` into positional tokens."""

    if expected == 0 and not (raw_text or "").strip():
        return []
    return (raw_text or "").split(DELIMITER)


def encode(descriptor: FunctionDescriptor, raw_text: str) -> Tuple[Any, ...]:
    """Turn ``raw_text`` into the ordered values ``descriptor`` expects."""

    tokens = split_arguments(raw_text, len(descriptor.inputs))
    if len(tokens) != len(descriptor.inputs):
        raise ArityMismatch(len(descriptor.inputs), len(tokens))
    values: List[Any] = []
    for index, (token, param) in enumerate(zip(tokens, descriptor.inputs)):
        try:
            value = _coerce(token, param.type, param.components)
        except _Invalid as exc:
            raise TypeCoercionFailure(index, param.canonical_type, token, str(exc)) from exc
        if not _encodable(param.canonical_type, value):
            raise TypeCoercionFailure(index, param.canonical_type, token, "value out of range for type")
        values.append(value)
    return tuple(values)


def _encodable(abi_type: str, value: Any) -> bool:
    try:
        return eth_abi.is_encodable(abi_type, value)
    except (ParseError, ValueError, TypeError):
        return False


def _parse_json(value: Any, abi_type: str) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value.strip())
    except json.JSONDecodeError as exc:
        raise _Invalid(f"{abi_type} arguments must be written as JSON") from exc


def _coerce(value: Any, abi_type: str, components: Sequence[Parameter] = ()) -> Any:
    array = _ARRAY_TYPE.match(abi_type)
    if array:
        parsed = _parse_json(value, abi_type)
        if not isinstance(parsed, list):
            raise _Invalid(f"{abi_type} arguments must decode to a list")
        size = array.group("size")
        if size and len(parsed) != int(size):
            raise _Invalid(f"expected {size} elements, received {len(parsed)}")
        return [_coerce(item, array.group("inner"), components) for item in parsed]
    if abi_type == "tuple":
        parsed = _parse_json(value, abi_type)
        if isinstance(parsed, dict):
            parsed = [parsed.get(component.name) for component in components]
        if not isinstance(parsed, list) or len(parsed) != len(components):
            raise _Invalid(f"tuple arguments must list {len(components)} components")
        return tuple(
            _coerce(item, component.type, component.components) for item, component in zip(parsed, components)
        )
    if abi_type == "string":
        if not isinstance(value, str):
            raise _Invalid("expected text")
        return value
    if abi_type.startswith("uint") or abi_type.startswith("int"):
        return _coerce_int(value)
    if abi_type == "address":
        text = str(value).strip()
        if not is_address(text):
            raise _Invalid("expected a 20-byte hex address")
        return to_checksum_address(text)
    if abi_type == "bool":
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise _Invalid("expected true or false")
    if abi_type.startswith("bytes"):
        text = str(value).strip()
        if not text.startswith("0x") or not is_hex(text) or len(text) % 2:
            raise _Invalid("expected 0x-prefixed hex")
        decoded = decode_hex(text)
        size = abi_type[len("bytes"):]
        if size and len(decoded) != int(size):
            raise _Invalid(f"expected exactly {size} bytes, received {len(decoded)}")
        return decoded
    return value.strip() if isinstance(value, str) else value


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        raise _Invalid("expected a number")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    try:
        if digits.lower().startswith("0x"):
            number = int(digits, 16)
        else:
            if not digits.isdigit():
                raise _Invalid("expected a number")
            number = int(digits, 10)
    except ValueError as exc:
        raise _Invalid("expected a number") from exc
    return -number if negative else number


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return encode_hex(bytes(value))
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return encode_hex(bytes(value))
    if isinstance(value, (list, tuple)):
        return json.dumps(_jsonable(value))
    return str(value)


def stringify(values: Sequence[Any]) -> str:
    """Render decoded return values for the status channel."""

    if not values:
        return ""
    if len(values) == 1:
        return _render(values[0])
    return json.dumps(_jsonable(list(values)))


__all__ = [
    "DELIMITER",
    "encode",
    "split_arguments",
    "stringify",
]
