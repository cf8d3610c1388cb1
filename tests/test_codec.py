from __future__ import annotations

import pytest
from eth_utils import to_checksum_address

from abidesk.core import codec
from abidesk.core.errors import ArityMismatch, TypeCoercionFailure
from abidesk.core.models import FunctionDescriptor

from conftest import HOLDER


def _fn(*types: str) -> FunctionDescriptor:
    return FunctionDescriptor.from_abi(
        {
            "type": "function",
            "name": "sample",
            "stateMutability": "view",
            "inputs": [{"name": f"a{index}", "type": typ} for index, typ in enumerate(types)],
            "outputs": [],
        }
    )


def test_single_address_argument(interface) -> None:
    values = codec.encode(interface.find_function("balanceOf"), HOLDER)
    assert values == (to_checksum_address(HOLDER),)


def test_order_is_preserved_and_whitespace_trimmed(interface) -> None:
    values = codec.encode(interface.find_function("transfer"), f"{HOLDER}, 0x64")
    assert values == (to_checksum_address(HOLDER), 100)


@pytest.mark.parametrize("text, received", [(HOLDER, 1), (f"{HOLDER},1,2", 3)])
def test_arity_mismatch(interface, text: str, received: int) -> None:
    with pytest.raises(ArityMismatch) as exc:
        codec.encode(interface.find_function("transfer"), text)
    assert exc.value.expected == 2
    assert exc.value.received == received


def test_zero_argument_functions_accept_empty_text(interface) -> None:
    name = interface.find_function("name")
    assert codec.encode(name, "") == ()
    assert codec.encode(name, "   ") == ()
    with pytest.raises(ArityMismatch):
        codec.encode(name, "unexpected")


def test_non_numeric_token_reports_index(interface) -> None:
    with pytest.raises(TypeCoercionFailure) as exc:
        codec.encode(interface.find_function("transfer"), f"{HOLDER},lots")
    assert exc.value.index == 1
    assert exc.value.expected_type == "uint256"


@pytest.mark.parametrize(
    "typ, token",
    [
        ("uint8", "300"),
        ("uint256", "-1"),
        ("uint256", "1.5"),
        ("address", "0x1234"),
        ("bool", "maybe"),
        ("bytes32", "hello"),
        ("bytes4", "0x0102030405"),
        ("bytes4", "0x0102"),
        ("uint256[2]", "[1]"),
        ("uint256[]", "not json"),
    ],
)
def test_rejects_tokens_that_do_not_fit(typ: str, token: str) -> None:
    with pytest.raises(TypeCoercionFailure) as exc:
        codec.encode(_fn(typ), token)
    assert exc.value.index == 0
    assert exc.value.expected_type == typ


def test_scalar_coercions() -> None:
    descriptor = _fn("int8", "bool", "bytes2", "string")
    assert codec.encode(descriptor, "-5,yes,0xbeef, hi there ") == (-5, True, b"\xbe\xef", " hi there ")


def test_array_and_tuple_tokens_are_json() -> None:
    assert codec.encode(_fn("uint256[]"), "[7]") == ([7],)
    tuple_fn = FunctionDescriptor.from_abi(
        {
            "type": "function",
            "name": "setPoint",
            "inputs": [
                {"name": "p", "type": "tuple", "components": [{"name": "x", "type": "uint256"}]},
            ],
        }
    )
    assert codec.encode(tuple_fn, '{"x": 3}') == ((3,),)


def test_stringify_renders_decoded_values() -> None:
    assert codec.stringify((42,)) == "42"
    assert codec.stringify((True,)) == "true"
    assert codec.stringify(("hello",)) == "hello"
    assert codec.stringify((1, b"\x01")) == '[1, "0x01"]'
    assert codec.stringify(()) == ""
