"""Immutable records passed between the abidesk components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from eth_utils import encode_hex, function_signature_to_4byte_selector

from .errors import AbideskError

NETWORK_NAMES: Dict[int, str] = {
    1: "mainnet",
    5: "goerli",
    10: "optimism",
    137: "matic",
    8453: "base",
    42161: "arbitrum",
    11155111: "sepolia",
}

READ_RESULT = "read-result"
TX_HASH = "tx-hash"
SIGNATURE = "signature"
CONNECTED = "connected"
ABI_LOADED = "abi-loaded"
SELECTED = "selected"


class Classification(str, Enum):
    READ_ONLY = "read-only"
    MUTATING = "mutating"


class DispatchState(str, Enum):
    IDLE = "idle"
    CONTRACT_LOADED = "contract-loaded"
    FUNCTION_SELECTED = "function-selected"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class NetworkIdentity:
    chain_id: int
    display_name: str

    @classmethod
    def from_chain_id(cls, chain_id: int, name: Optional[str] = None) -> "NetworkIdentity":
        label = name or NETWORK_NAMES.get(int(chain_id), "unknown")
        return cls(chain_id=int(chain_id), display_name=f"{label} ({int(chain_id)})")


@dataclass(frozen=True)
class Parameter:
    """A single ABI input or output slot."""

    name: str
    type: str
    components: Tuple["Parameter", ...] = ()

    @classmethod
    def from_abi(cls, entry: Mapping[str, Any]) -> "Parameter":
        components = tuple(cls.from_abi(item) for item in entry.get("components", []) or [])
        return cls(name=str(entry.get("name", "")), type=str(entry.get("type", "")), components=components)

    @property
    def canonical_type(self) -> str:
        """Return the type as used in signatures, expanding tuples to ``(t1,t2)``."""

        if not self.type.startswith("tuple"):
            return self.type
        inner = ",".join(component.canonical_type for component in self.components)
        return f"({inner}){self.type[len('tuple'):]}"


@dataclass(frozen=True)
class FunctionDescriptor:
    name: str
    inputs: Tuple[Parameter, ...] = ()
    outputs: Tuple[Parameter, ...] = ()
    state_mutability: Optional[str] = None
    kind: str = "function"

    @classmethod
    def from_abi(cls, entry: Mapping[str, Any]) -> "FunctionDescriptor":
        mutability = entry.get("stateMutability")
        if mutability is None and entry.get("constant") is True:
            # pre-0.5 compilers only emitted the ``constant`` flag
            mutability = "view"
        return cls(
            name=str(entry.get("name", "")),
            inputs=tuple(Parameter.from_abi(item) for item in entry.get("inputs", []) or []),
            outputs=tuple(Parameter.from_abi(item) for item in entry.get("outputs", []) or []),
            state_mutability=str(mutability) if mutability is not None else None,
            kind=str(entry.get("type", "function")),
        )

    @property
    def input_types(self) -> List[str]:
        return [param.canonical_type for param in self.inputs]

    @property
    def output_types(self) -> List[str]:
        return [param.canonical_type for param in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> str:
        return encode_hex(function_signature_to_4byte_selector(self.signature))

    @property
    def label(self) -> str:
        return f"{self.name} ({self.state_mutability or 'nonpayable'})"


@dataclass(frozen=True)
class ContractInterface:
    """A fetched ABI bound to the address and chain it was fetched for."""

    address: str
    chain_id: Optional[int]
    entries: Tuple[Mapping[str, Any], ...]
    functions: Tuple[FunctionDescriptor, ...] = field(default=())

    def function_names(self) -> List[str]:
        return [descriptor.name for descriptor in self.functions]

    def find_function(self, name: str) -> Optional[FunctionDescriptor]:
        """Return the first function called ``name``; overloads are not disambiguated."""

        for descriptor in self.functions:
            if descriptor.name == name:
                return descriptor
        return None

    def overloads(self, name: str) -> List[FunctionDescriptor]:
        return [descriptor for descriptor in self.functions if descriptor.name == name]

    def summary(self) -> Dict[str, int]:
        return {
            "functions": sum(1 for item in self.entries if item.get("type") == "function"),
            "events": sum(1 for item in self.entries if item.get("type") == "event"),
            "errors": sum(1 for item in self.entries if item.get("type") == "error"),
        }


@dataclass(frozen=True)
class CallRequest:
    contract_address: str
    function_name: str
    raw_argument_text: str = ""


@dataclass(frozen=True)
class RawTransaction:
    to: str
    data: str = "0x"


@dataclass(frozen=True)
class Success:
    kind: str
    value: str

    ok = True


@dataclass(frozen=True)
class Failure:
    error: AbideskError

    ok = False

    @property
    def reason(self) -> str:
        return str(self.error)


ExecutionOutcome = Union[Success, Failure]


__all__ = [
    "ABI_LOADED",
    "CONNECTED",
    "CallRequest",
    "Classification",
    "ContractInterface",
    "DispatchState",
    "ExecutionOutcome",
    "Failure",
    "FunctionDescriptor",
    "NETWORK_NAMES",
    "NetworkIdentity",
    "Parameter",
    "RawTransaction",
    "READ_RESULT",
    "SELECTED",
    "SIGNATURE",
    "Success",
    "TX_HASH",
]
