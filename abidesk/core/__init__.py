"""Core components powering abidesk."""

from .abi_registry import AbiRegistry, parse_interface
from .classifier import classify, is_read_only
from .codec import encode, stringify
from .config import Settings
from .dispatcher import InteractionDispatcher
from .gateway import WalletGateway, Web3Gateway
from .log_manager import configure_logging, log_event
from .models import (
    CallRequest,
    Classification,
    ContractInterface,
    DispatchState,
    ExecutionOutcome,
    Failure,
    FunctionDescriptor,
    NetworkIdentity,
    Parameter,
    RawTransaction,
    Success,
)
from .session import SessionContext, render_status
from .typed_data import TypedDataSigner

__all__ = [
    "AbiRegistry",
    "CallRequest",
    "Classification",
    "ContractInterface",
    "DispatchState",
    "ExecutionOutcome",
    "Failure",
    "FunctionDescriptor",
    "InteractionDispatcher",
    "NetworkIdentity",
    "Parameter",
    "RawTransaction",
    "SessionContext",
    "Settings",
    "Success",
    "TypedDataSigner",
    "WalletGateway",
    "Web3Gateway",
    "classify",
    "configure_logging",
    "encode",
    "is_read_only",
    "log_event",
    "parse_interface",
    "render_status",
    "stringify",
]
