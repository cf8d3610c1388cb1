"""Explicit session state and the user actions that transform it.

A rendering collaborator owns one :class:`SessionContext` and swaps it for
the context each action returns. Actions never raise: every failure becomes
a :class:`~abidesk.core.models.Failure` and a status line.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .abi_registry import AbiRegistry
from .classifier import classify
from .dispatcher import InteractionDispatcher
from .errors import AbideskError, FetchError, IncompleteRequest, UnknownFunction, WalletConnectionError
from .gateway import WalletGateway
from .log_manager import log_event
from .models import (
    ABI_LOADED,
    CONNECTED,
    READ_RESULT,
    SELECTED,
    SIGNATURE,
    TX_HASH,
    CallRequest,
    Classification,
    ContractInterface,
    DispatchState,
    ExecutionOutcome,
    Failure,
    NetworkIdentity,
    RawTransaction,
    Success,
)
from .typed_data import TypedDataSigner


@dataclass(frozen=True)
class SessionContext:
    account: Optional[str] = None
    network: Optional[NetworkIdentity] = None
    contract_address: str = ""
    interface: Optional[ContractInterface] = None
    selected: Optional[str] = None
    classification: Optional[Classification] = None
    state: DispatchState = DispatchState.IDLE
    status: str = ""

    @property
    def connected(self) -> bool:
        return bool(self.account)


Step = Tuple[SessionContext, ExecutionOutcome]


def render_status(outcome: ExecutionOutcome, *, confirmed: bool = False) -> str:
    """Turn an outcome into the line shown to the user."""

    if isinstance(outcome, Failure):
        return f"{outcome.error.category}: {outcome.reason}"
    if outcome.kind == READ_RESULT:
        return f"Function executed successfully! Result: {outcome.value}"
    if outcome.kind == TX_HASH:
        verb = "confirmed" if confirmed else "sent"
        return f"Transaction {verb}! Hash: {outcome.value}"
    if outcome.kind == SIGNATURE:
        return f"Signature: {outcome.value}"
    if outcome.kind == CONNECTED:
        return "Wallet connected!"
    if outcome.kind == ABI_LOADED:
        return "ABI fetched successfully!"
    if outcome.kind == SELECTED:
        return f"Selected {outcome.value}"
    return outcome.value


def _settle(ctx: SessionContext, outcome: ExecutionOutcome, **changes: object) -> Step:
    return replace(ctx, status=render_status(outcome), **changes), outcome


def _clear_contract() -> dict:
    return {"interface": None, "selected": None, "classification": None, "state": DispatchState.IDLE}


# -- wallet -------------------------------------------------------------------
def connect(ctx: SessionContext, gateway: WalletGateway) -> Step:
    try:
        accounts = gateway.request_accounts()
        network = gateway.network_identity()
    except Exception as exc:
        error = exc if isinstance(exc, AbideskError) else WalletConnectionError(str(exc))
        log_event("session.connect", ok=False, error=str(error))
        return _settle(ctx, Failure(error))
    if not accounts:
        log_event("session.connect", ok=False, error="no accounts")
        return _settle(ctx, Failure(WalletConnectionError("the wallet exposed no accounts")))

    changes: dict = {"account": accounts[0], "network": network}
    if ctx.network is not None and ctx.network.chain_id != network.chain_id:
        changes.update(_clear_contract())
    log_event("session.connect", account=accounts[0], network=network.display_name)
    return _settle(ctx, Success(CONNECTED, accounts[0]), **changes)


def network_changed(ctx: SessionContext, gateway: WalletGateway) -> Step:
    """Re-derive the network after the wallet reported a switch."""

    try:
        network = gateway.network_identity()
    except Exception as exc:
        error = exc if isinstance(exc, AbideskError) else WalletConnectionError(str(exc))
        log_event("session.network", ok=False, error=str(error))
        return _settle(ctx, Failure(error), network=None, **_clear_contract())
    changes: dict = {"network": network}
    if ctx.network is None or ctx.network.chain_id != network.chain_id:
        changes.update(_clear_contract())
    log_event("session.network", network=network.display_name)
    return _settle(ctx, Success(CONNECTED, network.display_name), **changes)


# -- contract -----------------------------------------------------------------
def set_address(ctx: SessionContext, address: str) -> SessionContext:
    address = (address or "").strip()
    if not address:
        return replace(ctx, contract_address="", **_clear_contract())
    if ctx.interface is not None and ctx.interface.address.lower() != address.lower():
        return replace(ctx, contract_address=address, **_clear_contract())
    return replace(ctx, contract_address=address)


def fetch_abi(ctx: SessionContext, registry: AbiRegistry) -> Step:
    try:
        interface = registry.fetch(ctx.network, ctx.contract_address)
    except Exception as exc:
        error = exc if isinstance(exc, AbideskError) else FetchError(str(exc))
        return _settle(ctx, Failure(error))
    outcome = Success(ABI_LOADED, f"{len(interface.functions)} functions")
    return _settle(
        ctx,
        outcome,
        interface=interface,
        selected=None,
        classification=None,
        state=DispatchState.CONTRACT_LOADED,
    )


def function_choices(ctx: SessionContext) -> List[Tuple[str, str]]:
    """``(name, label)`` pairs for every selectable function."""

    if ctx.interface is None:
        return []
    return [(descriptor.name, descriptor.label) for descriptor in ctx.interface.functions]


def select_function(ctx: SessionContext, name: str) -> Step:
    if ctx.interface is None:
        return _settle(ctx, Failure(IncompleteRequest("fetch an ABI before selecting a function")))
    descriptor = ctx.interface.find_function(name)
    if descriptor is None:
        return _settle(ctx, Failure(UnknownFunction(name)))
    return _settle(
        ctx,
        Success(SELECTED, descriptor.label),
        selected=descriptor.name,
        classification=classify(descriptor),
        state=DispatchState.FUNCTION_SELECTED,
    )


# -- execution ----------------------------------------------------------------
def execute(ctx: SessionContext, dispatcher: InteractionDispatcher, raw_arguments: str) -> Step:
    running = replace(ctx, state=DispatchState.EXECUTING)
    request = CallRequest(
        contract_address=ctx.contract_address,
        function_name=ctx.selected or "",
        raw_argument_text=raw_arguments,
    )
    outcome = dispatcher.dispatch(ctx.account, ctx.network, ctx.interface, request, ctx.classification)
    return _settle(running, outcome, state=_final_state(outcome))


def send_raw(ctx: SessionContext, dispatcher: InteractionDispatcher, to: str, data: str) -> Step:
    outcome = dispatcher.send_raw(ctx.account, RawTransaction(to=to, data=data))
    status = render_status(outcome, confirmed=True)
    return replace(ctx, status=status), outcome


def sign_typed_data(ctx: SessionContext, signer: TypedDataSigner, typed_data_json: str) -> Step:
    return _settle(ctx, signer.sign(ctx.account, typed_data_json))


def _final_state(outcome: ExecutionOutcome) -> DispatchState:
    return DispatchState.SUCCEEDED if outcome.ok else DispatchState.FAILED


__all__ = [
    "SessionContext",
    "connect",
    "execute",
    "fetch_abi",
    "function_choices",
    "network_changed",
    "render_status",
    "select_function",
    "send_raw",
    "set_address",
    "sign_typed_data",
]
