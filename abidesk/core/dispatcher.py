"""Route contract interactions to the right execution strategy.

Read-only functions are simulated with ``eth_call``. Mutating functions are
signed and broadcast, and the hash is reported as soon as the node accepts
the transaction. Raw ``{to, data}`` transactions take the opposite stance
and report only once the receipt is in.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from eth_utils import is_address, is_hex

from . import codec
from .classifier import classify
from .errors import AbideskError, GatewayRejected, IncompleteRequest, NotConnected, UnknownFunction
from .gateway import WalletGateway
from .log_manager import log_event
from .models import (
    READ_RESULT,
    TX_HASH,
    CallRequest,
    Classification,
    ContractInterface,
    ExecutionOutcome,
    Failure,
    NetworkIdentity,
    RawTransaction,
    Success,
)


class InteractionDispatcher:
    """Execute :class:`CallRequest` objects through a :class:`WalletGateway`."""

    def __init__(self, gateway: WalletGateway) -> None:
        self.gateway = gateway

    def dispatch(
        self,
        account: Optional[str],
        network: Optional[NetworkIdentity],
        interface: Optional[ContractInterface],
        request: Optional[CallRequest],
        classification: Optional[Classification] = None,
    ) -> ExecutionOutcome:
        """Run ``request`` and always return an outcome, never raise."""

        params = {
            "contract": getattr(request, "contract_address", None),
            "method": getattr(request, "function_name", None),
            "chain_id": network.chain_id if network is not None else None,
        }
        if not account:
            return self._fail("dispatch.call", params, NotConnected())
        if request is None or not request.contract_address or not request.function_name or interface is None:
            return self._fail(
                "dispatch.call",
                params,
                IncompleteRequest("contract address, ABI, and function must all be set"),
            )

        descriptor = interface.find_function(request.function_name)
        if descriptor is None:
            return self._fail("dispatch.call", params, UnknownFunction(request.function_name))
        mode = classification or classify(descriptor)
        params["mode"] = mode.value

        try:
            values = codec.encode(descriptor, request.raw_argument_text)
        except AbideskError as exc:
            return self._fail("dispatch.call", params, exc)

        try:
            if mode is Classification.READ_ONLY:
                result = self.gateway.call(request.contract_address, interface.entries, descriptor, values)
                outcome = Success(READ_RESULT, codec.stringify(result))
            else:
                tx_hash = self.gateway.transact(
                    account, request.contract_address, interface.entries, descriptor, values
                )
                outcome = Success(TX_HASH, str(tx_hash))
        except Exception as exc:
            return self._fail("dispatch.call", params, _rejected(exc))

        log_event("dispatch.call", result=outcome.value, kind=outcome.kind, **params)
        return outcome

    def send_raw(self, account: Optional[str], transaction: Optional[RawTransaction]) -> ExecutionOutcome:
        """Broadcast pre-encoded call data and wait for it to be mined."""

        params = {"to": getattr(transaction, "to", None)}
        if not account:
            return self._fail("dispatch.raw", params, NotConnected())
        if transaction is None:
            return self._fail("dispatch.raw", params, IncompleteRequest("a transaction is required"))
        data = (transaction.data or "").strip() or "0x"
        if not transaction.to or not is_address(transaction.to.strip()):
            return self._fail("dispatch.raw", params, IncompleteRequest("a valid recipient address is required"))
        if not data.startswith("0x") or (data != "0x" and not is_hex(data)):
            return self._fail("dispatch.raw", params, IncompleteRequest("call data must be 0x-prefixed hex"))

        try:
            tx_hash = self.gateway.send_raw(account, transaction.to.strip(), data)
            receipt = self.gateway.wait_for_receipt(tx_hash)
        except Exception as exc:
            return self._fail("dispatch.raw", params, _rejected(exc))
        if _receipt_status(receipt) == 0:
            return self._fail("dispatch.raw", params, GatewayRejected(f"transaction {tx_hash} reverted"))

        log_event("dispatch.raw", tx_hash=str(tx_hash), block=(receipt or {}).get("blockNumber"), **params)
        return Success(TX_HASH, str(tx_hash))

    @staticmethod
    def _fail(action: str, params: Mapping[str, Any], error: AbideskError) -> Failure:
        log_event(action, ok=False, error=str(error), error_type=type(error).__name__, **params)
        return Failure(error)


def _rejected(exc: Exception) -> AbideskError:
    if isinstance(exc, AbideskError):
        return exc
    return GatewayRejected(str(exc) or type(exc).__name__)


def _receipt_status(receipt: Optional[Mapping[str, Any]]) -> Optional[int]:
    """Return the post-Byzantium status flag, or ``None`` for receipts that only carry a state root."""

    status = receipt.get("status") if receipt is not None else None
    return int(status) if status is not None else None


__all__ = ["InteractionDispatcher"]
