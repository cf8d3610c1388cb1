"""EIP-712 structured data signing."""

from __future__ import annotations

import json
from typing import Optional

from .errors import AbideskError, GatewayRejected, MalformedTypedData, NotConnected
from .gateway import WalletGateway
from .log_manager import log_event
from .models import SIGNATURE, ExecutionOutcome, Failure, Success


class TypedDataSigner:
    """Hand typed-data JSON to the wallet for signing, unmodified."""

    def __init__(self, gateway: WalletGateway) -> None:
        self.gateway = gateway

    def sign(self, account: Optional[str], typed_data_json: str) -> ExecutionOutcome:
        try:
            parsed = json.loads(typed_data_json or "")
        except json.JSONDecodeError as exc:
            return self._fail(MalformedTypedData(f"typed data is not valid JSON: {exc.msg}"))
        if not isinstance(parsed, dict):
            return self._fail(MalformedTypedData("typed data must be a JSON object"))
        if not account:
            return self._fail(NotConnected())

        canonical = json.dumps(parsed, separators=(",", ":"), ensure_ascii=False)
        try:
            signature = self.gateway.sign_typed_data(account, canonical)
        except AbideskError as exc:
            return self._fail(exc)
        except Exception as exc:
            return self._fail(GatewayRejected(str(exc) or type(exc).__name__))

        log_event("typed_data.sign", account=account, primary_type=parsed.get("primaryType"))
        return Success(SIGNATURE, str(signature))

    @staticmethod
    def _fail(error: AbideskError) -> Failure:
        log_event("typed_data.sign", ok=False, error=str(error), error_type=type(error).__name__)
        return Failure(error)


__all__ = ["TypedDataSigner"]
