"""Wallet and network access behind a single protocol.

The dispatcher only talks to :class:`WalletGateway`. :class:`Web3Gateway`
is the production implementation: a JSON-RPC node reached through web3 plus
a local ``eth_account`` key acting as the wallet.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import encode_hex, to_checksum_address
from web3 import Web3
from web3.contract.contract import ContractFunction
from web3.exceptions import Web3Exception

from .config import Settings
from .errors import GatewayRejected, WalletConnectionError
from .log_manager import log_event
from .models import FunctionDescriptor, NetworkIdentity

RECEIPT_TIMEOUT = 120


class WalletGateway(Protocol):
    """Primitives the interaction core needs from a wallet and node."""

    def request_accounts(self) -> List[str]:
        ...

    def network_identity(self) -> NetworkIdentity:
        ...

    def signer(self, account: str) -> Any:
        ...

    def call(
        self, address: str, abi: Sequence[Mapping[str, Any]], descriptor: FunctionDescriptor, values: Sequence[Any]
    ) -> Sequence[Any]:
        ...

    def transact(
        self,
        account: str,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        descriptor: FunctionDescriptor,
        values: Sequence[Any],
    ) -> str:
        ...

    def send_raw(self, account: str, to: str, data: str) -> str:
        ...

    def wait_for_receipt(self, tx_hash: str) -> Mapping[str, Any]:
        ...

    def sign_typed_data(self, account: str, typed_data_json: str) -> str:
        ...


class Web3Gateway:
    """Drive a node over JSON-RPC and sign locally with a configured key."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        web3: Optional[Web3] = None,
        account: Optional[LocalAccount] = None,
    ) -> None:
        self._settings = settings or Settings.from_env()
        self._web3 = web3
        self._account = account

    # -- bootstrap --------------------------------------------------------
    def _web3_client(self) -> Web3:
        if self._web3 is None:
            if not self._settings.rpc_url:
                raise WalletConnectionError("RPC_URL is not configured")
            self._web3 = Web3(
                Web3.HTTPProvider(self._settings.rpc_url, request_kwargs={"timeout": self._settings.http_timeout})
            )
        return self._web3

    def _local_account(self) -> Optional[LocalAccount]:
        if self._account is None:
            private_key = self._settings.private_key()
            if private_key:
                self._account = Account.from_key(private_key)
        return self._account

    # -- identity ---------------------------------------------------------
    def request_accounts(self) -> List[str]:
        account = self._local_account()
        return [account.address] if account is not None else []

    def network_identity(self) -> NetworkIdentity:
        return NetworkIdentity.from_chain_id(self._web3_client().eth.chain_id)

    def signer(self, account: str) -> LocalAccount:
        local = self._local_account()
        if local is None:
            raise WalletConnectionError("no wallet key is configured")
        if to_checksum_address(account) != local.address:
            raise GatewayRejected(f"account {account} is not managed by this wallet")
        return local

    # -- execution --------------------------------------------------------
    def _contract_function(
        self, address: str, abi: Sequence[Mapping[str, Any]], descriptor: FunctionDescriptor, values: Sequence[Any]
    ) -> ContractFunction:
        contract = self._web3_client().eth.contract(address=to_checksum_address(address), abi=list(abi))
        return contract.get_function_by_signature(descriptor.signature)(*values)

    def call(
        self, address: str, abi: Sequence[Mapping[str, Any]], descriptor: FunctionDescriptor, values: Sequence[Any]
    ) -> Sequence[Any]:
        result = self._contract_function(address, abi, descriptor, values).call()
        # web3 unwraps single return values
        if len(descriptor.outputs) == 1:
            return (result,)
        return tuple(result or ())

    def transact(
        self,
        account: str,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        descriptor: FunctionDescriptor,
        values: Sequence[Any],
    ) -> str:
        local = self.signer(account)
        client = self._web3_client()
        func = self._contract_function(address, abi, descriptor, values)
        tx_params = {
            "from": local.address,
            "nonce": client.eth.get_transaction_count(local.address),
        }
        try:
            gas = func.estimate_gas(tx_params)
        except Web3Exception:
            gas = self._settings.default_gas
        tx = func.build_transaction(
            {**tx_params, "gas": gas, "gasPrice": client.eth.gas_price, "chainId": client.eth.chain_id}
        )
        return self._broadcast(local, tx)

    def send_raw(self, account: str, to: str, data: str) -> str:
        local = self.signer(account)
        client = self._web3_client()
        tx_params = {
            "from": local.address,
            "to": to_checksum_address(to),
            "data": data,
            "value": 0,
            "nonce": client.eth.get_transaction_count(local.address),
            "chainId": client.eth.chain_id,
        }
        try:
            gas = client.eth.estimate_gas(tx_params)
        except Web3Exception:
            gas = self._settings.default_gas
        return self._broadcast(local, {**tx_params, "gas": gas, "gasPrice": client.eth.gas_price})

    def _broadcast(self, local: LocalAccount, tx: Mapping[str, Any]) -> str:
        signed = local.sign_transaction(tx)
        tx_hash = self._web3_client().eth.send_raw_transaction(signed.raw_transaction)
        hash_hex = encode_hex(bytes(tx_hash))
        log_event("gateway.broadcast", tx_hash=hash_hex, to=tx.get("to"), gas=tx.get("gas"))
        return hash_hex

    def wait_for_receipt(self, tx_hash: str) -> Mapping[str, Any]:
        return self._web3_client().eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT)

    # -- signing ----------------------------------------------------------
    def sign_typed_data(self, account: str, typed_data_json: str) -> str:
        local = self.signer(account)
        message = encode_typed_data(full_message=json.loads(typed_data_json))
        signed = local.sign_message(message)
        return encode_hex(bytes(signed.signature))


__all__ = ["RECEIPT_TIMEOUT", "WalletGateway", "Web3Gateway"]
