from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import keyring
import keyring.backend
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from abidesk.core.abi_registry import parse_interface  # noqa: E402
from abidesk.core.models import ContractInterface, NetworkIdentity  # noqa: E402

HOLDER = "0x" + "ab" * 20
TOKEN = "0x" + "12" * 20
TX_HASH = "0x" + "ef" * 32

MAIL = {
    "types": {
        "EIP712Domain": [
            {"name": "name", "type": "string"},
            {"name": "version", "type": "string"},
            {"name": "chainId", "type": "uint256"},
        ],
        "Mail": [{"name": "contents", "type": "string"}],
    },
    "primaryType": "Mail",
    "domain": {"name": "Ether Mail", "version": "1", "chainId": 1},
    "message": {"contents": "Hello, Bob!"},
}

ERC20_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "name",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "deposit",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
    {"type": "error", "name": "InsufficientBalance", "inputs": []},
]


class MemoryKeyring(keyring.backend.KeyringBackend):
    priority = 1

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self._data.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self._data[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        self._data.pop((service, username), None)


class FakeGateway:
    """Scriptable stand-in for a wallet + node pair that records every call."""

    def __init__(
        self,
        *,
        accounts: Optional[List[str]] = None,
        chain_id: int = 1,
        call_result: Any = (1000,),
        tx_hash: str = TX_HASH,
        receipt: Optional[Dict[str, Any]] = None,
        signature: str = "0x" + "11" * 65,
        error: Optional[Exception] = None,
    ) -> None:
        self.accounts = [HOLDER] if accounts is None else accounts
        self.chain_id = chain_id
        self.call_result = call_result
        self.tx_hash = tx_hash
        self.receipt = {"status": 1, "blockNumber": 7} if receipt is None else receipt
        self.signature = signature
        self.error = error
        self.calls: List[tuple] = []

    def _record(self, *entry: Any) -> None:
        self.calls.append(entry)
        if self.error is not None:
            raise self.error

    def request_accounts(self) -> List[str]:
        return list(self.accounts)

    def network_identity(self) -> NetworkIdentity:
        return NetworkIdentity.from_chain_id(self.chain_id)

    def signer(self, account: str) -> str:
        return account

    def call(self, address, abi, descriptor, values):
        self._record("call", address, descriptor.name, tuple(values))
        return self.call_result

    def transact(self, account, address, abi, descriptor, values):
        self._record("transact", account, address, descriptor.name, tuple(values))
        return self.tx_hash

    def send_raw(self, account, to, data):
        self._record("send_raw", account, to, data)
        return self.tx_hash

    def wait_for_receipt(self, tx_hash):
        self.calls.append(("wait", tx_hash))
        return self.receipt

    def sign_typed_data(self, account, typed_data_json):
        self._record("sign", account, typed_data_json)
        return self.signature


@pytest.fixture()
def memory_keyring() -> MemoryKeyring:
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    return backend


@pytest.fixture()
def erc20_abi() -> List[Dict[str, Any]]:
    return [dict(entry) for entry in ERC20_ABI]


@pytest.fixture()
def interface(erc20_abi) -> ContractInterface:
    return parse_interface(erc20_abi, address=TOKEN, chain_id=1)


@pytest.fixture()
def mainnet() -> NetworkIdentity:
    return NetworkIdentity.from_chain_id(1)


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()
