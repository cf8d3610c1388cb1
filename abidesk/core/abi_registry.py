"""Fetch contract ABIs from block explorers and parse them into interfaces."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .errors import AbiNotFound, IncompleteRequest, MalformedAbi, NetworkError, UnsupportedNetwork
from .log_manager import log_event
from .models import ContractInterface, FunctionDescriptor, NetworkIdentity


def parse_interface(payload: Any, *, address: str = "", chain_id: Optional[int] = None) -> ContractInterface:
    """Build a :class:`ContractInterface` from decoded ABI JSON."""

    if isinstance(payload, dict) and "abi" in payload:
        payload = payload["abi"]
    if not isinstance(payload, list):
        raise MalformedAbi("ABI definition must be a list of JSON objects")
    entries: List[Dict[str, Any]] = []
    for entry in payload:
        if not isinstance(entry, dict):
            raise MalformedAbi("ABI definition must be a list of JSON objects")
        entries.append(dict(entry))
    try:
        functions = tuple(
            FunctionDescriptor.from_abi(entry) for entry in entries if entry.get("type") == "function"
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise MalformedAbi(f"ABI function entry is malformed: {exc}") from exc
    return ContractInterface(address=address, chain_id=chain_id, entries=tuple(entries), functions=functions)


class AbiRegistry:
    """Resolve ``(network, address)`` to a verified contract interface."""

    def __init__(self, settings: Optional[Settings] = None, *, session: Optional[requests.Session] = None) -> None:
        self._settings = settings or Settings.from_env()
        self._http = session or requests.Session()

    def is_supported(self, network: Optional[NetworkIdentity]) -> bool:
        return network is not None and self._settings.explorer_for(network.chain_id) is not None

    def fetch(self, network: Optional[NetworkIdentity], contract_address: str) -> ContractInterface:
        address = (contract_address or "").strip()
        if not address:
            raise IncompleteRequest("enter a contract address")
        chain_id = network.chain_id if network is not None else None
        explorer = self._settings.explorer_for(chain_id)
        if explorer is None:
            log_event("abi.fetch", ok=False, address=address, chain_id=chain_id, error="unsupported network")
            raise UnsupportedNetwork(chain_id)
        endpoint, api_key = explorer

        try:
            response = self._http.get(
                endpoint,
                params={"module": "contract", "action": "getabi", "address": address, "apikey": api_key},
                timeout=self._settings.http_timeout,
            )
            response.raise_for_status()
            envelope = response.json()
        except (requests.RequestException, ValueError) as exc:
            log_event("abi.fetch", ok=False, address=address, chain_id=chain_id, error=str(exc))
            raise NetworkError(f"explorer request failed: {exc}") from exc

        if not isinstance(envelope, dict) or envelope.get("status") != "1":
            detail = envelope.get("result") if isinstance(envelope, dict) else envelope
            log_event("abi.fetch", ok=False, address=address, chain_id=chain_id, error=str(detail))
            raise AbiNotFound(f"no verified ABI for {address}: {detail}")

        try:
            decoded = json.loads(envelope.get("result") or "")
        except (TypeError, json.JSONDecodeError) as exc:
            log_event("abi.fetch", ok=False, address=address, chain_id=chain_id, error="malformed ABI")
            raise MalformedAbi(f"explorer returned an ABI that is not valid JSON: {exc}") from exc

        try:
            interface = parse_interface(decoded, address=address, chain_id=chain_id)
        except MalformedAbi as exc:
            log_event("abi.fetch", ok=False, address=address, chain_id=chain_id, error=str(exc))
            raise
        log_event("abi.fetch", address=address, chain_id=chain_id, **interface.summary())
        return interface


__all__ = ["AbiRegistry", "parse_interface"]
