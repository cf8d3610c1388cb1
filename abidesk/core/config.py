"""Runtime configuration sourced from the environment and ``.env`` files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, TypeVar

import keyring
from dotenv import load_dotenv
from keyring.errors import KeyringError

from .log_manager import log_event

RPC_ENV_KEY = "RPC_URL"
TIMEOUT_ENV_KEY = "ABIDESK_HTTP_TIMEOUT"
GAS_ENV_KEY = "ABIDESK_DEFAULT_GAS"
SERVICE_ENV_KEY = "ABIDESK_KEYRING_SERVICE"
PRIVATE_KEY_ENV = "ABIDESK_PRIVATE_KEY"
PRIVATE_KEY_ENTRY = "PRIVATE_KEY"
DEFAULT_SERVICE = "abidesk"
DEFAULT_TIMEOUT = 30.0
DEFAULT_GAS = 2_000_000

Number = TypeVar("Number", int, float)

# chain id -> (explorer API endpoint, environment variable holding its key)
DEFAULT_EXPLORERS: Dict[int, tuple[str, str]] = {
    1: ("https://api.etherscan.io/api", "ETHERSCAN_API_KEY"),
    42161: ("https://api.arbiscan.io/api", "ARBISCAN_API_KEY"),
}


@dataclass
class Settings:
    """Resolved settings for one session."""

    rpc_url: Optional[str] = None
    explorer_urls: Dict[int, str] = field(default_factory=dict)
    explorer_keys: Dict[int, str] = field(default_factory=dict)
    http_timeout: float = DEFAULT_TIMEOUT
    default_gas: int = DEFAULT_GAS
    keyring_service: str = DEFAULT_SERVICE

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Settings":
        load_dotenv(env_path or Path(".env"), override=False)
        urls: Dict[int, str] = {}
        keys: Dict[int, str] = {}
        for chain_id, (url, key_env) in DEFAULT_EXPLORERS.items():
            urls[chain_id] = url
            key = os.getenv(key_env)
            if key:
                keys[chain_id] = key
        return cls(
            rpc_url=os.getenv(RPC_ENV_KEY) or None,
            explorer_urls=urls,
            explorer_keys=keys,
            http_timeout=_env_number(TIMEOUT_ENV_KEY, DEFAULT_TIMEOUT, float),
            default_gas=_env_number(GAS_ENV_KEY, DEFAULT_GAS, int),
            keyring_service=os.getenv(SERVICE_ENV_KEY, DEFAULT_SERVICE),
        )

    def explorer_for(self, chain_id: Optional[int]) -> Optional[tuple[str, str]]:
        """Return ``(endpoint, api_key)`` when both are known for ``chain_id``."""

        if chain_id is None:
            return None
        url = self.explorer_urls.get(chain_id)
        key = self.explorer_keys.get(chain_id)
        if not url or not key:
            return None
        return url, key

    def private_key(self) -> Optional[str]:
        """Look the wallet key up in the system keyring, then the environment."""

        secret: Optional[str] = None
        try:
            secret = keyring.get_password(self.keyring_service, PRIVATE_KEY_ENTRY)
        except KeyringError:
            secret = None
        if not secret:
            secret = os.getenv(PRIVATE_KEY_ENV)
        return secret or None


def _env_number(name: str, default: Number, cast: Callable[[str], Number]) -> Number:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        value = None
    if value is None or value <= 0:
        log_event("config.load", ok=False, variable=name, value=raw, fallback=default)
        return default
    return value


__all__ = ["DEFAULT_EXPLORERS", "Settings"]
