"""Exception hierarchy shared by the abidesk core."""

from __future__ import annotations

from typing import Optional


class AbideskError(Exception):
    """Root of every error raised by the interaction core."""

    category = "Error"


class WalletConnectionError(AbideskError):
    """The wallet is absent or refused to expose an account."""

    category = "Connection error"


class UnsupportedNetwork(AbideskError):
    """The chain id has no known explorer endpoint or credential."""

    category = "Unsupported network"

    def __init__(self, chain_id: Optional[int]) -> None:
        super().__init__(f"no ABI explorer configured for chain id {chain_id}")
        self.chain_id = chain_id


# -- ABI fetching -------------------------------------------------------------
class FetchError(AbideskError):
    category = "Fetch error"


class NetworkError(FetchError):
    """The explorer could not be reached or answered garbage."""


class AbiNotFound(FetchError):
    """The explorer has no verified ABI for the address."""


class MalformedAbi(FetchError):
    """The explorer body is not a JSON ABI array."""


# -- argument marshalling -----------------------------------------------------
class CodecError(AbideskError):
    category = "Invalid arguments"


class ArityMismatch(CodecError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"expected {expected} argument(s), received {received}")
        self.expected = expected
        self.received = received


class TypeCoercionFailure(CodecError):
    def __init__(self, index: int, expected_type: str, token: str, detail: str = "") -> None:
        message = f"argument {index} ({token!r}) is not a valid {expected_type}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.index = index
        self.expected_type = expected_type
        self.token = token


# -- dispatch and signing -----------------------------------------------------
class DispatchError(AbideskError):
    category = "Execution failed"


class NotConnected(DispatchError):
    def __init__(self, message: str = "connect a wallet first") -> None:
        super().__init__(message)


class IncompleteRequest(DispatchError):
    """Address, function, or interface is missing from the request."""


class UnknownFunction(IncompleteRequest):
    def __init__(self, name: str) -> None:
        super().__init__(f"function '{name}' is not part of the loaded ABI")
        self.name = name


class SigningError(AbideskError):
    category = "Signing failed"


class MalformedTypedData(SigningError):
    """Typed data text is not a JSON object."""


class GatewayRejected(DispatchError, SigningError):
    """The wallet or node returned an error for a call, transaction, or signature."""


__all__ = [
    "AbiNotFound",
    "AbideskError",
    "ArityMismatch",
    "CodecError",
    "DispatchError",
    "FetchError",
    "GatewayRejected",
    "IncompleteRequest",
    "MalformedAbi",
    "MalformedTypedData",
    "NetworkError",
    "NotConnected",
    "SigningError",
    "TypeCoercionFailure",
    "UnknownFunction",
    "UnsupportedNetwork",
    "WalletConnectionError",
]
