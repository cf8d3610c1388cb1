from __future__ import annotations

from abidesk.core.models import FunctionDescriptor, NetworkIdentity, Parameter


def test_network_identity_display_name() -> None:
    assert NetworkIdentity.from_chain_id(1).display_name == "mainnet (1)"
    assert NetworkIdentity.from_chain_id(42161).display_name == "arbitrum (42161)"
    assert NetworkIdentity.from_chain_id(999_999).display_name == "unknown (999999)"


def test_selector_matches_erc20_transfer(interface) -> None:
    transfer = interface.find_function("transfer")
    assert transfer.signature == "transfer(address,uint256)"
    assert transfer.selector == "0xa9059cbb"


def test_tuple_parameters_expand_in_signature() -> None:
    descriptor = FunctionDescriptor.from_abi(
        {
            "type": "function",
            "name": "submit",
            "stateMutability": "nonpayable",
            "inputs": [
                {
                    "name": "orders",
                    "type": "tuple[]",
                    "components": [{"name": "id", "type": "uint256"}, {"name": "maker", "type": "address"}],
                }
            ],
        }
    )
    assert descriptor.signature == "submit((uint256,address)[])"
    assert descriptor.inputs[0].components[1] == Parameter(name="maker", type="address")


def test_interface_queries(interface) -> None:
    assert interface.function_names() == ["balanceOf", "transfer", "name", "deposit"]
    assert interface.summary() == {"functions": 4, "events": 1, "errors": 1}
    assert interface.find_function("Transfer") is None
    assert interface.find_function("balanceOf").label == "balanceOf (view)"


def test_overloads_resolve_to_first_match(erc20_abi) -> None:
    from abidesk.core.abi_registry import parse_interface

    erc20_abi.append(
        {
            "type": "function",
            "name": "balanceOf",
            "stateMutability": "view",
            "inputs": [{"name": "owner", "type": "address"}, {"name": "id", "type": "uint256"}],
            "outputs": [{"name": "", "type": "uint256"}],
        }
    )
    parsed = parse_interface(erc20_abi)
    assert len(parsed.overloads("balanceOf")) == 2
    assert len(parsed.find_function("balanceOf").inputs) == 1
