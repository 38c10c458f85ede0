"""Selectors and resolver call data for harvest tasks."""

from __future__ import annotations

from eth_utils import function_signature_to_4byte_selector, is_hex_address

# Fee token of a task that is not prepaid: the Ops contract draws from
# the shared treasury instead.
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

CHECKER_SIGNATURE = "checker(address)"
PERFORM_UPKEEP_SIGNATURE = "performUpkeep(address,uint256,uint256,uint256,uint256,bool)"


def function_selector(signature: str) -> str:
    """Return the ``0x``-prefixed 4-byte selector of a function signature."""
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def encode_address_word(address: str) -> str:
    """Left-pad a 20-byte address to a 32-byte ABI word (64 lowercase hex chars)."""
    if not is_hex_address(address):
        msg = f"not a 20-byte hex address: {address!r}"
        raise ValueError(msg)
    return address.lower().removeprefix("0x").rjust(64, "0")


def encode_resolver_data(checker_selector: str, vault_address: str) -> str:
    """Call data for ``checker(vault_address)``.

    >>> encode_resolver_data("0xcf5303cf", "0x00000000000000000000000000000000000000AB")
    '0xcf5303cf00000000000000000000000000000000000000000000000000000000000000ab'
    """
    return checker_selector.lower() + encode_address_word(vault_address)
