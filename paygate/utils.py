"""
Address helpers.

Hex addresses must carry the 0x prefix and are compared case-insensitively;
mixed-case input is accepted without enforcing its checksum.
"""
from typing import Any

from web3 import Web3


def is_hex_address(value: Any) -> bool:
    """Validate the 0x-prefixed 20-byte hex address format, ignoring case."""
    if not isinstance(value, str) or not value.startswith('0x'):
        return False
    return Web3.is_address(value.lower())


def normalize_address(address: str) -> str:
    """Normalize to checksum address."""
    if not is_hex_address(address):
        raise ValueError(f'Invalid address: {address}')
    return Web3.to_checksum_address(address.lower())


def same_address(left: str, right: str) -> bool:
    if not (is_hex_address(left) and is_hex_address(right)):
        return False
    return left.lower() == right.lower()
