"""
Statement Registry Chain Utilities Module

Validation and formatting helpers shared by the RPC, explorer and wallet
layers.

Functions:
    normalize_address: Validate and lowercase an address
    normalize_statement_hash: Validate and lowercase a 32-byte hash
    address_to_topic: Left-pad an address into a 32-byte topic
    topic_to_address: Take the low 20 bytes of a topic
    to_hex_quantity: int -> 0x-prefixed hex quantity
    parse_hex_quantity: 0x-prefixed hex quantity -> int
    explorer_tx_url: Block explorer transaction link

Example:
    >>> normalize_address("0xD2D97209aFd34B9865fda1eA7B0c390395321B32")
    '0xd2d97209afd34b9865fda1ea7b0c390395321b32'
    >>> to_hex_quantity(200000)
    '0x30d40'
"""

from __future__ import annotations

import re
from typing import Optional

from .exceptions import InvalidAddressError, InvalidHashError

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")
HASH_PATTERN = re.compile(r"0x[0-9a-fA-F]{64}")

ZERO_ADDRESS = "0x" + "0" * 40


def is_valid_address(value: Optional[str]) -> bool:
    return isinstance(value, str) and ADDRESS_PATTERN.fullmatch(value) is not None


def is_valid_statement_hash(value: Optional[str]) -> bool:
    return isinstance(value, str) and HASH_PATTERN.fullmatch(value) is not None


def normalize_address(value: Optional[str]) -> str:
    """
    Validate an EVM address and return it lowercased.

    Idempotent: normalizing a normalized address returns it unchanged.

    Raises:
        InvalidAddressError: value is not 0x + 40 hex characters
    """
    if not is_valid_address(value):
        raise InvalidAddressError(value)
    return value.lower()


def normalize_statement_hash(value: Optional[str]) -> str:
    """
    Validate a user-supplied statement hash and return it lowercased.

    Raises:
        InvalidHashError: value is not 0x + 64 hex characters
    """
    if not is_valid_statement_hash(value):
        raise InvalidHashError(value)
    return value.lower()


def address_to_topic(address: str) -> str:
    """Left-pad an address to the 32-byte form used in indexed topics."""
    return "0x" + normalize_address(address)[2:].rjust(64, "0")


def topic_to_address(topic: str) -> str:
    """
    Return the address held in the low-order 20 bytes of a topic.

    Raises:
        ValueError: topic is not 0x + 64 hex characters
    """
    if not is_valid_statement_hash(topic):
        raise ValueError(f"not a 32-byte topic: {topic!r}")
    return "0x" + topic[-40:].lower()


def to_hex_quantity(value: int) -> str:
    if value < 0:
        raise ValueError("quantity must be non-negative")
    return hex(value)


def parse_hex_quantity(value: str) -> int:
    """
    Parse a JSON-RPC hex quantity.

    Raises:
        ValueError: value is not a 0x-prefixed hex string
    """
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise ValueError(f"not a hex quantity: {value!r}")
    return int(value, 16)


def explorer_tx_url(explorer_url: str, tx_hash: str) -> str:
    return f"{explorer_url.rstrip('/')}/tx/{tx_hash}"

