"""
Statement Registry Hashing Module

Keccak-256 helpers used for statement hashes, event topics and call selectors.
All three go through the same ``digest`` so they can never drift apart.

Functions:
    digest: Keccak-256 of text (bytes)
    digest_hex: Keccak-256 of text (0x-prefixed hex)
    hash_statement: Hash of a statement's plaintext
    event_topic: topic0 for an event signature
    function_selector: 4-byte selector for a function signature

Example:
    >>> from statement_registry.hashing import function_selector
    >>> function_selector("transfer(address,uint256)")
    '0xa9059cbb'

Note:
    Keccak-256 is the pre-standard variant used by Ethereum; it differs
    from NIST SHA3-256, so ``hashlib.sha3_256`` must not be used here.
"""

from Crypto.Hash import keccak

STATEMENT_PUBLISHED_SIGNATURE = "StatementPublished(address,bytes32,uint256)"
STATEMENT_REVOKED_SIGNATURE = "StatementRevoked(address,bytes32,uint256)"
PUBLISH_SIGNATURE = "publishStatement(bytes32)"
REVOKE_SIGNATURE = "revokeStatement(bytes32)"


def digest(text: str) -> bytes:
    """
    Keccak-256 digest of the UTF-8 encoding of ``text``.

    Returns:
        32-byte hash value

    Example:
        >>> digest("").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    hasher = keccak.new(digest_bits=256)
    hasher.update(text.encode("utf-8"))
    return hasher.digest()


def digest_hex(text: str) -> str:
    """Same as ``digest`` as a lowercase hex string with 0x prefix."""
    return "0x" + digest(text).hex()


def hash_statement(text: str) -> str:
    """
    Hash a statement's plaintext.

    Only this value is ever sent to the chain; the plaintext stays with
    the caller.
    """
    return digest_hex(text)


def event_topic(signature: str) -> str:
    """
    Compute topic0 for a canonical event signature.

    Example:
        >>> event_topic("Transfer(address,address,uint256)")
        '0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef'
    """
    return digest_hex(signature)


def function_selector(signature: str) -> str:
    """
    Leading 4 bytes of the signature digest, as 0x + 8 hex characters.
    """
    return "0x" + digest(signature)[:4].hex()


STATEMENT_PUBLISHED_TOPIC = event_topic(STATEMENT_PUBLISHED_SIGNATURE)
STATEMENT_REVOKED_TOPIC = event_topic(STATEMENT_REVOKED_SIGNATURE)
PUBLISH_SELECTOR = function_selector(PUBLISH_SIGNATURE)
REVOKE_SELECTOR = function_selector(REVOKE_SIGNATURE)
