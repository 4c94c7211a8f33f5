"""
Statement Registry Wallet Module

The wallet is an outside collaborator: the registry only needs the current
account and a way to submit a transaction.

Classes:
    WalletGateway: Abstract wallet interface
    Web3WalletGateway: web3.py-backed wallet (local key or node-managed account)

Functions:
    build_statement_transaction: Build a publish/revoke transaction request

Example:
    >>> wallet = Web3WalletGateway.from_rpc("https://rpc.testnet.arc.network", private_key="0x...")
    >>> wallet.get_account()
    '0x...'

Note:
    Wallet errors (WalletUnavailableError, WalletRejectedError) end a single
    attempt and are never retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from eth_utils import to_checksum_address

from .chain_utils import normalize_address, normalize_statement_hash, to_hex_quantity
from .exceptions import WalletRejectedError, WalletUnavailableError

logger = logging.getLogger("statement_registry.wallet")

USER_REJECTED_CODE = 4001


def build_statement_transaction(
    selector: str,
    statement_hash: str,
    contract_address: str,
    sender: str,
    gas_limit: int,
) -> Dict[str, str]:
    """
    Build the ``eth_sendTransaction`` request for a publish or revoke call.

    ``data`` is the 4-byte selector followed by the 32-byte statement hash,
    which is the full ABI encoding of a single ``bytes32`` argument.

    Example:
        >>> tx = build_statement_transaction(PUBLISH_SELECTOR, "0x" + "ab" * 32, contract, me, 200000)
        >>> tx["gas"]
        '0x30d40'
    """
    statement_hash = normalize_statement_hash(statement_hash)
    return {
        "from": normalize_address(sender),
        "to": normalize_address(contract_address),
        "data": selector + statement_hash[2:],
        "gas": to_hex_quantity(gas_limit),
    }


class WalletGateway:
    """
    Abstract wallet interface.

    Methods:
        get_account: Connected account, or None when disconnected
        send_transaction: Submit a transaction request, return its hash
    """

    def get_account(self) -> Optional[str]:
        raise NotImplementedError

    def send_transaction(self, tx: Dict[str, Any]) -> str:
        raise NotImplementedError


def _rejection_code(exc: Exception) -> Optional[int]:
    """Dig the JSON-RPC error code out of a web3 exception, if any."""
    response = getattr(exc, "rpc_response", None)
    if isinstance(response, dict) and isinstance(response.get("error"), dict):
        return response["error"].get("code")
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0].get("code")
    return None


class Web3WalletGateway(WalletGateway):
    """
    Wallet backed by a web3.py ``Web3`` instance.

    With a local ``eth_account`` account, transactions are signed locally and
    sent with ``eth_sendRawTransaction``. Without one, the node's first
    managed account sends them with ``eth_sendTransaction``.

    When ``chain_id`` is set, sending fails with ``WalletUnavailableError``
    unless the node reports that chain.

    Args:
        w3: Connected ``Web3`` instance
        account: Optional local account (``eth_account.Account.from_key(...)``)
        chain_id: Chain the registry contract lives on
    """

    def __init__(self, w3: Any, account: Optional[Any] = None, chain_id: Optional[int] = None) -> None:
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id

    @classmethod
    def from_rpc(
        cls,
        rpc_url: str,
        private_key: Optional[str] = None,
        chain_id: Optional[int] = None,
    ) -> "Web3WalletGateway":
        try:
            from web3 import Web3
            from eth_account import Account
        except ImportError as exc:
            raise ImportError("EVM dependencies not installed. Install with: pip install web3 eth-account") from exc

        w3 = Web3(Web3.HTTPProvider(rpc_url))
        account = Account.from_key(private_key) if private_key else None
        return cls(w3, account, chain_id=chain_id)

    def get_account(self) -> Optional[str]:
        if self.account is not None:
            return self.account.address.lower()
        accounts = self.w3.eth.accounts
        if not accounts:
            return None
        return str(accounts[0]).lower()

    def send_transaction(self, tx: Dict[str, Any]) -> str:
        sender = self.get_account()
        if sender is None:
            raise WalletUnavailableError()
        node_chain_id = self._check_chain()

        request = dict(tx)
        request["from"] = to_checksum_address(sender)
        request["to"] = to_checksum_address(request["to"])
        if isinstance(request.get("gas"), str):
            request["gas"] = int(request["gas"], 16)

        try:
            if self.account is not None:
                tx_hash = self._send_signed(request, node_chain_id)
            else:
                tx_hash = self.w3.eth.send_transaction(request)
        except Exception as e:
            if _rejection_code(e) == USER_REJECTED_CODE:
                raise WalletRejectedError(str(e)) from e
            raise

        tx_hex = tx_hash.hex() if hasattr(tx_hash, "hex") else str(tx_hash)
        if not tx_hex.startswith("0x"):
            tx_hex = "0x" + tx_hex
        logger.info("Transaction sent: %s", tx_hex)
        return tx_hex

    def _check_chain(self) -> int:
        node_chain_id = self.w3.eth.chain_id
        if self.chain_id is not None and node_chain_id != self.chain_id:
            raise WalletUnavailableError(
                f"Wallet is connected to chain {node_chain_id}, expected {self.chain_id}"
            )
        return node_chain_id

    def _send_signed(self, request: Dict[str, Any], chain_id: int) -> Any:
        request["nonce"] = self.w3.eth.get_transaction_count(request["from"], "pending")
        request["chainId"] = chain_id
        request.setdefault("gasPrice", self.w3.eth.gas_price)
        signed_tx = self.account.sign_transaction(request)
        return self.w3.eth.send_raw_transaction(
            signed_tx.rawTransaction if hasattr(signed_tx, "rawTransaction") else signed_tx.raw_transaction
        )
