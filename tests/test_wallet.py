"""Wallet gateway tests."""

import pytest

from statement_registry.exceptions import InvalidHashError, WalletRejectedError, WalletUnavailableError
from statement_registry.hashing import PUBLISH_SELECTOR, REVOKE_SELECTOR
from statement_registry.wallet import Web3WalletGateway, build_statement_transaction

from factories import AUTHOR, CONTRACT

STATEMENT = "0x" + "ab" * 32


class FakeTxHash(bytes):
    def hex(self) -> str:
        return "0x" + super().hex()


class FakeEth:
    def __init__(self, accounts=None, error=None):
        self.accounts = accounts or []
        self.error = error
        self.sent = []
        self.raw = []
        self.chain_id = 5042002
        self.gas_price = 7

    def get_transaction_count(self, address, block):
        return 3

    def send_transaction(self, tx):
        if self.error:
            raise self.error
        self.sent.append(tx)
        return FakeTxHash(b"\x01" * 32)

    def send_raw_transaction(self, raw):
        self.raw.append(raw)
        return FakeTxHash(b"\x02" * 32)


class FakeW3:
    def __init__(self, eth):
        self.eth = eth


class FakeSigned:
    def __init__(self, tx):
        self.tx = tx
        self.raw_transaction = b"signed"


class FakeAccount:
    address = "0x1111111111111111111111111111111111111111"

    def __init__(self):
        self.signed = []

    def sign_transaction(self, tx):
        self.signed.append(tx)
        return FakeSigned(tx)


def test_build_publish_transaction():
    tx = build_statement_transaction(PUBLISH_SELECTOR, STATEMENT, CONTRACT, AUTHOR, 200_000)
    assert tx == {
        "from": AUTHOR,
        "to": CONTRACT,
        "data": PUBLISH_SELECTOR + "ab" * 32,
        "gas": "0x30d40",
    }
    assert len(tx["data"]) == 2 + 8 + 64


def test_build_revoke_transaction_uses_revoke_selector():
    tx = build_statement_transaction(REVOKE_SELECTOR, STATEMENT, CONTRACT, AUTHOR, 200_000)
    assert tx["data"].startswith(REVOKE_SELECTOR)


def test_build_transaction_rejects_bad_hash():
    with pytest.raises(InvalidHashError):
        build_statement_transaction(PUBLISH_SELECTOR, "0x1234", CONTRACT, AUTHOR, 200_000)


def test_node_account_sends_transaction():
    eth = FakeEth(accounts=["0x3333333333333333333333333333333333333333"])
    wallet = Web3WalletGateway(FakeW3(eth))
    tx = build_statement_transaction(PUBLISH_SELECTOR, STATEMENT, CONTRACT, wallet.get_account(), 200_000)

    tx_hash = wallet.send_transaction(tx)

    assert tx_hash == "0x" + "01" * 32
    sent = eth.sent[0]
    assert sent["gas"] == 200_000
    assert sent["to"].lower() == CONTRACT
    assert sent["data"] == tx["data"]


def test_local_account_signs_and_sends_raw():
    eth = FakeEth()
    account = FakeAccount()
    wallet = Web3WalletGateway(FakeW3(eth), account=account)
    tx = build_statement_transaction(REVOKE_SELECTOR, STATEMENT, CONTRACT, wallet.get_account(), 200_000)

    tx_hash = wallet.send_transaction(tx)

    assert tx_hash == "0x" + "02" * 32
    signed = account.signed[0]
    assert signed["nonce"] == 3
    assert signed["chainId"] == 5042002
    assert signed["gasPrice"] == 7
    assert eth.raw == [b"signed"]


def test_signs_for_configured_chain():
    eth = FakeEth()
    account = FakeAccount()
    wallet = Web3WalletGateway(FakeW3(eth), account=account, chain_id=0x4CEF52)

    wallet.send_transaction(build_statement_transaction(PUBLISH_SELECTOR, STATEMENT, CONTRACT, AUTHOR, 200_000))

    assert account.signed[0]["chainId"] == 0x4CEF52


@pytest.mark.parametrize("with_account", [True, False])
def test_wrong_chain_is_unavailable(with_account):
    eth = FakeEth(accounts=[AUTHOR])
    eth.chain_id = 1
    account = FakeAccount() if with_account else None
    wallet = Web3WalletGateway(FakeW3(eth), account=account, chain_id=0x4CEF52)

    with pytest.raises(WalletUnavailableError, match="chain 1"):
        wallet.send_transaction({"to": CONTRACT, "data": "0x", "gas": "0x1"})
    assert eth.sent == [] and eth.raw == []
    if account is not None:
        assert account.signed == []


def test_no_account_is_unavailable():
    wallet = Web3WalletGateway(FakeW3(FakeEth()))
    assert wallet.get_account() is None
    with pytest.raises(WalletUnavailableError):
        wallet.send_transaction({"to": CONTRACT, "data": "0x", "gas": "0x1"})


def test_user_rejection_is_mapped():
    error = ValueError({"code": 4001, "message": "User denied transaction signature."})
    eth = FakeEth(accounts=[AUTHOR], error=error)
    wallet = Web3WalletGateway(FakeW3(eth))

    with pytest.raises(WalletRejectedError):
        wallet.send_transaction({"to": CONTRACT, "data": "0x", "gas": "0x1"})


def test_other_wallet_errors_propagate():
    eth = FakeEth(accounts=[AUTHOR], error=ValueError({"code": -32000, "message": "insufficient funds"}))
    wallet = Web3WalletGateway(FakeW3(eth))

    with pytest.raises(ValueError):
        wallet.send_transaction({"to": CONTRACT, "data": "0x", "gas": "0x1"})
