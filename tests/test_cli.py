"""CLI tests."""

import json
import logging

import pytest

from statement_registry import cli
from statement_registry.events import EventKind
from statement_registry.exceptions import InvalidAddressError, InvalidHashError
from statement_registry.hashing import hash_statement
from statement_registry.registry import AddressScores, RegistryStats, SubmittedStatement
from statement_registry.scoring import builder_score, onchain_score
from statement_registry.timeline import ChainQueryWindow, reconcile

from factories import AUTHOR, make_event, make_hash

TX_HASH = "0x" + "cd" * 32


class StubRegistry:
    fetched = True

    def __init__(self, with_wallet):
        self.with_wallet = with_wallet

    def fetch_timeline(self, address):
        if address == "bad":
            raise InvalidAddressError(address)
        return reconcile([make_event(EventKind.PUBLISHED, 10)], [make_event(EventKind.REVOKED, 20)])

    def fetch_stats(self):
        return RegistryStats(published=4, revoked=1, window=ChainQueryWindow(950_000, 1_000_000))

    def fetch_scores(self, address):
        return AddressScores(address.lower(), builder_score([]), onchain_score([]), fetched=self.fetched)

    def _submitted(self, kind, statement_hash):
        assert self.with_wallet
        return SubmittedStatement(kind, statement_hash, TX_HASH, "https://testnet.arcscan.app/tx/" + TX_HASH)

    def publish_statement(self, text):
        return self._submitted(EventKind.PUBLISHED, hash_statement(text))

    def revoke_statement(self, statement_hash):
        if len(statement_hash) != 66:
            raise InvalidHashError(statement_hash)
        return self._submitted(EventKind.REVOKED, statement_hash.lower())


@pytest.fixture
def stub_registry(monkeypatch):
    built = []

    def build(args, with_wallet=False):
        built.append(StubRegistry(with_wallet))
        return built[-1]

    monkeypatch.setattr(cli, "_build_registry", build)
    return built


def test_hash_command(capsys):
    assert cli.main(["hash", "I authored this"]) == 0
    assert json.loads(capsys.readouterr().out) == {"hash": hash_statement("I authored this")}


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "statement-registry" in capsys.readouterr().out


def test_timeline_command(stub_registry, capsys):
    assert cli.main(["timeline", AUTHOR]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [row["type"] for row in rows] == ["revoked", "published"]


def test_stats_command(stub_registry, capsys):
    assert cli.main(["stats"]) == 0
    assert json.loads(capsys.readouterr().out) == {
        "published": 4,
        "revoked": 1,
        "fromBlock": 950_000,
        "toBlock": 1_000_000,
    }


def test_score_command(stub_registry, capsys, caplog):
    with caplog.at_level(logging.WARNING, logger="statement_registry.cli"):
        assert cli.main(["score", AUTHOR]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["address"] == AUTHOR
    assert payload["fetched"] is True
    assert payload["builder"] == {"score": 0, "deployments": 0, "tokenCreations": 0}
    assert "Explorer unavailable" not in caplog.text


def test_score_command_warns_when_explorer_unavailable(stub_registry, monkeypatch, capsys, caplog):
    monkeypatch.setattr(StubRegistry, "fetched", False)
    with caplog.at_level(logging.WARNING, logger="statement_registry.cli"):
        assert cli.main(["score", AUTHOR]) == 0

    assert json.loads(capsys.readouterr().out)["fetched"] is False
    assert "Explorer unavailable" in caplog.text


def test_publish_command_uses_wallet(stub_registry, capsys):
    assert cli.main(["publish", "I authored this"]) == 0

    assert stub_registry[0].with_wallet is True
    assert json.loads(capsys.readouterr().out) == {
        "type": "published",
        "hash": hash_statement("I authored this"),
        "txHash": TX_HASH,
        "explorer": "https://testnet.arcscan.app/tx/" + TX_HASH,
    }


def test_revoke_command(stub_registry, capsys):
    statement_hash = make_hash(7)
    assert cli.main(["revoke", statement_hash.upper().replace("0X", "0x")]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["type"] == "revoked"
    assert payload["hash"] == statement_hash.lower()
    assert payload["txHash"] == TX_HASH


def test_revoke_bad_hash_exits_nonzero(stub_registry, capsys):
    assert cli.main(["revoke", "0xabc"]) == 1
    assert "INVALID_HASH" in capsys.readouterr().err


def test_registry_errors_exit_nonzero(stub_registry, capsys):
    assert cli.main(["timeline", "bad"]) == 1
    assert "INVALID_ADDRESS" in capsys.readouterr().err


def test_build_registry_passes_chain_id_to_wallet(monkeypatch):
    seen = {}

    def from_rpc(rpc_url, private_key=None, chain_id=None):
        seen.update(rpc_url=rpc_url, private_key=private_key, chain_id=chain_id)
        return None

    monkeypatch.setattr(cli.Web3WalletGateway, "from_rpc", staticmethod(from_rpc))
    monkeypatch.setenv("STATEMENT_REGISTRY_PRIVATE_KEY", "0x" + "11" * 32)
    monkeypatch.delenv("STATEMENT_REGISTRY_CHAIN_ID", raising=False)
    args = cli.build_parser().parse_args(["--rpc-url", "http://localhost:8545", "stats"])

    cli._build_registry(args, with_wallet=True)

    assert seen == {"rpc_url": "http://localhost:8545", "private_key": "0x" + "11" * 32, "chain_id": 0x4CEF52}
