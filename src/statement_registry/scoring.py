"""
Heuristic reputation scores computed from an explorer transaction list.

Both scores are crude proxies, not classifiers: a missing recipient is read
as a contract deployment, and call data longer than 200 hex characters is
read as a token/contract creation call. Both functions are pure, bounded to
[0, 100] and never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Union

from .chain_utils import ZERO_ADDRESS
from .explorer import RawTransaction

SECONDS_PER_DAY = 86400
MAX_SCORE = 100

DEPLOYMENT_POINTS = 15
TOKEN_CREATION_POINTS = 10
TOKEN_CREATION_INPUT_LENGTH = 200
DEPLOYMENT_BONUS_THRESHOLD = 5
DEPLOYMENT_BONUS = 20
TOKEN_CREATION_BONUS_THRESHOLD = 3
TOKEN_CREATION_BONUS = 15

VOLUME_POINTS_PER_TX = 2
VOLUME_CAP = 40

TransactionLike = Union[RawTransaction, Mapping[str, Any]]


@dataclass(frozen=True)
class BuilderScore:
    score: int
    deployments: int
    token_creations: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "deployments": self.deployments,
            "tokenCreations": self.token_creations,
        }


@dataclass(frozen=True)
class OnchainScore:
    score: int
    tx_count: int
    avg_gas_used: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "txCount": self.tx_count,
            "avgGasUsed": self.avg_gas_used,
        }


def _coerce(transactions: Iterable[TransactionLike]) -> List[RawTransaction]:
    return [
        tx if isinstance(tx, RawTransaction) else RawTransaction.from_dict(tx)
        for tx in transactions
    ]


def _is_deployment(tx: RawTransaction) -> bool:
    return not tx.to or tx.to.lower() == ZERO_ADDRESS


def builder_score(transactions: Iterable[TransactionLike]) -> BuilderScore:
    """
    Score contract-building activity.

    15 points per deployment, 10 per large-payload call, +20 for more
    than 5 deployments, +15 for more than 3 large-payload calls, capped
    at 100.
    """
    score = 0
    deployments = 0
    token_creations = 0

    for tx in _coerce(transactions):
        if _is_deployment(tx):
            deployments += 1
            score += DEPLOYMENT_POINTS
        if len(tx.input) > TOKEN_CREATION_INPUT_LENGTH:
            token_creations += 1
            score += TOKEN_CREATION_POINTS

    if deployments > DEPLOYMENT_BONUS_THRESHOLD:
        score += DEPLOYMENT_BONUS
    if token_creations > TOKEN_CREATION_BONUS_THRESHOLD:
        score += TOKEN_CREATION_BONUS

    return BuilderScore(
        score=min(score, MAX_SCORE),
        deployments=deployments,
        token_creations=token_creations,
    )


def _span_points(days_span: float) -> int:
    if days_span > 30:
        return 30
    if days_span > 7:
        return 20
    if days_span > 1:
        return 10
    return 0


def _frequency_points(avg_tx_per_day: float) -> int:
    if avg_tx_per_day > 5:
        return 30
    if avg_tx_per_day > 2:
        return 20
    if avg_tx_per_day > 0.5:
        return 10
    return 0


def onchain_score(transactions: Iterable[TransactionLike]) -> OnchainScore:
    """
    Score transaction volume and how consistently it is spread over time.

    Volume gives 2 points per transaction up to 40; the first-to-last
    span and the average transactions per day add up to 30 each.
    """
    txs = _coerce(transactions)
    tx_count = len(txs)

    score = min(tx_count * VOLUME_POINTS_PER_TX, VOLUME_CAP)
    if tx_count > 0:
        timestamps = sorted(tx.timestamp for tx in txs)
        days_span = (timestamps[-1] - timestamps[0]) / SECONDS_PER_DAY
        score += _span_points(days_span)
        score += _frequency_points(tx_count / max(days_span, 1))

    avg_gas_used = sum(tx.gas_used for tx in txs) / max(tx_count, 1)
    return OnchainScore(
        score=min(score, MAX_SCORE),
        tx_count=tx_count,
        avg_gas_used=avg_gas_used,
    )
