# src/chainwallet/blockchain/block.py
from dataclasses import dataclass, field
from typing import List

from .transaction import SignedTransaction


@dataclass(frozen=True)
class Block:
    """A block as reported by the ledger service. Read-only on this side."""
    index: int
    timestamp: int
    previous_hash: str
    hash: str
    nonce: int
    miner: str
    transactions: List[SignedTransaction] = field(default_factory=list)

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)
