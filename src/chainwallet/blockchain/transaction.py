# src/chainwallet/blockchain/transaction.py
from dataclasses import dataclass


@dataclass(frozen=True)
class Transaction:
    """The signable part of a transfer.

    ``sender`` and ``recipient`` are addresses (hex-encoded public keys),
    ``timestamp`` is in seconds since the Unix epoch.
    """
    sender: str
    recipient: str
    amount: int
    timestamp: int

    def signable_fields(self) -> tuple:
        """Fields covered by the signature, in signing order"""
        return (self.sender, self.recipient, self.amount, self.timestamp)


@dataclass(frozen=True)
class SignedTransaction(Transaction):
    signature: bytes = b""

    @property
    def unsigned(self) -> Transaction:
        return Transaction(
            sender=self.sender,
            recipient=self.recipient,
            amount=self.amount,
            timestamp=self.timestamp
        )
