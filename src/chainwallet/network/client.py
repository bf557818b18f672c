# File: src/chainwallet/network/client.py
"""
Ledger Client

Translates wallet intents into BlockchainService calls and maps the
responses, and every gRPC failure, back to local types.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import grpc

from . import messages
from ..blockchain.block import Block
from ..blockchain.transaction import SignedTransaction
from ..exceptions import InvalidBlockIndex, NetworkError, RemoteRejected
from ..utils.config import Config

logger = logging.getLogger(__name__)

# Status codes meaning the service understood the request and refused it.
# Everything else is treated as a transport failure.
REJECTION_CODES = frozenset({
    grpc.StatusCode.INVALID_ARGUMENT,
    grpc.StatusCode.FAILED_PRECONDITION,
    grpc.StatusCode.PERMISSION_DENIED,
    grpc.StatusCode.ALREADY_EXISTS,
    grpc.StatusCode.OUT_OF_RANGE,
    grpc.StatusCode.UNAUTHENTICATED,
})


@dataclass(frozen=True)
class TransactionResult:
    success: bool
    message: str


@dataclass(frozen=True)
class FaucetResult:
    success: bool
    amount: int
    message: str


def normalize_endpoint(endpoint: str) -> str:
    """Accept URL-style endpoints ("http://[::1]:50051") as plain gRPC targets"""
    if endpoint.startswith("http://"):
        endpoint = endpoint[len("http://"):]
    return endpoint.rstrip("/")


def transaction_to_message(tx: SignedTransaction):
    return messages.Transaction(**{
        "from": tx.sender,
        "to": tx.recipient,
        "amount": tx.amount,
        "timestamp": tx.timestamp,
        "signature": tx.signature,
    })


def transaction_from_message(message) -> SignedTransaction:
    return SignedTransaction(
        sender=getattr(message, "from"),
        recipient=message.to,
        amount=message.amount,
        timestamp=message.timestamp,
        signature=bytes(message.signature)
    )


def block_from_message(message) -> Block:
    return Block(
        index=message.index,
        timestamp=message.timestamp,
        previous_hash=message.previousHash,
        hash=message.hash,
        nonce=message.nonce,
        miner=message.miner,
        transactions=[transaction_from_message(tx) for tx in message.transactions]
    )


class LedgerClient:
    """
    Blocking client for the remote ledger.
    Every call carries a deadline so the CLI never hangs on a dead endpoint.
    """

    def __init__(
        self,
        endpoint: str = Config.DEFAULT_ENDPOINT,
        timeout: float = Config.RPC_TIMEOUT,
        stub=None
    ):
        self.endpoint = normalize_endpoint(endpoint)
        self.timeout = timeout
        self._channel = None
        if stub is None:
            self._channel = grpc.insecure_channel(self.endpoint)
            stub = messages.BlockchainServiceStub(self._channel)
        self.stub = stub

    def _call(self, method: str, request, not_found=None):
        """Invoke a stub method, converting gRPC errors to wallet errors.

        ``not_found`` is returned instead of raising when the service answers
        NOT_FOUND.
        """
        logger.debug(f"RPC {method} -> {self.endpoint}")
        try:
            return getattr(self.stub, method)(request, timeout=self.timeout)
        except grpc.RpcError as e:
            code = e.code() if hasattr(e, "code") else None
            details = e.details() if hasattr(e, "details") else str(e)
            if code == grpc.StatusCode.NOT_FOUND and not_found is not None:
                logger.debug(f"RPC {method}: not found ({details})")
                return not_found
            if code in REJECTION_CODES:
                raise RemoteRejected(details or str(code), operation=method) from e
            if code == grpc.StatusCode.DEADLINE_EXCEEDED:
                logger.warning(f"RPC timeout: {method} after {self.timeout}s")
                raise NetworkError(
                    f"{method} timed out after {self.timeout}s ({self.endpoint})"
                ) from e
            logger.warning(f"RPC {method} failed: {code}")
            raise NetworkError(
                f"Failed to reach ledger service at {self.endpoint}: {details or code}"
            ) from e

    def submit_transaction(self, signed_tx: SignedTransaction) -> TransactionResult:
        """Broadcast a signed transaction; refusal raises RemoteRejected."""
        response = self._call("SubmitTransaction", transaction_to_message(signed_tx))
        result = TransactionResult(success=response.success, message=response.message)
        if not result.success:
            raise RemoteRejected(result.message, operation="transaction")
        return result

    def get_balance(self, address: str) -> int:
        """Unknown addresses have a zero balance."""
        response = self._call(
            "GetBalance",
            messages.BalanceRequest(address=address),
            not_found=messages.BalanceResponse(balance=0)
        )
        return response.balance

    def request_faucet(self, address: str) -> FaucetResult:
        response = self._call("RequestFaucet", messages.FaucetRequest(address=address))
        return FaucetResult(
            success=response.success,
            amount=response.amount,
            message=response.message
        )

    def get_history(self, address: str) -> List[SignedTransaction]:
        response = self._call(
            "GetHistory",
            messages.HistoryRequest(address=address),
            not_found=messages.HistoryResponse()
        )
        return [transaction_from_message(tx) for tx in response.transactions]

    def get_state(self, address: str = "") -> List[Block]:
        response = self._call("GetState", messages.GetStateRequest(address=address))
        return [block_from_message(block) for block in response.blocks]

    def get_block(self, index: int) -> Optional[Block]:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= Config.MAX_AMOUNT:
            raise InvalidBlockIndex(index)
        response = self._call(
            "GetBlock",
            messages.GetBlockRequest(index=index),
            not_found=messages.GetBlockResponse()
        )
        if not response.HasField("block"):
            return None
        return block_from_message(response.block)

    def close(self):
        if self._channel is not None:
            self._channel.close()
            self._channel = None

    def __enter__(self) -> 'LedgerClient':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
