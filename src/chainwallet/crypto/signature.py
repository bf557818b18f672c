#src/chainwallet/crypto/signature.py
import hashlib
import json
import logging
from typing import Union

import ecdsa
from ecdsa.keys import BadDigestError, BadSignatureError
from ecdsa.util import (
    MalformedSignature,
    sigdecode_string,
    sigencode_string_canonize,
)

from .hash import DIGEST_SIZE, Hash
from ..blockchain.transaction import SignedTransaction, Transaction
from ..exceptions import InvalidKeyEncoding
from ..wallet.keys import CURVE, KeyPair, parse_public_key

logger = logging.getLogger(__name__)

SIGNATURE_SIZE = 64
_HALF_ORDER = CURVE.order // 2

PublicKeyLike = Union[str, ecdsa.VerifyingKey]


def encode_signable(tx: Transaction) -> bytes:
    """Canonical bytes for the signable fields.

    The ledger rebuilds the same compact JSON array,
    ``["<from>","<to>",<amount>,<timestamp>]``, before checking a signature,
    so the layout must not change.
    """
    return json.dumps(
        list(tx.signable_fields()),
        separators=(",", ":"),
        ensure_ascii=False
    ).encode("utf-8")


def hash_message(message: bytes) -> bytes:
    return Hash.sha256(message)


def sign(digest: bytes, key_pair: KeyPair) -> bytes:
    """Deterministic (RFC 6979) low-S ECDSA signature in compact r||s form"""
    if len(digest) != DIGEST_SIZE:
        raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(digest)}")
    return key_pair.signing_key.sign_digest_deterministic(
        digest,
        hashfunc=hashlib.sha256,
        sigencode=sigencode_string_canonize
    )


def verify(digest: bytes, signature: bytes, public_key: PublicKeyLike) -> bool:
    """Check a compact signature against a digest. Never raises."""
    if len(digest) != DIGEST_SIZE or len(signature) != SIGNATURE_SIZE:
        return False

    if not isinstance(public_key, ecdsa.VerifyingKey):
        try:
            public_key = parse_public_key(public_key)
        except InvalidKeyEncoding:
            return False

    try:
        _, s = sigdecode_string(signature, CURVE.order)
        # The ledger only accepts normalised signatures
        if s > _HALF_ORDER:
            return False
        return public_key.verify_digest(signature, digest, sigdecode=sigdecode_string)
    except (BadSignatureError, BadDigestError, MalformedSignature):
        return False


def transaction_digest(tx: Transaction) -> bytes:
    if isinstance(tx, SignedTransaction):
        tx = tx.unsigned
    return hash_message(encode_signable(tx))


def sign_transaction(tx: Transaction, key_pair: KeyPair) -> SignedTransaction:
    """Sign a transaction whose sender is the key pair's address"""
    if tx.sender != key_pair.address:
        raise ValueError("Transaction sender does not match the signing key")

    signature = sign(transaction_digest(tx), key_pair)
    logger.debug(f"Signed transaction {tx.sender[:16]}... -> {tx.recipient[:16]}...: {signature.hex()[:32]}...")
    return SignedTransaction(
        sender=tx.sender,
        recipient=tx.recipient,
        amount=tx.amount,
        timestamp=tx.timestamp,
        signature=signature
    )


def verify_transaction(signed_tx: SignedTransaction) -> bool:
    """Verify a signed transaction against its sender address"""
    return verify(transaction_digest(signed_tx), signed_tx.signature, signed_tx.sender)
