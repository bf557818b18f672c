# src/chainwallet/wallet/keys.py
import string
from typing import Optional

import ecdsa
from ecdsa.errors import MalformedPointError

from ..exceptions import InvalidKeyEncoding, KeyGenerationError

CURVE = ecdsa.SECP256k1
SECRET_KEY_LENGTH = 32
COMPRESSED_KEY_LENGTH = 33
UNCOMPRESSED_KEY_LENGTH = 65


class KeyPair:
    """A secp256k1 key pair. The compressed public key doubles as the address."""

    def __init__(self, signing_key: Optional[ecdsa.SigningKey] = None):
        if signing_key is None:
            signing_key = _generate_signing_key()
        self.signing_key = signing_key
        self.verifying_key = signing_key.get_verifying_key()

    @classmethod
    def generate(cls) -> 'KeyPair':
        """Generate a new keypair"""
        return cls()

    @property
    def secret_key(self) -> bytes:
        return self.signing_key.to_string()

    @property
    def secret_key_hex(self) -> str:
        return self.secret_key.hex()

    @property
    def public_key(self) -> bytes:
        """Compressed SEC1 encoding of the public point"""
        return self.verifying_key.to_string("compressed")

    @property
    def address(self) -> str:
        return derive_address(self.public_key)

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyPair):
            return NotImplemented
        return self.secret_key == other.secret_key

    def __hash__(self) -> int:
        return hash(self.public_key)

    def __repr__(self) -> str:
        # Never include the secret key
        return f"KeyPair(address={self.address})"


def _generate_signing_key() -> ecdsa.SigningKey:
    try:
        return ecdsa.SigningKey.generate(curve=CURVE)
    except (OSError, NotImplementedError) as e:
        raise KeyGenerationError(f"Entropy source unavailable: {e}") from e


def derive_address(public_key) -> str:
    """Hex of the compressed public key.

    Accepts raw SEC1 bytes (compressed or uncompressed) or a VerifyingKey.
    """
    if isinstance(public_key, ecdsa.VerifyingKey):
        return public_key.to_string("compressed").hex()
    if len(public_key) == COMPRESSED_KEY_LENGTH:
        return bytes(public_key).hex()
    return _load_point(bytes(public_key)).to_string("compressed").hex()


def _is_hex(text: str) -> bool:
    return all(c in string.hexdigits for c in text)


def parse_secret_key(secret_hex: str) -> KeyPair:
    """Decode a 64-character hex secret into a key pair"""
    if not isinstance(secret_hex, str) or len(secret_hex) != SECRET_KEY_LENGTH * 2 \
            or not _is_hex(secret_hex):
        raise InvalidKeyEncoding("Secret key must be 64 hexadecimal characters")

    secret_bytes = bytes.fromhex(secret_hex)
    exponent = int.from_bytes(secret_bytes, "big")
    if not 1 <= exponent < CURVE.order:
        raise InvalidKeyEncoding("Secret key is outside the valid range for secp256k1")

    try:
        signing_key = ecdsa.SigningKey.from_string(secret_bytes, curve=CURVE)
    except MalformedPointError as e:
        raise InvalidKeyEncoding(f"Invalid secret key: {e}") from e
    return KeyPair(signing_key)


def _load_point(public_bytes: bytes) -> ecdsa.VerifyingKey:
    # ecdsa also accepts the bare 64-byte form; the ledger does not
    if len(public_bytes) not in (COMPRESSED_KEY_LENGTH, UNCOMPRESSED_KEY_LENGTH):
        raise InvalidKeyEncoding(
            f"Public key must be {COMPRESSED_KEY_LENGTH} or {UNCOMPRESSED_KEY_LENGTH} bytes, "
            f"got {len(public_bytes)}"
        )
    try:
        return ecdsa.VerifyingKey.from_string(public_bytes, curve=CURVE)
    except (MalformedPointError, ValueError) as e:
        raise InvalidKeyEncoding(f"Invalid public key: {e}") from e


def parse_public_key(public_hex: str) -> ecdsa.VerifyingKey:
    """Decode a hex address into a verifying key"""
    if not isinstance(public_hex, str) or len(public_hex) % 2 or not _is_hex(public_hex):
        raise InvalidKeyEncoding("Public key must be an even-length hexadecimal string")
    return _load_point(bytes.fromhex(public_hex))


def is_valid_address(text: str) -> bool:
    try:
        parse_public_key(text)
    except InvalidKeyEncoding:
        return False
    return True
