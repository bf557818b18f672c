# src/chainwallet/crypto/hash.py
import hashlib

DIGEST_SIZE = 32


class Hash:
    @staticmethod
    def sha256(data: bytes) -> bytes:
        """
        Create SHA-256 digest of raw bytes
        """
        return hashlib.sha256(data).digest()
