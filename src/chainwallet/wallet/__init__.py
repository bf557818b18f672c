# File: src/chainwallet/wallet/__init__.py
from .keys import KeyPair, derive_address, parse_public_key, parse_secret_key
from .models import WalletRecord
from .store import WalletFile, WalletStore

__all__ = [
    'KeyPair', 'derive_address', 'parse_public_key', 'parse_secret_key',
    'WalletRecord', 'WalletFile', 'WalletStore',
]
