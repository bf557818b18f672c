# src/chainwallet/exceptions.py
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    KEY_GENERATION = "key_generation"
    INVALID_KEY_ENCODING = "invalid_key_encoding"
    STORE_CORRUPT = "store_corrupt"
    STORE_WRITE = "store_write"
    DUPLICATE_WALLET = "duplicate_wallet"
    WALLET_NOT_FOUND = "wallet_not_found"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_ADDRESS = "invalid_address"
    INVALID_WALLET_NAME = "invalid_wallet_name"
    INVALID_BLOCK_INDEX = "invalid_block_index"
    NETWORK = "network"
    REMOTE_REJECTED = "remote_rejected"
    CONFIG = "config"


class ChainWalletError(Exception):
    """Base exception class for wallet errors"""
    kind: Optional[ErrorKind] = None


class KeyGenerationError(ChainWalletError):
    """Raised when a key pair cannot be generated"""
    kind = ErrorKind.KEY_GENERATION


class InvalidKeyEncoding(ChainWalletError):
    """Raised when a hex-encoded key cannot be decoded into a valid key"""
    kind = ErrorKind.INVALID_KEY_ENCODING


class StorageError(ChainWalletError):
    """Base exception class for wallet file errors"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class StoreCorruptError(StorageError):
    """Raised when the wallet file exists but cannot be parsed"""
    kind = ErrorKind.STORE_CORRUPT


class StoreWriteError(StorageError):
    """Raised when the wallet file cannot be written"""
    kind = ErrorKind.STORE_WRITE


class DuplicateWalletName(ChainWalletError):
    """Raised when a wallet name is already taken"""
    kind = ErrorKind.DUPLICATE_WALLET

    def __init__(self, name: str):
        super().__init__(f"Wallet '{name}' already exists")
        self.name = name


class WalletNotFound(ChainWalletError):
    """Raised when a wallet name or address cannot be resolved"""
    kind = ErrorKind.WALLET_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Wallet '{name}' not found")
        self.name = name


class InvalidWalletName(ChainWalletError):
    """Raised when a wallet name is empty or blank"""
    kind = ErrorKind.INVALID_WALLET_NAME


class InvalidAmount(ChainWalletError):
    """Raised when a transfer amount is zero or does not fit in a uint64"""
    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, amount: int):
        super().__init__(f"Invalid amount: {amount} (must be between 1 and 2^64 - 1)")
        self.amount = amount


class InvalidAddress(ChainWalletError):
    """Raised when a recipient is neither a known wallet nor a valid public key"""
    kind = ErrorKind.INVALID_ADDRESS

    def __init__(self, address: str):
        super().__init__(f"Invalid address: {address}")
        self.address = address


class InvalidBlockIndex(ChainWalletError):
    """Raised when a block index does not fit in a uint64"""
    kind = ErrorKind.INVALID_BLOCK_INDEX

    def __init__(self, index: int):
        super().__init__(f"Invalid block index: {index}")
        self.index = index


class NetworkError(ChainWalletError):
    """Raised when the ledger service cannot be reached or does not answer in time"""
    kind = ErrorKind.NETWORK


class RemoteRejected(ChainWalletError):
    """Raised when the ledger service refuses a request"""
    kind = ErrorKind.REMOTE_REJECTED

    def __init__(self, message: str, operation: str = "request"):
        super().__init__(f"{operation.capitalize()} rejected: {message}")
        self.message = message
        self.operation = operation


class ConfigError(ChainWalletError):
    """Raised when the configuration file is invalid"""
    kind = ErrorKind.CONFIG
