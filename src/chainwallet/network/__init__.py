# File: src/chainwallet/network/__init__.py
from .client import FaucetResult, LedgerClient, TransactionResult

__all__ = ['FaucetResult', 'LedgerClient', 'TransactionResult']
