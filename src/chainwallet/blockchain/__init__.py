# src/chainwallet/blockchain/__init__.py
from .block import Block
from .transaction import SignedTransaction, Transaction

__all__ = ['Block', 'SignedTransaction', 'Transaction']
