"""
chainwallet - command-line wallet for a gRPC ledger service.

Keys are secp256k1, transactions are signed locally over a canonical JSON
encoding and submitted to the remote BlockchainService.
"""

__version__ = "0.1.0"
