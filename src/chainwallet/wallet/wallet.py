# src/chainwallet/wallet/wallet.py
import logging
import time
from typing import Callable, List, Optional

from .keys import KeyPair, derive_address, parse_public_key, parse_secret_key
from .models import WalletRecord
from .store import WalletFile, WalletStore
from ..blockchain.block import Block
from ..blockchain.transaction import SignedTransaction, Transaction
from ..crypto.signature import sign_transaction
from ..exceptions import (
    InvalidAddress,
    InvalidAmount,
    RemoteRejected,
    WalletNotFound,
)
from ..network.client import LedgerClient
from ..utils.config import Config

logger = logging.getLogger(__name__)


class WalletClient:
    """Runs one wallet command end to end.

    Each call loads the wallet file afresh; only ``create_wallet`` writes it.
    """

    def __init__(
        self,
        wallet_file: WalletFile,
        ledger: Optional[LedgerClient] = None,
        clock: Callable[[], float] = time.time
    ):
        self.wallet_file = wallet_file
        self._ledger = ledger
        self.clock = clock

    @property
    def ledger(self) -> LedgerClient:
        if self._ledger is None:
            raise RuntimeError("No ledger client configured")
        return self._ledger

    def _load(self) -> WalletStore:
        return self.wallet_file.load()

    def _require_wallet(self, store: WalletStore, name: str) -> WalletRecord:
        record = store.find(name)
        if record is None:
            raise WalletNotFound(name)
        return record

    def create_wallet(self, name: str) -> WalletRecord:
        """Generate a key pair and persist it under ``name``"""
        store = self._load()
        key_pair = KeyPair.generate()
        updated = store.insert(name, key_pair)
        self.wallet_file.save(updated)
        logger.info(f"Created wallet '{name}' with address {key_pair.address}")
        return updated.find(name)

    def list_wallets(self) -> List[WalletRecord]:
        return self._load().list_all()

    def get_balance(self, name_or_address: str) -> int:
        address = self._load().resolve_address(name_or_address)
        if address is None:
            raise WalletNotFound(name_or_address)
        return self.ledger.get_balance(address)

    def send_transaction(self, from_name: str, to_name_or_address: str, amount: int) -> SignedTransaction:
        """Sign a transfer with the sender's key and submit it.

        All local checks happen before the timestamp is taken and before any
        network call.
        """
        store = self._load()
        sender = self._require_wallet(store, from_name)

        recipient = store.resolve_address(to_name_or_address)
        if recipient is None:
            raise InvalidAddress(to_name_or_address)

        if not isinstance(amount, int) or isinstance(amount, bool) \
                or not 0 < amount <= Config.MAX_AMOUNT:
            raise InvalidAmount(amount)

        if derive_address(parse_public_key(recipient)) == sender.public_key_hex:
            logger.warning(f"Wallet '{from_name}' is sending to its own address")

        key_pair = parse_secret_key(sender.secret_key_hex)
        tx = Transaction(
            sender=sender.public_key_hex,
            recipient=recipient,
            amount=amount,
            timestamp=int(self.clock())
        )
        signed_tx = sign_transaction(tx, key_pair)

        self.ledger.submit_transaction(signed_tx)
        logger.info(f"Submitted {amount} from '{from_name}' to {recipient[:16]}...")
        return signed_tx

    def request_faucet(self, name: str) -> int:
        """Ask the faucet to fund a local wallet; returns the amount credited"""
        record = self._require_wallet(self._load(), name)
        result = self.ledger.request_faucet(record.public_key_hex)
        if not result.success:
            raise RemoteRejected(result.message, operation="faucet request")
        return result.amount

    def get_history(self, name_or_address: str) -> List[SignedTransaction]:
        address = self._load().resolve_address(name_or_address)
        if address is None:
            raise WalletNotFound(name_or_address)
        return self.ledger.get_history(address)

    def get_state(self) -> List[Block]:
        return self.ledger.get_state()

    def get_block(self, index: int) -> Optional[Block]:
        return self.ledger.get_block(index)
