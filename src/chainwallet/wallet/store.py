# src/chainwallet/wallet/store.py
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .keys import KeyPair, derive_address, is_valid_address, parse_public_key, parse_secret_key
from .models import KeyPairRecord, WalletDocument, WalletRecord
from ..exceptions import (
    DuplicateWalletName,
    InvalidKeyEncoding,
    InvalidWalletName,
    StoreCorruptError,
    StoreWriteError,
)
from ..utils.config import Config

logger = logging.getLogger(__name__)


class WalletStore:
    """Ordered, immutable mapping from wallet name to key material.

    Mutating operations return a new store so a failed insert never leaves
    a half-updated store behind.
    """

    def __init__(self, records: Optional[Iterable[WalletRecord]] = None):
        self._records: Dict[str, WalletRecord] = {}
        for record in records or ():
            if record.name in self._records:
                raise DuplicateWalletName(record.name)
            self._records[record.name] = record

    def insert(self, name: str, key_pair: KeyPair) -> 'WalletStore':
        if not name or not name.strip():
            raise InvalidWalletName("Wallet name must not be empty")
        if name in self._records:
            raise DuplicateWalletName(name)

        record = WalletRecord(
            name=name,
            public_key_hex=key_pair.address,
            secret_key_hex=key_pair.secret_key_hex
        )
        return WalletStore([*self._records.values(), record])

    def find(self, name: str) -> Optional[WalletRecord]:
        return self._records.get(name)

    def find_by_address(self, address: str) -> Optional[WalletRecord]:
        """Match any encoding of a stored public key (case, compressed or not)"""
        try:
            address = derive_address(parse_public_key(address))
        except InvalidKeyEncoding:
            return None
        for record in self._records.values():
            if record.public_key_hex == address:
                return record
        return None

    def list_all(self) -> List[WalletRecord]:
        return list(self._records.values())

    def resolve_address(self, name_or_address: str) -> Optional[str]:
        """Resolve a wallet name or a raw public key to an address.

        Names are looked up first, so a wallet named like a key shadows it.
        An address belonging to a stored wallet resolves to its stored form;
        any other valid key is passed through unchanged.
        """
        record = self.find(name_or_address)
        if record is None:
            record = self.find_by_address(name_or_address)
        if record is not None:
            return record.public_key_hex
        if is_valid_address(name_or_address):
            return name_or_address
        return None

    def to_document(self) -> WalletDocument:
        return WalletDocument(wallets={
            record.name: KeyPairRecord(
                private_key=record.secret_key_hex,
                public_key=record.public_key_hex
            )
            for record in self._records.values()
        })

    @classmethod
    def from_document(cls, document: WalletDocument) -> 'WalletStore':
        return cls(
            WalletRecord(
                name=name,
                public_key_hex=entry.public_key,
                secret_key_hex=entry.private_key
            )
            for name, entry in document.wallets.items()
        )

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self):
        return iter(self._records.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, WalletStore):
            return NotImplemented
        return list(self._records.items()) == list(other._records.items())

    def __repr__(self) -> str:
        return f"WalletStore(names={list(self._records)})"


def _fsync_directory(path: Path) -> None:
    """Flush directory metadata so the rename itself is durable."""
    if os.name == "nt":
        return
    flags = getattr(os, "O_DIRECTORY", None)
    if flags is None:
        return
    fd = os.open(str(path), flags)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class WalletFile:
    """Persists a WalletStore as a single JSON document with atomic replace."""

    def __init__(self, wallet_dir: Union[str, Path], filename: str = Config.WALLET_FILE):
        self.wallet_dir = Path(wallet_dir)
        self.path = self.wallet_dir / filename

    def load(self) -> WalletStore:
        """Read the wallet file; a missing file is an empty store"""
        if not self.path.exists():
            logger.debug(f"No wallet file at {self.path}, starting empty")
            return WalletStore()

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreCorruptError(str(self.path), f"Cannot read wallet file ({e})") from e

        try:
            document = WalletDocument.model_validate_json(raw)
        except ValidationError as e:
            raise StoreCorruptError(
                str(self.path),
                f"Wallet file does not parse ({e.error_count()} error(s))"
            ) from e

        store = WalletStore.from_document(document)
        for record in store:
            self._check_record(record)

        logger.debug(f"Loaded {len(store)} wallet(s) from {self.path}")
        return store

    def _check_record(self, record: WalletRecord) -> None:
        try:
            derived = parse_secret_key(record.secret_key_hex).address
        except InvalidKeyEncoding as e:
            raise StoreCorruptError(
                str(self.path), f"Wallet '{record.name}' has an invalid secret key"
            ) from e
        if derived != record.public_key_hex:
            raise StoreCorruptError(
                str(self.path),
                f"Wallet '{record.name}' public key does not match its secret key"
            )

    def save(self, store: WalletStore) -> None:
        """Write the whole store: temp file, fsync, then rename over the target."""
        content = store.to_document().model_dump_json(indent=2).encode("utf-8")

        try:
            self.wallet_dir.mkdir(mode=Config.WALLET_DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(str(self.wallet_dir), f"Cannot create wallet directory ({e})") from e

        temp_path: Optional[Path] = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=str(self.wallet_dir),
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False
            ) as tmp:
                temp_path = Path(tmp.name)
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(temp_path, Config.WALLET_FILE_MODE)
            os.replace(temp_path, self.path)
        except BaseException as e:
            # Interrupted or failed: the previous file is still in place
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            if isinstance(e, OSError):
                raise StoreWriteError(str(self.path), f"Cannot write wallet file ({e})") from e
            raise

        try:
            _fsync_directory(self.wallet_dir)
        except OSError as e:
            logger.warning(f"Failed to fsync wallet directory {self.wallet_dir}: {e}")

        logger.info(f"Saved {len(store)} wallet(s) to {self.path}")
