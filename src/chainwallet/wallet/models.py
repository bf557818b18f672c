# File: src/chainwallet/wallet/models.py
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_DIGITS = set("0123456789abcdefABCDEF")


class KeyPairRecord(BaseModel):
    """Key material as stored on disk, keyed by wallet name."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    private_key: str = Field(min_length=64, max_length=64)
    public_key: str = Field(min_length=66, max_length=130)

    @field_validator("private_key", "public_key")
    @classmethod
    def must_be_hex(cls, value: str) -> str:
        if not set(value) <= HEX_DIGITS:
            raise ValueError("must be a hexadecimal string")
        return value.lower()


class WalletRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    public_key_hex: str
    secret_key_hex: str

    @property
    def address(self) -> str:
        return self.public_key_hex


class WalletDocument(BaseModel):
    """The whole wallets.json document. Key order is insertion order."""
    wallets: Dict[str, KeyPairRecord] = Field(default_factory=dict)
