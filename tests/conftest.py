# tests/conftest.py
import os
import shutil
import tempfile

import grpc
import pytest

from chainwallet.wallet.store import WalletFile


class FakeRpcError(grpc.RpcError):
    """Stand-in for the errors a grpc channel raises"""

    def __init__(self, code: grpc.StatusCode, details: str = ""):
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details


@pytest.fixture
def rpc_error():
    return FakeRpcError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CHAINWALLET_* settings from the developer's shell out of tests"""
    for variable in list(os.environ):
        if variable.startswith("CHAINWALLET_"):
            monkeypatch.delenv(variable)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for wallet files"""
    tmp_dir = tempfile.mkdtemp()
    yield tmp_dir
    shutil.rmtree(tmp_dir)


@pytest.fixture
def wallet_dir(temp_dir):
    return os.path.join(temp_dir, "wallets")


@pytest.fixture
def wallet_file(wallet_dir):
    return WalletFile(wallet_dir)
