"""
Pytest fixtures for the LedgerCall SDK tests.
"""
import base64
import time

import pytest

from ledgercall_sdk.config import ClientConfig
from ledgercall_sdk.gateway import StubGateway, clear_gateway_cache
from ledgercall_sdk.gateway._rate_limited_log import reset_rate_limits
from ledgercall_sdk.models import Transaction, WalletConfig

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_ADDRESS = "octTestSender1111111111111111111111111111111"
TEST_CONTRACT = "octTestContract22222222222222222222222222222"
TEST_KEY_BYTES = bytes(range(32))
TEST_PRIV_B64 = base64.b64encode(TEST_KEY_BYTES).decode("ascii")
TEST_TIMESTAMP = 1700000000.0


# Make time.sleep instantaneous so polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Clear caches shared across tests."""
    reset_rate_limits()
    ClientConfig.clear_cache()
    yield
    clear_gateway_cache()
    ClientConfig.clear_cache()


@pytest.fixture
def private_key():
    return TEST_KEY_BYTES


@pytest.fixture
def wallet():
    return WalletConfig(priv=TEST_PRIV_B64, addr=TEST_ADDRESS, rpc=TEST_RPC_URL)


@pytest.fixture
def stub_gateway():
    """Stub gateway with the test account at nonce 4."""
    gateway = StubGateway()
    gateway.add_account(TEST_ADDRESS, balance="1000", nonce=4)
    return gateway


@pytest.fixture
def sample_tx():
    return Transaction(
        from_address="A",
        to_address="B",
        amount="0",
        nonce=5,
        ou="1",
        timestamp=TEST_TIMESTAMP,
    )
