"""
Tests for the LedgerClient facade.
"""
from unittest.mock import patch

import pytest

from ledgercall_sdk import LedgerClient, signing
from ledgercall_sdk.exceptions import InvalidKeyError, RemoteUnavailableError, SubmissionRejectedError
from ledgercall_sdk.gateway import HttpGateway
from ledgercall_sdk.models import ContractInterface, TxStatus, WalletConfig

from conftest import TEST_ADDRESS, TEST_CONTRACT, TEST_PRIV_B64


@pytest.fixture
def client(wallet, stub_gateway):
    return LedgerClient(wallet, gateway=stub_gateway)


def test_client_initialization(client, stub_gateway):
    assert client.address == TEST_ADDRESS
    assert client.gateway is stub_gateway
    assert len(client.public_key) == 44


def test_client_default_gateway(wallet):
    client = LedgerClient(wallet)
    assert isinstance(client.gateway, HttpGateway)
    assert client.gateway.base_url == "https://rpc.example.com"


def test_client_rejects_bad_key():
    wallet = WalletConfig(priv="AAAA", addr=TEST_ADDRESS, rpc="https://rpc.example.com")
    with pytest.raises(InvalidKeyError):
        LedgerClient(wallet)


def test_client_rejects_plain_http():
    wallet = WalletConfig(priv=TEST_PRIV_B64, addr=TEST_ADDRESS, rpc="http://rpc.example.com")
    with pytest.raises(ValueError, match="https"):
        LedgerClient(wallet)


def test_repr_hides_key(client):
    assert TEST_PRIV_B64 not in repr(client)


def test_client_does_not_hold_raw_key(client):
    """Only the encoded wallet is kept; raw key bytes exist only while signing"""
    assert not any(isinstance(value, (bytes, bytearray)) for value in vars(client).values())


def test_key_decoded_per_call(client, stub_gateway):
    with patch("ledgercall_sdk.client.signing.decode_private_key", wraps=signing.decode_private_key) as decode:
        client.call(TEST_CONTRACT, "set", ["a"])
        client.call(TEST_CONTRACT, "set", ["b"])
    assert decode.call_count == 2
    assert stub_gateway.accounts[TEST_ADDRESS]["nonce"] == 6


def test_get_balance(client):
    info = client.get_balance()
    assert info.nonce == 4


def test_view(client, stub_gateway):
    stub_gateway.set_view_result(TEST_CONTRACT, "greet", "hello")
    assert client.view(TEST_CONTRACT, "greet") == "hello"
    assert client.view(TEST_CONTRACT, "missing") is None


def test_call_fetches_fresh_nonce_each_time(client, stub_gateway):
    """Every mutating call re-fetches the nonce: 5 then 6, never reused"""
    client.call(TEST_CONTRACT, "set", ["a"])
    client.call(TEST_CONTRACT, "set", ["b"])

    nonces = [payload["nonce"] for method, path, payload in stub_gateway.requests if path == "/call-contract"]
    balance_fetches = [path for method, path, payload in stub_gateway.requests if path.startswith("/balance/")]
    assert nonces == [5, 6]
    assert len(balance_fetches) == 2


def test_call_recovers_after_failed_call(client, stub_gateway):
    """A failed submission does not leave a stale nonce behind"""
    stub_gateway.fail_next(1)
    with pytest.raises(RemoteUnavailableError):
        client.call(TEST_CONTRACT, "set", ["a"])

    client.call(TEST_CONTRACT, "set", ["a"])
    assert stub_gateway.accounts[TEST_ADDRESS]["nonce"] == 5


def test_call_rejected(client, stub_gateway):
    stub_gateway.post = lambda path, payload: {"status": "error", "error": "insufficient balance"}
    with pytest.raises(SubmissionRejectedError, match="insufficient balance"):
        client.call(TEST_CONTRACT, "set", [])


def test_call_and_wait(client, stub_gateway):
    stub_gateway.polls_until_confirmed = 3
    receipt = client.call_and_wait(TEST_CONTRACT, "set", ["a"], max_attempts=5, poll_interval=0)
    assert receipt.status == TxStatus.CONFIRMED
    assert receipt.attempts == 3


def test_call_and_wait_timeout(client, stub_gateway):
    stub_gateway.polls_until_confirmed = 10
    receipt = client.call_and_wait(TEST_CONTRACT, "set", ["a"], max_attempts=2, poll_interval=0)
    assert receipt.status == TxStatus.TIMED_OUT
    assert receipt.attempts == 2


def test_invoke_with_interface(wallet, stub_gateway):
    interface = ContractInterface.model_validate({
        "contract": TEST_CONTRACT,
        "methods": [
            {"name": "greet", "type": "view"},
            {"name": "set", "type": "call", "params": [{"name": "value", "max": 5}]},
        ],
    })
    stub_gateway.set_view_result(TEST_CONTRACT, "greet", "hello")
    client = LedgerClient(wallet, gateway=stub_gateway, interface=interface)

    assert client.invoke("greet") == "hello"
    tx_hash = client.invoke("set", ["abc"])
    assert tx_hash in stub_gateway.submitted
