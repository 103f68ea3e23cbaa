"""
Tests for wallet and contract interface loading.
"""
import json

import pytest

from ledgercall_sdk.config import ClientConfig, load_interface, load_wallet
from ledgercall_sdk.exceptions import ConfigError
from ledgercall_sdk.models import MethodKind

from conftest import TEST_ADDRESS, TEST_PRIV_B64

WALLET = {"priv": TEST_PRIV_B64, "addr": TEST_ADDRESS, "rpc": "https://rpc.example.com"}
INTERFACE = {
    "contract": "octContract",
    "methods": [
        {"name": "greet", "type": "view", "params": []},
        {"name": "set", "type": "call", "params": [{"name": "value", "type": "string", "max": 32}]},
    ],
}


@pytest.fixture
def wallet_file(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text(json.dumps(WALLET))
    return path


@pytest.fixture
def interface_file(tmp_path):
    path = tmp_path / "exec_interface.json"
    path.write_text(json.dumps(INTERFACE))
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("LEDGERCALL_WALLET", "LEDGERCALL_INTERFACE", "LEDGERCALL_RPC_URL"):
        monkeypatch.delenv(var, raising=False)


def test_load_wallet_explicit_path(wallet_file):
    wallet = load_wallet(wallet_file)
    assert wallet.address == TEST_ADDRESS
    assert wallet.rpc_url == "https://rpc.example.com"
    assert wallet.private_key.get_secret_value() == TEST_PRIV_B64


def test_load_wallet_from_env(wallet_file, monkeypatch):
    monkeypatch.setenv("LEDGERCALL_WALLET", str(wallet_file))
    assert load_wallet().address == TEST_ADDRESS


def test_load_wallet_from_cwd(wallet_file, monkeypatch):
    monkeypatch.chdir(wallet_file.parent)
    assert load_wallet().address == TEST_ADDRESS


def test_load_wallet_rpc_override(wallet_file, monkeypatch):
    monkeypatch.setenv("LEDGERCALL_RPC_URL", "http://localhost:8080")
    assert load_wallet(wallet_file).rpc_url == "http://localhost:8080"


def test_load_wallet_not_cached(wallet_file):
    """Key material is re-read from disk on every load"""
    first = load_wallet(wallet_file)
    wallet_file.write_text(json.dumps(dict(WALLET, addr="octChanged")))
    second = load_wallet(wallet_file)

    assert second is not first
    assert second.address == "octChanged"


def test_load_wallet_missing(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_wallet(tmp_path / "nope.json")


def test_load_wallet_invalid_json(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_wallet(path)


def test_load_wallet_missing_fields_does_not_leak_key(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text(json.dumps({"priv": TEST_PRIV_B64}))
    with pytest.raises(ConfigError) as exc_info:
        load_wallet(path)
    assert "addr" in str(exc_info.value)
    assert TEST_PRIV_B64 not in str(exc_info.value)


def test_load_wallet_not_object(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text("[]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_wallet(path)


def test_load_interface(interface_file):
    interface = load_interface(interface_file)
    assert interface.contract == "octContract"
    assert [m.name for m in interface.methods] == ["greet", "set"]
    assert interface.get_method("set").kind == MethodKind.MUTATING
    assert interface.get_method("set").params[0].max == 32


def test_load_interface_from_env(interface_file, monkeypatch):
    monkeypatch.setenv("LEDGERCALL_INTERFACE", str(interface_file))
    assert load_interface().contract == "octContract"


def test_load_interface_invalid(tmp_path):
    path = tmp_path / "exec_interface.json"
    path.write_text(json.dumps({"methods": []}))
    with pytest.raises(ConfigError, match="Invalid contract interface"):
        load_interface(path)


def test_load_interface_cached(interface_file):
    first = load_interface(interface_file)
    interface_file.write_text(json.dumps({"contract": "octOther", "methods": []}))
    assert load_interface(interface_file) is first

    ClientConfig.clear_cache()
    assert load_interface(interface_file).contract == "octOther"
