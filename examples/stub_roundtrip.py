#!/usr/bin/env python3
"""
Example of the full transaction lifecycle against the in-memory stub gateway.
"""
import base64
import logging
import os

from ledgercall_sdk import LedgerClient, WalletConfig
from ledgercall_sdk.gateway import StubGateway
from ledgercall_sdk.poller import QUICK_CHECK_ATTEMPTS


def main():
    """
    Demonstrate call -> sign -> submit -> poll without a network.

    This example shows how to:
    1. Create a wallet from a random key
    2. Submit a signed mutating call
    3. Wait for confirmation with a quick-check budget
    """
    logging.basicConfig(level=logging.INFO)

    wallet = WalletConfig(
        priv=base64.b64encode(os.urandom(32)).decode("ascii"),
        addr="octDemoAddress",
        rpc="http://localhost:8080",
    )
    gateway = StubGateway(polls_until_confirmed=2)
    gateway.add_account(wallet.address, balance="100", nonce=0)
    gateway.set_view_result("octDemoContract", "greet", "hello")

    client = LedgerClient(wallet, gateway=gateway)
    print(f"greet() -> {client.view('octDemoContract', 'greet')}")

    receipt = client.call_and_wait(
        "octDemoContract", "set_greeting", ["hi there"],
        max_attempts=QUICK_CHECK_ATTEMPTS, poll_interval=0.1,
    )
    print(f"tx {receipt.tx_hash[:16]}... {receipt.status.value} after {receipt.attempts} poll(s)")
    print(f"nonce is now {client.get_balance().nonce}")


if __name__ == "__main__":
    main()
