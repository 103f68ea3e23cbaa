#!/usr/bin/env python3
"""
Simple example of using the LedgerCall SDK.
"""
from ledgercall_sdk import LedgerClient, LedgerCallError
from ledgercall_sdk.config import load_interface


def main():
    """
    Demonstrate a read-only contract call.

    This example shows how to:
    1. Load the wallet from wallet.json (or $LEDGERCALL_WALLET)
    2. Load the contract interface from exec_interface.json
    3. Call the first view method of the interface
    """
    try:
        client = LedgerClient.from_files()
        interface = load_interface()
    except LedgerCallError as e:
        print(f"ERROR: {e}")
        return

    print(f"Address: {client.address}")

    views = [m for m in interface.methods if m.kind.value == "view" and not m.params]
    if not views:
        print("No parameterless view methods in the interface")
        return

    result = client.view(interface.contract, views[0].name)
    print(f"{views[0].name}() -> {result if result is not None else '(no result)'}")


if __name__ == "__main__":
    main()
