"""
Command-line driver for the LedgerCall SDK.
"""
import logging
from typing import List, Optional

import typer

from .client import LedgerClient
from .exceptions import LedgerCallError
from .poller import DEFAULT_POLL_INTERVAL, LONG_WAIT_ATTEMPTS, QUICK_CHECK_ATTEMPTS

app = typer.Typer(help="Call contracts on a remote ledger and wait for confirmation.")

WalletOption = typer.Option(None, "--wallet", "-w", help="Path to wallet.json")


def _client(wallet: Optional[str]) -> LedgerClient:
    return LedgerClient.from_files(wallet_path=wallet)


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def balance(wallet: Optional[str] = WalletOption):
    """Show balance and nonce of the wallet address."""
    try:
        client = _client(wallet)
        info = client.get_balance()
    except (LedgerCallError, ValueError) as e:
        _fail(e)
    typer.echo(f"address: {client.address}")
    typer.echo(f"balance: {info.balance}")
    typer.echo(f"nonce:   {info.nonce}")


@app.command()
def view(
    contract: str = typer.Argument(..., help="Contract address"),
    method: str = typer.Argument(..., help="View method name"),
    params: Optional[List[str]] = typer.Argument(None, help="Ordered method parameters"),
    wallet: Optional[str] = WalletOption,
):
    """Call a read-only contract method and print its result."""
    try:
        result = _client(wallet).view(contract, method, params or [])
    except (LedgerCallError, ValueError) as e:
        _fail(e)
    if result is None:
        typer.echo("(no result)")
        raise typer.Exit(code=2)
    typer.echo(result)


@app.command()
def call(
    contract: str = typer.Argument(..., help="Contract address"),
    method: str = typer.Argument(..., help="Method name"),
    params: Optional[List[str]] = typer.Argument(None, help="Ordered method parameters"),
    wait: int = typer.Option(0, "--wait", help="Poll for confirmation up to this many times (0: do not wait)"),
    interval: float = typer.Option(DEFAULT_POLL_INTERVAL, "--interval", help="Seconds between polls"),
    wallet: Optional[str] = WalletOption,
):
    """Sign and submit a mutating contract call."""
    try:
        client = _client(wallet)
        tx_hash = client.call(contract, method, params or [])
    except (LedgerCallError, ValueError) as e:
        _fail(e)
    typer.echo(f"tx_hash: {tx_hash}")

    if wait > 0:
        receipt = client.wait(tx_hash, wait, poll_interval=interval)
        typer.echo(f"status:  {receipt.status.value}")
        if not receipt.confirmed:
            raise typer.Exit(code=2)


@app.command("wait")
def wait_command(
    tx_hash: str = typer.Argument(..., help="Transaction hash"),
    attempts: int = typer.Option(..., "--attempts", "-n", min=1,
                                 help=f"Poll budget (e.g. {QUICK_CHECK_ATTEMPTS} for a quick check, "
                                      f"{LONG_WAIT_ATTEMPTS} for a long wait)"),
    interval: float = typer.Option(DEFAULT_POLL_INTERVAL, "--interval", help="Seconds between polls"),
    wallet: Optional[str] = WalletOption,
):
    """Wait for a submitted transaction to be confirmed."""
    try:
        client = _client(wallet)
    except (LedgerCallError, ValueError) as e:
        _fail(e)
    receipt = client.wait(tx_hash, attempts, poll_interval=interval)
    typer.echo(f"status: {receipt.status.value} after {receipt.attempts} poll(s)")
    if not receipt.confirmed:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
