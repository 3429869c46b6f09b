"""
starnotary/cli/wallet.py

Wallet-side commands:

    starnotary keygen wallet.pem              Create a key, print its address
    starnotary address wallet.pem             Print the address of a key
    starnotary sign wallet.pem "<challenge>"  Print the challenge signature

Exit codes:
    0  Success
    2  Error  (missing key, unreadable key, refusing to overwrite)
"""

import sys
from pathlib import Path

import click

from starnotary.core.crypto import WalletKey


def _load_key(key_path: str) -> WalletKey:
    try:
        return WalletKey.from_file(Path(key_path))
    except (FileNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)


@click.command(name="keygen")
@click.argument("out", type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing key file.")
def keygen_command(out: str, force: bool) -> None:
    """Write a new Ed25519 wallet key to OUT (PEM) and print its address."""
    path = Path(out)
    if path.exists() and not force:
        click.echo(f"Error: {path} exists (use --force to overwrite)", err=True)
        sys.exit(2)

    key = WalletKey.generate()
    key.save(path)
    click.echo(key.address)


@click.command(name="address")
@click.argument("key_path", type=click.Path(dir_okay=False))
def address_command(key_path: str) -> None:
    """Print the wallet address of KEY_PATH."""
    click.echo(_load_key(key_path).address)


@click.command(name="sign")
@click.argument("key_path", type=click.Path(dir_okay=False))
@click.argument("message")
def sign_command(key_path: str, message: str) -> None:
    """Sign MESSAGE verbatim with KEY_PATH and print the signature."""
    click.echo(_load_key(key_path).sign_message(message))
