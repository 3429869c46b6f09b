"""
starnotary/cli/demo.py

starnotary demo - in-process registration walkthrough

Builds a fresh registry, then for each star:
    1. request an ownership challenge for a generated wallet
    2. sign it
    3. submit the star

and prints the resulting chain and its audit report.

Usage:
    starnotary demo                     Human output (default)
    starnotary demo --stars 5           Register five stars
    starnotary demo --format json       Machine-readable JSON
    starnotary demo --no-color          Disable ANSI

Exit codes:
    0  Chain valid after all submissions
    1  Chain invalid
    2  Error  (a submission was rejected)
"""

import json
import sys

import click

from starnotary.core.crypto import WalletKey
from starnotary.core.exceptions import StarNotaryError
from starnotary.registry.service import StarRegistryService


class _Color:
    """
    Minimal ANSI color wrapper.
    Auto-disables when not a TTY or --no-color is passed.
    """
    _on: bool = True

    @classmethod
    def configure(cls, enabled: bool) -> None:
        cls._on = enabled and sys.stdout.isatty()

    @classmethod
    def green(cls, s: str) -> str:
        return f"\033[32m{s}\033[0m" if cls._on else s

    @classmethod
    def red(cls, s: str) -> str:
        return f"\033[31m{s}\033[0m" if cls._on else s

    @classmethod
    def dim(cls, s: str) -> str:
        return f"\033[2m{s}\033[0m" if cls._on else s


_DEMO_STARS = [
    {"name": "Polaris", "ra": "02h 31m 49.09s", "dec": "+89° 15′ 50.8″"},
    {"name": "Sirius", "ra": "06h 45m 08.92s", "dec": "−16° 42′ 58.0″"},
    {"name": "Vega", "ra": "18h 36m 56.34s", "dec": "+38° 47′ 01.3″"},
    {"name": "Betelgeuse", "ra": "05h 55m 10.31s", "dec": "+07° 24′ 25.4″"},
]


def _star(i: int) -> dict:
    star = dict(_DEMO_STARS[i % len(_DEMO_STARS)])
    if i >= len(_DEMO_STARS):
        star["name"] = f"{star['name']} {i // len(_DEMO_STARS) + 1}"
    return star


@click.command(name="demo")
@click.option("--stars", type=click.IntRange(min=0), default=1, show_default=True,
              help="Number of stars to register.")
@click.option("--wallets", type=click.IntRange(min=1), default=1, show_default=True,
              help="Number of wallets submitting stars (round robin).")
@click.option(
    "--format", "fmt",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
)
@click.option("--no-color", is_flag=True, help="Disable ANSI color.")
@click.pass_obj
def demo_command(config, stars: int, wallets: int, fmt: str, no_color: bool) -> None:
    """Register STARS stars on a fresh in-memory chain and audit it."""
    _Color.configure(not no_color)

    registry = StarRegistryService(config=config)
    keys     = [WalletKey.generate() for _ in range(wallets)]

    for i in range(stars):
        key = keys[i % wallets]
        try:
            message   = registry.request_ownership_challenge(key.address)
            signature = key.sign_message(message)
            registry.submit_star(key.address, message, signature, _star(i))
        except StarNotaryError as exc:
            click.echo(f"Error: submission {i} rejected: {exc}", err=True)
            sys.exit(2)

    report = registry.chain.audit()

    if fmt == "json":
        click.echo(json.dumps({
            "height": registry.height,
            "chain":  [block.to_dict() for block in registry.chain.blocks],
            "stars":  {
                key.address: registry.get_stars_by_wallet_address(key.address)
                for key in keys
            },
            "report": report.to_dict(),
        }, indent=2, ensure_ascii=False))
    else:
        _print_text(registry, keys, report)

    sys.exit(0 if report else 1)


def _print_text(registry: StarRegistryService, keys, report) -> None:
    for block in registry.chain.blocks:
        click.echo(str(block))
        body = block.decode_body()
        if "owner" in body:
            click.echo(_Color.dim(f"  Owner: {body['owner'][:16]}..."))
            click.echo(_Color.dim(f"  Star: {body['star']}"))
        click.echo("-" * 40)

    for key in keys:
        count = len(registry.get_stars_by_wallet_address(key.address))
        click.echo(f"{key.address[:16]}...  {count} star(s)")

    if report:
        click.echo(_Color.green(f"VALID  ·  height {registry.height}"))
    else:
        click.echo(_Color.red(
            f"INVALID  ·  {report.error_count} error(s) at blocks {report.error_indices}"
        ))
