"""CLI commands for product lookups."""

from __future__ import annotations

import click

from milksync.domain.exceptions import DomainException
from milksync.domain.service.pricing import resolve_pricing
from milksync.infrastructure.bootstrap import product_repository


@click.command("list")
@click.option("--company", required=True, help="Company name.")
def product_list(company: str) -> None:
    """List the products a company's distributors can order."""
    repo = product_repository()

    try:
        products = repo.list_by_company(company)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<26} {'Name':<24} {'Pkts/tub':>8} {'Price/pkt':>10} {'Price/tub':>10}")
    click.echo("-" * 82)
    for p in products:
        pricing = resolve_pricing(p)
        flag = "" if pricing.is_priced else " *"
        click.echo(
            f"{p.id:<26} {p.label:<24} {pricing.packets_per_tub:>8} "
            f"{str(pricing.cost_per_packet):>10} {str(pricing.price_per_tub):>10}{flag}"
        )
