import click

from milksync.domain.exceptions import DomainException
from milksync.infrastructure.bootstrap import configure_logging
from milksync.infrastructure.cli.order_commands import (
    order_delete,
    order_deliver,
    order_edit,
    order_list,
    order_show,
)
from milksync.infrastructure.cli.product_commands import product_list


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging.")
def cli(verbose: bool) -> None:
    """MilkSync order desk."""
    try:
        configure_logging(verbose)
    except (DomainException, ValueError) as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Browse products."""


# Register subcommands
order.add_command(order_delete)
order.add_command(order_deliver)
order.add_command(order_edit)
order.add_command(order_list)
order.add_command(order_show)
product.add_command(product_list)
