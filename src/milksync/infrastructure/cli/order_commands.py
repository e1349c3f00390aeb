"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import date

import click

from milksync.application.deliver_order import DeliveryReconciler
from milksync.application.delete_order import DeleteOrderHandler
from milksync.application.dto import DeliverySummary, OrderDTO
from milksync.application.edit_order import OrderEditor
from milksync.application.list_orders import ListOrdersHandler, OrderFilter, OrderScope
from milksync.application.show_order import ShowOrderHandler, to_order_dto
from milksync.domain.exceptions import DomainException, EntityNotFoundError
from milksync.domain.model.order import Order, OrderLineItem, OrderStatus
from milksync.domain.model.product import Product
from milksync.domain.repository.order_repository import OrderRepository
from milksync.infrastructure.bootstrap import (
    order_repository,
    product_repository,
    session_context,
)


def _split_pair(raw: str) -> tuple[str, str]:
    """Split 'Product:Value' into its two parts."""
    if ":" not in raw:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'Product:Value'."
        )
    name, value = raw.rsplit(":", 1)
    return name.strip(), value.strip()


def _match_line(items: list[OrderLineItem], ref: str) -> OrderLineItem:
    """Find an order line by product id or (case-insensitive) name."""
    for item in items:
        if item.product_id == ref or item.product_name.lower() == ref.lower():
            return item
    raise click.BadParameter(f"Product '{ref}' is not in this order.")


def _match_product(products: list[Product], ref: str) -> Product | None:
    for product in products:
        if product.id == ref or product.name.lower() == ref.lower():
            return product
    return None


def _load_order(repo: OrderRepository, order_id: str) -> Order:
    order = repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order {order_id} not found")
    return order


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    lock = "  [locked]" if dto.locked else ""
    click.echo(f"Order {dto.id}  (status={dto.status}){lock}")
    click.echo(f"Distributor: {dto.distributor}")
    click.echo(f"Order date:  {dto.order_date}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Unit':<8} {'Price/tub':>11} {'Total':>11}")
    click.echo(f"  {'-'*63}")
    for item in dto.items:
        flag = " *" if not item.priced else ""
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit:<8} "
            f"{item.price_per_tub:>11} {item.line_total:>11}{flag}"
        )
    click.echo(f"  {'-'*63}")
    click.echo(f"  {'Order Total':<40} {dto.total:>22}")
    if any(not item.priced for item in dto.items):
        click.echo("  * no price information for this product")

    if dto.damaged_products:
        click.echo()
        click.echo("Damaged at delivery:")
        for damage in dto.damaged_products:
            click.echo(f"  {damage.product_name:<24} {damage.damaged_packets:>5} packets")
    if dto.final_bill:
        click.echo(f"Final bill:  {dto.final_bill}")
    if dto.updated_by:
        click.echo(f"Updated by:  {dto.updated_by}")


def _display_delivery_sheet(reconciler: DeliveryReconciler) -> None:
    click.echo(f"  {'Product':<24} {'Tubs':>5} {'Max pkts':>9} {'Damaged':>8} {'Damage cost':>12}")
    click.echo(f"  {'-'*62}")
    for line in reconciler.lines:
        click.echo(
            f"  {line.product_name:<24} {line.ordered_tubs:>5} {line.max_damaged_packets:>9} "
            f"{line.damaged_packets:>8} {str(line.damaged_cost):>12}"
        )
    click.echo(f"  {'-'*62}")
    bill = reconciler.summary()
    click.echo(f"  {'Total bill':<40} {str(bill.total_bill):>21}")
    click.echo(f"  {'Damaged cost':<40} {str(bill.total_damaged_cost):>21}")
    click.echo(f"  {'Final bill':<40} {str(bill.final_bill):>21}")
    for line in reconciler.unpriced_lines():
        click.echo(f"  Warning: {line.product_name} has no price information; billed at zero.")


@click.command("list")
@click.option("--mine", is_flag=True, default=False, help="Only orders you placed.")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus]),
    default=None,
    help="Filter by status.",
)
@click.option("--distributor", default=None, help="Filter by distributor name.")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Order month (1-12).")
@click.option("--year", type=int, default=None, help="Order year.")
@click.option("--search", default=None, help="Free-text search over id, distributor, status, date.")
def order_list(
    mine: bool,
    status: str | None,
    distributor: str | None,
    month: int | None,
    year: int | None,
    search: str | None,
) -> None:
    """List orders."""
    handler = ListOrdersHandler(order_repo=order_repository())
    order_filter = OrderFilter(
        status=OrderStatus(status) if status else None,
        distributor=distributor,
        month=month,
        year=year,
        search=search,
    )

    try:
        result = handler.handle(OrderScope.MINE if mine else OrderScope.ALL, order_filter)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<26} {'Date':<11} {'Distributor':<24} {'Status':<10} {'Lines':>5} {'Tubs':>6}")
    click.echo("-" * 87)
    for o in result.orders:
        status_label = o.status + ("*" if o.locked else "")
        click.echo(
            f"{o.id:<26} {o.order_date:<11} {o.distributor:<24} {status_label:<10} "
            f"{o.line_count:>5} {o.total_tubs:>6}"
        )
    click.echo("-" * 87)
    click.echo(f"{result.pending} pending, {result.delivered} delivered  (* locked)")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("edit")
@click.option("--id", "order_id", required=True, help="Order ID to edit.")
@click.option("--set", "set_items", multiple=True, help="Set tubs as 'Product:Qty'.")
@click.option("--unit", "unit_items", multiple=True, help="Set unit label as 'Product:Unit'.")
@click.option("--add", "add_items", multiple=True, help="Add a product (one tub).")
@click.option("--remove", "remove_items", multiple=True, help="Remove a product line.")
@click.option("--date", "order_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="New order date (YYYY-MM-DD).")
def order_edit(
    order_id: str,
    set_items: tuple[str, ...],
    unit_items: tuple[str, ...],
    add_items: tuple[str, ...],
    remove_items: tuple[str, ...],
    order_date,
) -> None:
    """Edit a pending order's lines or date."""
    repo = order_repository()

    try:
        order = _load_order(repo, order_id)
        editor = OrderEditor(order, repo, product_repository(), session_context())

        for ref in remove_items:
            editor.remove_item(_match_line(editor.items, ref).product_id)
        for raw in set_items:
            ref, qty = _split_pair(raw)
            editor.set_quantity(_match_line(editor.items, ref).product_id, qty)
        for raw in unit_items:
            ref, unit = _split_pair(raw)
            editor.change_unit(_match_line(editor.items, ref).product_id, unit)
        if add_items:
            available = editor.load_available_products()
            for ref in add_items:
                product = _match_product(available, ref)
                if product is None:
                    raise click.BadParameter(f"Product '{ref}' is not available for this company.")
                if not editor.add_item(product):
                    click.echo(f"{product.name} is already in the order.")
        if order_date is not None:
            editor.set_order_date(date(order_date.year, order_date.month, order_date.day))

        updated = editor.save()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if updated is None:
        click.echo(f"Order {order_id} is locked; nothing saved.")
        return

    click.echo(f"Order {order_id} updated.")
    _display_order(to_order_dto(updated))


@click.command("deliver")
@click.option("--id", "order_id", required=True, help="Order ID to deliver.")
@click.option("--damage", "damage_items", multiple=True,
              help="Damaged packets as 'Product:Packets'.")
@click.option("--yes", is_flag=True, default=False, help="Skip the damage confirmation prompt.")
def order_deliver(order_id: str, damage_items: tuple[str, ...], yes: bool) -> None:
    """Mark an order delivered (bills it and credits the distributor wallet)."""
    repo = order_repository()

    def approve(summary: DeliverySummary) -> bool:
        if yes:
            return True
        return click.confirm(f"{summary.message()}\n\nAre you sure you want to proceed?")

    try:
        order = _load_order(repo, order_id)
        reconciler = DeliveryReconciler(order, repo, session_context())

        for raw in damage_items:
            ref, packets = _split_pair(raw)
            line = _match_line(order.items, ref)
            stored = reconciler.set_damage(line.product_id, packets)
            if str(stored) != packets:
                click.echo(f"{line.product_name}: damaged packets set to {stored}.")

        _display_delivery_sheet(reconciler)
        receipt = reconciler.confirm(approve)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if receipt is None:
        click.echo("Delivery cancelled.")
        return

    click.echo()
    click.echo(f"Order {order_id} delivered and locked.")
    if receipt.bill_generated:
        click.echo(f"Bill generated: {receipt.bill_id or '-'}")
    click.echo(f"Final bill:     {receipt.final_bill}")
    click.echo(f"Wallet credit:  {receipt.credited_amount}")
    click.echo(f"Wallet balance: {receipt.wallet_balance}")


@click.command("delete")
@click.option("--id", "order_id", required=True, help="Order ID to delete.")
def order_delete(order_id: str) -> None:
    """Delete a pending order."""
    handler = DeleteOrderHandler(order_repo=order_repository())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} deleted.")
