"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import click

from greenhaul.application.dto import CartItemSpec, CreateOrderRequest, OrderDTO, PaymentRequest
from greenhaul.domain.exceptions import DomainException
from greenhaul.infrastructure import bootstrap

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _parse_items(raw: str) -> list[tuple[str, int]]:
    """Parse 'Chair:10,Table:2' into (name, qty) pairs."""
    pairs: list[tuple[str, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductName:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            ) from None
        pairs.append((name.strip(), qty))
    return pairs


def _build_cart(raw: str) -> list[CartItemSpec]:
    """Price the requested items from the current catalog."""
    specs: list[CartItemSpec] = []
    with bootstrap.unit_of_work() as uow:
        for name, qty in _parse_items(raw):
            product = uow.products.get_by_name(name)
            if product is None:
                raise click.ClickException(f"Product not found: '{name}'")
            specs.append(
                CartItemSpec(
                    product_id=product.id,
                    name=product.name,
                    quantity=qty,
                    price=product.price.amount,
                )
            )
    return specs


def _cart_total(specs: list[CartItemSpec]) -> Decimal:
    return sum((Decimal(str(s.price)) * s.quantity for s in specs), Decimal("0.00"))


def _order_options(func):
    options = [
        click.option("--user", "user_id", required=True, type=int, help="Customer user id."),
        click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty'."),
        click.option("--start", required=True, type=DATE, help="Rental start (YYYY-MM-DD)."),
        click.option("--end", required=True, type=DATE, help="Rental end (YYYY-MM-DD)."),
        click.option("--delivery-date", required=True, type=DATE, help="Delivery day."),
        click.option("--pickup-date", required=True, type=DATE, help="Pickup day."),
        click.option("--delivery-address", required=True, type=int, help="Delivery address id."),
        click.option("--pickup-address", required=True, type=int, help="Pickup address id."),
        click.option("--total", default=None, help="Order total; defaults to the catalog total."),
        click.option("--email", default=None, help="Where to send the confirmation."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_request(params: dict) -> CreateOrderRequest:
    specs = _build_cart(params["items"])
    total = params["total"] if params["total"] is not None else _cart_total(specs)
    return CreateOrderRequest(
        user_id=params["user_id"],
        cart_items=specs,
        delivery_address_id=params["delivery_address"],
        pickup_address_id=params["pickup_address"],
        date_start=params["start"].date(),
        date_end=params["end"].date(),
        delivery_date=params["delivery_date"].date(),
        pickup_date=params["pickup_date"].date(),
        total_amount=total,
        contact_email=params["email"],
    )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.folio}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.order_date}")
    click.echo(f"Delivery: {dto.delivery_date} (address #{dto.delivery_address_id})")
    click.echo(f"Pickup:   {dto.pickup_date} (address #{dto.pickup_address_id})")
    if dto.payment_reference:
        click.echo(f"Payment:  {dto.payment_reference}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")

    if dto.reservations:
        click.echo()
        click.echo("  Reserved (cleaning day included):")
        for r in dto.reservations:
            click.echo(
                f"    product #{r.product_id:<5} x{r.quantity:<4} {r.date_start} .. {r.date_end}"
            )


@click.command("create")
@_order_options
def order_create(**params) -> None:
    """Book an unpaid order."""
    request = _build_request(params)
    handler = bootstrap.create_order_handler()

    try:
        dto = handler.handle(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.folio} created.")
    _display_order(dto)


@click.command("pay")
@_order_options
@click.option("--token", required=True, help="Card token from the payment form.")
@click.option("--payer", required=True, help="Payer identity (e.g. email).")
def order_pay(token: str, payer: str, **params) -> None:
    """Charge the customer, then book the order as paid."""
    request = _build_request(params)
    handler = bootstrap.pay_and_create_order_handler()

    try:
        result = handler.handle(PaymentRequest(token=token, payer=payer), request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment {result.payment_confirmation} approved; order {result.folio} booked.")
    _display_order(result.order)


@click.command("show")
@click.option("--folio", required=True, help="Order folio, e.g. GH-20250101-120000-A1B2C3.")
def order_show(folio: str) -> None:
    """Show details of an existing order."""
    handler = bootstrap.show_order_handler()

    try:
        dto = handler.handle(folio)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
