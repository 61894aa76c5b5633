"""CLI commands for availability and slot calendar queries."""

from __future__ import annotations

from datetime import datetime

import click

from greenhaul.domain.exceptions import DomainException
from greenhaul.infrastructure import bootstrap

DATE = click.DateTime(formats=["%Y-%m-%d"])


@click.command("check")
@click.option("--product", "product_name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units wanted.")
@click.option("--start", required=True, type=DATE, help="Rental start (YYYY-MM-DD).")
@click.option("--end", required=True, type=DATE, help="Rental end (YYYY-MM-DD).")
def availability_check(product_name: str, quantity: int, start: datetime, end: datetime) -> None:
    """Check whether a product can be rented for a date range."""
    with bootstrap.unit_of_work() as uow:
        product = uow.products.get_by_name(product_name)
    if product is None:
        raise click.ClickException(f"Product not found: '{product_name}'")

    handler = bootstrap.check_availability_handler()
    try:
        dto = handler.handle(product.id, quantity, start.date(), end.date())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    verdict = "available" if dto.available else "NOT available"
    click.echo(
        f"{dto.product_name} x{dto.quantity} from {dto.date_start} to {dto.date_end}: {verdict}"
    )
    click.echo(f"Remaining units for that range: {dto.remaining}")


@click.command("show")
@click.option("--start", required=True, type=DATE, help="First day (YYYY-MM-DD).")
@click.option("--end", required=True, type=DATE, help="Last day (YYYY-MM-DD).")
def calendar_show(start: datetime, end: datetime) -> None:
    """Show delivery and pickup slot usage per day."""
    handler = bootstrap.show_calendar_handler()
    try:
        days = handler.handle(start.date(), end.date())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Date':<12} {'Deliveries':>11} {'Free':>5} {'Pickups':>8} {'Free':>5}")
    click.echo("-" * 45)
    for day in days:
        click.echo(
            f"{day.date:<12} {day.deliveries:>11} {day.deliveries_available:>5} "
            f"{day.pickups:>8} {day.pickups_available:>5}"
        )
