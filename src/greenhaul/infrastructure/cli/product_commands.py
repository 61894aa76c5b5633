"""CLI commands for the product catalog and bundle compositions."""

from __future__ import annotations

import click

from greenhaul.domain.exceptions import DomainException
from greenhaul.infrastructure import bootstrap


def _parse_components(raw: str) -> list[tuple[str, int]]:
    """Parse 'Chair:10,Table:1' into (name, qty) pairs."""
    components: list[tuple[str, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid component format '{pair}'. Expected 'ProductName:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            ) from None
        components.append((name.strip(), qty))
    return components


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Rental price per unit (e.g. 150.00).")
@click.option("--stock", default=0, show_default=True, type=int, help="Units owned.")
@click.option(
    "--kind",
    type=click.Choice(["standalone", "bundle"]),
    default="standalone",
    show_default=True,
)
def product_add(name: str, price: str, stock: int, kind: str) -> None:
    """Add a new product to the catalog."""
    handler = bootstrap.add_product_handler()

    try:
        product = handler.handle(name=name, price=price, stock=stock, kind=kind)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price} ({kind})")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    with bootstrap.unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Kind':<11} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 62)
    for p in products:
        stock = "-" if p.is_bundle else str(p.stock)
        click.echo(
            f"{p.id:<6} {p.name:<24} {p.kind.value:<11} {str(p.price):>10} {stock:>7}"
        )


@click.command("set-stock")
@click.option("--product", "product_name", required=True, help="Product name.")
@click.option("--stock", required=True, type=int, help="Total units owned.")
def product_set_stock(product_name: str, stock: int) -> None:
    """Set how many units of a product are owned."""
    handler = bootstrap.set_stock_handler()

    try:
        handler.handle(product_name=product_name, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product_name}' set to {stock}")


@click.command("define")
@click.option("--bundle", "bundle_name", required=True, help="Bundle product name.")
@click.option("--components", required=True, help="Components as 'Product:Qty,Product:Qty'.")
def bundle_define(bundle_name: str, components: str) -> None:
    """Define (or replace) the components of a bundle."""
    parts = _parse_components(components)
    handler = bootstrap.define_bundle_handler()

    try:
        handler.handle(bundle_name=bundle_name, components=parts)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Bundle '{bundle_name}' now contains:")
    for name, qty in parts:
        click.echo(f"  {qty:>4} x {name}")
