import click

from greenhaul.infrastructure import bootstrap
from greenhaul.infrastructure.cli.order_commands import order_create, order_pay, order_show
from greenhaul.infrastructure.cli.product_commands import (
    bundle_define,
    product_add,
    product_list,
    product_set_stock,
)
from greenhaul.infrastructure.cli.schedule_commands import (
    availability_check,
    calendar_show,
)
from greenhaul.infrastructure.logging import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override GREENHAUL_LOG_LEVEL.")
@click.option("--log-json/--no-log-json", default=None, help="Emit JSON log lines.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_json: bool | None) -> None:
    """GreenHaul — rental booking and checkout"""
    cfg = bootstrap.settings()
    configure_logging(
        level=log_level or cfg.log_level,
        json_output=cfg.log_json if log_json is None else log_json,
    )
    ctx.call_on_close(bootstrap.shutdown)


@cli.group()
def db() -> None:
    """Manage the database schema."""


@db.command("init")
def db_init() -> None:
    """Create all tables (safe to run more than once)."""
    bootstrap.init_database()
    click.echo("Database schema ready.")


@cli.group()
def order() -> None:
    """Book and inspect orders."""


@cli.group()
def product() -> None:
    """Manage the rental catalog."""


@cli.group()
def bundle() -> None:
    """Manage bundle compositions."""


@cli.group()
def availability() -> None:
    """Query stock availability."""


@cli.group()
def calendar() -> None:
    """Query delivery and pickup slots."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_pay)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_set_stock)
bundle.add_command(bundle_define)
availability.add_command(availability_check)
calendar.add_command(calendar_show)
