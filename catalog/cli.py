# catalog/cli.py
from datetime import timedelta

import click
from flask.cli import with_appcontext
from pydantic import ValidationError

from .errors import DomainError, validation_messages
from .schemas import CouponCreate
from .services.coupon_service import create_coupon
from .utils.dates import utcnow

@click.command("create-coupon")
@click.option("--code", required=True)
@click.option("--type", "ctype", type=click.Choice(["percent", "fixed"]), required=True)
@click.option("--value", type=str, required=True)
@click.option("--days", type=click.IntRange(1, 5 * 365), default=30, show_default=True)
@click.option("--max-uses", type=click.IntRange(0, 999_999), default=0, show_default=True)
@click.option("--one-shot", is_flag=True, default=False)
@with_appcontext
def create_coupon_command(code, ctype, value, days, max_uses, one_shot):
    """Create a coupon valid from now for DAYS days."""
    now = utcnow()
    try:
        payload = CouponCreate.model_validate({
            "code": code, "type": ctype, "value": value,
            "max_uses": max_uses, "one_shot": one_shot,
            "valid_from": now, "valid_until": now + timedelta(days=days),
        })
        c = create_coupon(payload.model_dump())
    except ValidationError as e:
        raise click.ClickException("; ".join(validation_messages(e)))
    except DomainError as e:
        raise click.ClickException(e.message)
    click.echo(f"Coupon created: {c.id} {c.code}")

def register_cli(app):
    app.cli.add_command(create_coupon_command)
