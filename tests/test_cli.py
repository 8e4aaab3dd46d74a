from catalog.model import Coupon
from catalog.services.coupon_rules import can_be_used
from catalog.utils.dates import utcnow


def test_create_coupon_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "create-coupon", "--code", "cli2025", "--type", "fixed", "--value", "15", "--days", "7", "--max-uses", "2",
    ])

    assert result.exit_code == 0, result.output
    assert "Coupon created" in result.output
    c = Coupon.query.filter_by(code="CLI2025").one()
    assert c.type == "fixed"
    assert c.max_uses == 2
    assert can_be_used(c, utcnow())


def test_create_coupon_command_rejects_reserved_code(app):
    result = app.test_cli_runner().invoke(args=[
        "create-coupon", "--code", "ADMIN", "--type", "percent", "--value", "10",
    ])
    assert result.exit_code != 0
    assert "reserved" in result.output


def test_create_coupon_command_rejects_malformed_code(app):
    runner = app.test_cli_runner()
    for code in ["a-b", "SAVE-10", "X" * 21]:
        result = runner.invoke(args=["create-coupon", "--code", code, "--type", "percent", "--value", "10"])
        assert result.exit_code != 0
        assert "code" in result.output
    assert Coupon.query.count() == 0


def test_create_coupon_command_rejects_out_of_range_value(app):
    result = app.test_cli_runner().invoke(args=[
        "create-coupon", "--code", "HALF2025", "--type", "percent", "--value", "90",
    ])
    assert result.exit_code != 0
    assert Coupon.query.count() == 0
