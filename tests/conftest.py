"""Pytest configuration: one in-memory SQLite app per test."""
import itertools
from datetime import timedelta
from decimal import Decimal

import pytest

from catalog import create_app
from catalog.config import TestingConfig
from catalog.extensions import db
from catalog.services import coupon_service, product_service
from catalog.utils.dates import utcnow


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_product(app):
    counter = itertools.count(1)

    def _make(name=None, price="100.00", stock=10, description=None):
        return product_service.create_product({
            "name": name or f"Product {next(counter)}",
            "description": description,
            "price": Decimal(str(price)),
            "stock": stock,
        })
    return _make


@pytest.fixture
def make_coupon(app):
    def _make(code="SAVE10", type="percent", value="10", one_shot=False, max_uses=0,
              valid_from=None, valid_until=None):
        now = utcnow()
        return coupon_service.create_coupon({
            "code": code,
            "type": type,
            "value": Decimal(str(value)),
            "one_shot": one_shot,
            "max_uses": max_uses,
            "valid_from": valid_from or now - timedelta(days=1),
            "valid_until": valid_until or now + timedelta(days=30),
        })
    return _make
