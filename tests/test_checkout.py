"""Tests for local and persisted checkout."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from ecofinds import checkout as checkout_module
from ecofinds.cart import CartStore
from ecofinds.checkout import checkout_local, order_history, place_order
from ecofinds.errors import CheckoutError, EmptyCartError, ValidationError
from ecofinds.models import Order, OrderItem, Product, db


def test_local_checkout_clears_cart():
    cart = CartStore()
    cart.add_item('p1', 2, unit_price_cents=1000)
    cart.add_item('p2', 1, unit_price_cents=500)

    result = checkout_local(cart)

    assert result == {'item_count': 3, 'total_cents': 2500}
    assert cart.is_empty


def test_local_checkout_rejects_empty_cart():
    with pytest.raises(EmptyCartError):
        checkout_local(CartStore())


def test_empty_order_rejected_before_store_access(app, buyer, monkeypatch):
    class NoStore:
        def __getattr__(self, name):
            raise AssertionError('store was contacted')

    monkeypatch.setattr(checkout_module, 'Product', NoStore())
    monkeypatch.setattr(checkout_module, 'db', NoStore())
    with pytest.raises(EmptyCartError):
        place_order(buyer['id'], [])


def test_total_computed_from_lines(buyer, catalog):
    order = place_order(buyer['id'], [
        {'product_id': catalog['Cricket Bat'], 'quantity': 2},
        {'product_id': catalog['Harry Potter Set'], 'quantity': 1},
    ])

    assert order.status == 'PAID'
    assert order.total_cents == 2 * 220000 + 120000
    rows = OrderItem.query.filter_by(order_id=order.id).all()
    assert {(r.product_id, r.quantity, r.price_cents) for r in rows} == {
        (catalog['Cricket Bat'], 2, 220000),
        (catalog['Harry Potter Set'], 1, 120000),
    }


def test_duplicate_lines_are_merged(buyer, catalog):
    order = place_order(buyer['id'], [
        {'product_id': catalog['Study Desk'], 'quantity': 1},
        {'product_id': catalog['Study Desk'], 'quantity': 2},
    ])
    assert len(order.items) == 1
    assert order.items[0].quantity == 3
    assert order.total_cents == 3 * 350000


def test_inactive_product_rejected(buyer, catalog):
    with pytest.raises(ValidationError):
        place_order(buyer['id'], [{'product_id': catalog['Sold Lamp'], 'quantity': 1}])
    assert Order.query.count() == 0


def test_unknown_product_rejected(buyer, catalog):
    with pytest.raises(ValidationError):
        place_order(buyer['id'], [{'product_id': 'no-such-product', 'quantity': 1}])


def test_checkout_does_not_touch_inventory(buyer, catalog):
    place_order(buyer['id'], [{'product_id': catalog['Cricket Bat'], 'quantity': 1}])
    assert db.session.get(Product, catalog['Cricket Bat']).is_active is True


def test_failed_write_leaves_no_rows(buyer, catalog, monkeypatch):
    def failing_commit():
        raise SQLAlchemyError('disk full')

    monkeypatch.setattr(db.session, 'commit', failing_commit)
    with pytest.raises(CheckoutError):
        place_order(buyer['id'], [{'product_id': catalog['Cricket Bat'], 'quantity': 1}])
    monkeypatch.undo()

    assert Order.query.count() == 0
    assert OrderItem.query.count() == 0


def test_order_history_newest_first(buyer, catalog):
    first = place_order(buyer['id'], [{'product_id': catalog['Cricket Bat'], 'quantity': 1}])
    first.created_at = first.created_at.replace(year=2023)
    db.session.commit()
    second = place_order(buyer['id'], [{'product_id': catalog['Study Desk'], 'quantity': 1}])

    assert [o.id for o in order_history(buyer['id'])] == [second.id, first.id]
