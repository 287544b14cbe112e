"""Shared pytest fixtures for the EcoFinds API tests."""

from datetime import datetime, timedelta

import pytest

from ecofinds import create_app
from ecofinds.auth import issue_token, signup
from ecofinds.config import TestingConfig
from ecofinds.models import Product, db


@pytest.fixture
def app():
    """Create an app bound to a fresh in-memory database."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _account(email, username):
    user, _ = signup(email, 'secret123', username)
    return {'id': user.id, 'email': email, 'token': issue_token(user)}


@pytest.fixture
def seller(app):
    """A registered seller, as a dict of id, email and bearer token."""
    return _account('seller@example.com', 'eco_seller')


@pytest.fixture
def buyer(app):
    return _account('buyer@example.com', 'green_buyer')


@pytest.fixture
def auth_headers(buyer):
    return {'Authorization': f"Bearer {buyer['token']}"}


@pytest.fixture
def make_product(seller):
    """Factory for listings owned by the seller; returns the product id."""
    base = datetime(2024, 1, 1)

    def _make(title='Used Item', category='Other', price_cents=10000, days=0, is_active=True, owner_id=None):
        p = Product(
            owner_id=owner_id or seller['id'],
            title=title,
            description='A perfectly good second-hand item.',
            category=category,
            price_cents=price_cents,
            images=[],
            is_active=is_active,
            created_at=base + timedelta(days=days),
        )
        db.session.add(p)
        db.session.commit()
        return p.id

    return _make


@pytest.fixture
def catalog(make_product):
    """A small mixed catalog: titles mapped to product ids."""
    return {
        'Kindle Paperwhite': make_product('Kindle Paperwhite', 'Electronics', 450000, days=5),
        'Study Desk': make_product('Study Desk', 'Home & Living', 350000, days=4),
        'Cricket Bat': make_product('Cricket Bat', 'Sports & Outdoors', 220000, days=3),
        'Old Headphones': make_product('Old Headphones', 'Electronics', 90000, days=2),
        'Harry Potter Set': make_product('Harry Potter Set', 'Books & Media', 120000, days=1),
        'Sold Lamp': make_product('Sold Lamp', 'Home & Living', 5000, days=6, is_active=False),
    }
