"""Fixed demo listings, served when the live catalog is unavailable."""
import logging
from datetime import datetime

from .auth import upsert_profile
from .formatting import format_price
from .models import Product, User, db

logger = logging.getLogger(__name__)

DEMO_OWNER_ID = 'demo-user'
DEMO_OWNER_EMAIL = 'demo@ecofinds.local'

_DEMO_LISTINGS = [
    ('1', 'Kindle Paperwhite (11th Gen)',
     'Gently used e-reader in excellent condition. Perfect for sustainable reading with long battery life and no ads.',
     'Electronics', 450000, '2024-01-15', 'eco_seller'),
    ('2', 'Vintage Wooden Study Desk',
     'Beautiful solid wood desk perfect for home office or student use. Some minor scratches that add character.',
     'Home & Living', 350000, '2024-01-14', 'eco_seller'),
    ('3', 'English Willow Cricket Bat',
     'Professional grade cricket bat made from premium English willow. Lightweight design with excellent pickup.',
     'Sports & Outdoors', 220000, '2024-01-13', 'eco_seller'),
    ('4', 'Vintage Leather Messenger Bag',
     'Handcrafted genuine leather messenger bag with beautiful patina. Perfect for daily use or business.',
     'Fashion & Apparel', 180000, '2024-01-12', 'green_buyer'),
    ('5', 'Complete Harry Potter Book Set',
     'All 7 books in excellent condition. Perfect for gifting or adding to your collection.',
     'Books & Media', 120000, '2024-01-11', 'green_buyer'),
]


def demo_products():
    """Fresh copies of the demo listings as API records."""
    records = []
    for pid, title, description, category, price_cents, created, seller in _DEMO_LISTINGS:
        created_at = datetime.fromisoformat(created).isoformat()
        records.append({
            'id': pid,
            'owner_id': DEMO_OWNER_ID,
            'title': title,
            'description': description,
            'category': category,
            'price_cents': price_cents,
            'price_display': format_price(price_cents),
            'images': [],
            'is_active': True,
            'created_at': created_at,
            'updated_at': created_at,
            'seller': {'username': seller, 'avatar_url': None},
        })
    return records


def seed_demo_products():
    """Write the demo listings into the store; returns how many were added."""
    owner = db.session.get(User, DEMO_OWNER_ID)
    if owner is None:
        # unusable hash: the demo account cannot log in
        owner = User(id=DEMO_OWNER_ID, email=DEMO_OWNER_EMAIL, password_hash='!')
        db.session.add(owner)
        db.session.flush()
        upsert_profile(owner.id, 'eco_seller', commit=False)

    existing = {p.title for p in Product.query.filter_by(owner_id=DEMO_OWNER_ID).all()}
    added = 0
    for _, title, description, category, price_cents, created, _seller in _DEMO_LISTINGS:
        if title in existing:
            continue
        db.session.add(Product(
            owner_id=DEMO_OWNER_ID,
            title=title,
            description=description,
            category=category,
            price_cents=price_cents,
            images=[],
            created_at=datetime.fromisoformat(created),
        ))
        added += 1
    db.session.commit()
    logger.info(f"Seeded {added} demo product(s)")
    return added
