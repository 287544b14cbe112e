# ecofinds/models.py
import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

from .formatting import format_price

db = SQLAlchemy()

CATEGORIES = [
    'Electronics',
    'Fashion & Apparel',
    'Home & Living',
    'Books & Media',
    'Sports & Outdoors',
    'Toys & Games',
    'Automotive',
    'Collectibles',
    'Other',
]

ORDER_PAID = 'PAID'
ORDER_CANCELLED = 'CANCELLED'


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    profile = db.relationship('Profile', backref='user', uselist=False, lazy=True)

    def to_dict(self):
        return {'id': self.id, 'email': self.email, 'created_at': _iso(self.created_at)}


class Profile(db.Model):
    __tablename__ = 'profiles'
    # shares its primary key with the auth identity
    id = db.Column(db.String(36), db.ForeignKey('users.id'), primary_key=True)
    username = db.Column(db.String(20), nullable=False)
    avatar_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    products = db.relationship('Product', back_populates='owner', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'avatar_url': self.avatar_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Product(db.Model):
    __tablename__ = 'products'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    owner_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False)
    title = db.Column(db.String(80), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    category = db.Column(db.String(50), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    owner = db.relationship('Profile', back_populates='products')

    def to_dict(self, with_seller=True):
        data = {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'price_cents': self.price_cents,
            'price_display': format_price(self.price_cents),
            'images': list(self.images or []),
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if with_seller:
            owner = self.owner
            data['seller'] = {
                'username': owner.username if owner else None,
                'avatar_url': owner.avatar_url if owner else None,
            }
        return data


class Order(db.Model):
    __tablename__ = 'orders'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=ORDER_PAID)
    total_cents = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    items = db.relationship('OrderItem', backref='order', lazy=True, cascade='all, delete-orphan')

    def to_dict(self, with_items=False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'status': self.status,
            'total_cents': self.total_cents,
            'total_display': format_price(self.total_cents),
            'created_at': _iso(self.created_at),
        }
        if with_items:
            data['items'] = [it.to_dict() for it in self.items]
        return data


class OrderItem(db.Model):
    __tablename__ = 'order_items'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(db.String(36), db.ForeignKey('orders.id'), nullable=False)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    product = db.relationship('Product', backref='order_items')

    def to_dict(self):
        return {
            'id': self.id,
            'order_id': self.order_id,
            'product_id': self.product_id,
            'price_cents': self.price_cents,
            'quantity': self.quantity,
            'title': self.product.title if self.product else None,
            'images': list(self.product.images or []) if self.product else [],
        }
