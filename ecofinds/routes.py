import logging

from flask import Blueprint, current_app, g, jsonify, request

from .auth import authenticate, bearer_required, issue_token, signup as create_account, upsert_profile
from .catalog import SORT_OPTIONS, CatalogQuery, fetch_products, filter_records
from .checkout import order_history, place_order
from .demo_data import demo_products
from .errors import NotFound, PermissionDenied, StoreError, ValidationError
from .models import CATEGORIES, Product, db
from .validators import (
    clean_product_fields, clean_product_id, clean_quantity, clean_username, require_json,
)

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)


def _active_product_or_404(pid):
    p = db.session.get(Product, pid)
    if p is None or not p.is_active:
        raise NotFound('Product not found')
    return p


def _owned_product(pid):
    p = db.session.get(Product, pid)
    if p is None:
        raise NotFound('Product not found')
    if p.owner_id != g.current_user.id:
        raise PermissionDenied()
    return p


@api.route('/health')
def health():
    return jsonify({'status': 'ok'})


@api.route('/categories')
def categories():
    return jsonify({'categories': CATEGORIES, 'sort_options': SORT_OPTIONS})


@api.route('/signup', methods=['POST'])
def signup():
    data = require_json(request)
    user, profile = create_account(data.get('email'), data.get('password'), data.get('username'))
    return jsonify({'user': user.to_dict(), 'profile': profile.to_dict(), 'token': issue_token(user)}), 201


@api.route('/login', methods=['POST'])
def login():
    data = require_json(request)
    user = authenticate(data.get('email'), data.get('password'))
    return jsonify({
        'user': user.to_dict(),
        'profile': user.profile.to_dict() if user.profile else None,
        'token': issue_token(user),
    })


@api.route('/products', methods=['GET'])
def list_products():
    q = CatalogQuery.from_args(request.args)
    try:
        products, has_more = fetch_products(q)
    except StoreError:
        if not current_app.config['CATALOG_DEMO_FALLBACK']:
            raise
        db.session.rollback()
        logger.warning('Catalog store unavailable, serving demo data')
        records, has_more = filter_records(demo_products(), q)
        return jsonify({'products': records, 'has_more': has_more, 'degraded': True, 'source': 'demo'})
    return jsonify({
        'products': [p.to_dict() for p in products],
        'has_more': has_more,
        'degraded': False,
        'source': 'store',
    })


@api.route('/products', methods=['POST'])
@bearer_required
def create_product():
    fields = clean_product_fields(require_json(request))
    p = Product(owner_id=g.current_user.id, **fields)
    db.session.add(p); db.session.commit()
    logger.info(f"Product {p.id} listed by {g.current_user.id}")
    return jsonify({'product': p.to_dict()}), 201


@api.route('/products/<pid>', methods=['GET'])
def product_detail(pid):
    return jsonify({'product': _active_product_or_404(pid).to_dict()})


@api.route('/products/<pid>', methods=['PUT', 'PATCH'])
@bearer_required
def edit_product(pid):
    p = _owned_product(pid)
    fields = clean_product_fields(require_json(request), partial=True)
    for key, value in fields.items():
        setattr(p, key, value)
    db.session.commit()
    return jsonify({'product': p.to_dict()})


@api.route('/products/<pid>', methods=['DELETE'])
@bearer_required
def delete_product(pid):
    p = _owned_product(pid)
    if p.order_items:
        # ordered listings stay for order history; hide them instead
        p.is_active = False
    else:
        db.session.delete(p)
    db.session.commit()
    return jsonify({'deleted': True})


@api.route('/me/listings')
@bearer_required
def my_listings():
    products = Product.query.filter_by(owner_id=g.current_user.id).order_by(Product.created_at.desc()).all()
    return jsonify({'products': [p.to_dict() for p in products]})


@api.route('/cart/items', methods=['POST'])
@bearer_required
def add_to_cart():
    data = require_json(request)
    product_id = clean_product_id(data.get('productId'))
    quantity = clean_quantity(data.get('quantity', 1))
    p = _active_product_or_404(product_id)
    logger.info(f"User {g.current_user.id} added product {product_id} (qty: {quantity}) to cart")
    return jsonify({'success': True, 'productId': product_id, 'quantity': quantity, 'product': p.to_dict()})


@api.route('/checkout', methods=['POST'])
@bearer_required
def checkout():
    data = request.get_json(silent=True) or {}
    raw_items = data.get('items') if isinstance(data, dict) else None
    if raw_items is not None and not isinstance(raw_items, list):
        raise ValidationError('items must be a list.')
    lines = []
    for raw in raw_items or []:
        if not isinstance(raw, dict):
            raise ValidationError('Each item must be an object.')
        lines.append({
            'product_id': clean_product_id(raw.get('productId')),
            'quantity': clean_quantity(raw.get('quantity', 1)),
        })
    order = place_order(g.current_user.id, lines)
    return jsonify({
        'order': order.to_dict(),
        'items': [it.to_dict() for it in order.items],
        'totalCents': order.total_cents,
    }), 201


@api.route('/orders')
@bearer_required
def orders():
    return jsonify({'orders': [o.to_dict(with_items=True) for o in order_history(g.current_user.id)]})


@api.route('/profile', methods=['GET'])
@bearer_required
def get_profile():
    profile = g.current_user.profile
    if profile is None:
        raise NotFound('Profile not found')
    return jsonify({'profile': profile.to_dict(), 'user': g.current_user.to_dict()})


@api.route('/profile', methods=['PUT', 'PATCH'])
@bearer_required
def update_profile():
    data = require_json(request)
    current = g.current_user.profile
    username = data.get('username')
    if username is None and current is not None:
        username = current.username
    avatar_url = data.get('avatar_url')
    if avatar_url is not None and not isinstance(avatar_url, str):
        raise ValidationError('avatar_url must be a string.')
    profile = upsert_profile(g.current_user.id, clean_username(username), avatar_url=avatar_url)
    return jsonify({'profile': profile.to_dict()})
