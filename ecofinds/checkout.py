import logging

from sqlalchemy.exc import SQLAlchemyError

from .cart import CartStore
from .errors import CheckoutError, EmptyCartError, StoreError, ValidationError
from .models import ORDER_PAID, Order, OrderItem, Product, db

logger = logging.getLogger(__name__)


def checkout_local(cart):
    """Confirm and clear a cart without touching the store."""
    if cart.is_empty:
        raise EmptyCartError()
    confirmation = {'item_count': sum(i.quantity for i in cart), 'total_cents': cart.total_cents}
    cart.clear_cart()
    return confirmation


def _cart_from_lines(lines):
    cart = CartStore()
    for line in lines:
        cart.add_item(line['product_id'], line['quantity'])
    return cart


def place_order(user_id, lines):
    """Create a PAID order for ``lines`` priced from the current catalog.

    The order row and its order_items are committed together or not at all.
    """
    if not lines:
        raise EmptyCartError()
    cart = _cart_from_lines(lines)

    try:
        products = Product.query.filter(Product.id.in_([i.product_id for i in cart])).all()
    except SQLAlchemyError as e:
        logger.error(f"Checkout product lookup failed: {e}")
        raise CheckoutError() from e
    by_id = {p.id: p for p in products}

    for item in cart:
        product = by_id.get(item.product_id)
        if product is None or not product.is_active:
            raise ValidationError(f'Product {item.product_id} is not available.')
        item.unit_price_cents = product.price_cents
        item.product = product.to_dict(with_seller=False)

    order = Order(user_id=user_id, status=ORDER_PAID, total_cents=cart.total_cents)
    for item in cart:
        order.items.append(OrderItem(
            product_id=item.product_id,
            price_cents=item.unit_price_cents,
            quantity=item.quantity,
        ))
    try:
        db.session.add(order)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Checkout for user {user_id} failed: {e}")
        raise CheckoutError() from e

    logger.info(f"Order {order.id} placed by {user_id}: {len(cart)} line(s), total {order.total_cents}")
    return order


def order_history(user_id):
    try:
        return Order.query.filter_by(user_id=user_id).order_by(Order.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Order history lookup failed: {e}")
        raise StoreError('Error fetching orders') from e
