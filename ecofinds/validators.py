import re

from .errors import ValidationError
from .models import CATEGORIES

EMAIL_REGEX = re.compile(r"[^@]+@[^@]+\.[^@]+")
USERNAME_REGEX = re.compile(r"^[a-zA-Z0-9_]+$")

MIN_QUANTITY = 1
MAX_QUANTITY = 10
MAX_IMAGES_PER_PRODUCT = 5
MAX_PRICE_CENTS = 100000000


def require_json(req):
    data = req.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data


def clean_str(value, field):
    """Return ``value`` as a string, treating a missing value as empty."""
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string.')
    return value


def clean_email(value):
    email = clean_str(value, 'email').strip().lower()
    if not email:
        raise ValidationError('Email is required.')
    if not EMAIL_REGEX.match(email):
        raise ValidationError('Please enter a valid email address.')
    return email


def clean_password(value):
    password = clean_str(value, 'password')
    if len(password) < 6:
        raise ValidationError('Password must be at least 6 characters.')
    return password


def clean_username(value):
    username = clean_str(value, 'username').strip()
    if len(username) < 3:
        raise ValidationError('Username must be at least 3 characters.')
    if len(username) > 20:
        raise ValidationError('Username must be no more than 20 characters.')
    if not USERNAME_REGEX.match(username):
        raise ValidationError('Username can only contain letters, numbers, and underscores.')
    return username


def clean_int(value, field, minimum=None, maximum=None):
    # reject JSON booleans
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer.')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer.')
    if isinstance(value, float) and value != number:
        raise ValidationError(f'{field} must be an integer.')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field} must be at least {minimum}.')
    if maximum is not None and number > maximum:
        raise ValidationError(f'{field} must be at most {maximum}.')
    return number


def clean_quantity(value):
    return clean_int(value, 'quantity', MIN_QUANTITY, MAX_QUANTITY)


def clean_product_id(value):
    product_id = value.strip() if isinstance(value, str) else ''
    if not product_id:
        raise ValidationError('productId is required.')
    return product_id


def clean_product_fields(data, partial=False):
    """Validate listing fields; with ``partial`` only the keys present are checked."""
    cleaned = {}
    if 'title' in data or not partial:
        title = clean_str(data.get('title'), 'title').strip()
        if not 3 <= len(title) <= 80:
            raise ValidationError('Title must be between 3 and 80 characters.')
        cleaned['title'] = title
    if 'description' in data or not partial:
        description = clean_str(data.get('description'), 'description').strip()
        if not 20 <= len(description) <= 1000:
            raise ValidationError('Description must be between 20 and 1000 characters.')
        cleaned['description'] = description
    if 'category' in data or not partial:
        category = data.get('category')
        if category not in CATEGORIES:
            raise ValidationError('Please select a valid category.')
        cleaned['category'] = category
    if 'price_cents' in data or not partial:
        cleaned['price_cents'] = clean_int(data.get('price_cents'), 'price_cents', 0, MAX_PRICE_CENTS)
    if 'images' in data:
        images = data.get('images') or []
        if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
            raise ValidationError('images must be a list of URLs.')
        if len(images) > MAX_IMAGES_PER_PRODUCT:
            raise ValidationError(f'At most {MAX_IMAGES_PER_PRODUCT} images per product.')
        cleaned['images'] = images
    if 'is_active' in data:
        if not isinstance(data['is_active'], bool):
            raise ValidationError('is_active must be true or false.')
        cleaned['is_active'] = data['is_active']
    return cleaned
