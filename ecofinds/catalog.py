"""Catalog query building: filter, sort and paginate active listings."""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from .errors import StoreError
from .models import Product
from .validators import clean_int

logger = logging.getLogger(__name__)

SORT_NEWEST = 'newest'
SORT_PRICE_ASC = 'price_asc'
SORT_PRICE_DESC = 'price_desc'

SORT_OPTIONS = [
    {'value': SORT_NEWEST, 'label': 'Newest First'},
    {'value': SORT_PRICE_ASC, 'label': 'Price: Low to High'},
    {'value': SORT_PRICE_DESC, 'label': 'Price: High to Low'},
]

SORT_ALIASES = {
    'created_at_desc': SORT_NEWEST,
    'price-ascending': SORT_PRICE_ASC,
    'price-descending': SORT_PRICE_DESC,
}

ALL_CATEGORIES = 'all'
DEFAULT_PAGE_SIZE = 24
MAX_PAGE_SIZE = 100


def normalize_sort(value):
    key = (value or SORT_NEWEST).strip().lower()
    key = SORT_ALIASES.get(key, key)
    if key not in (SORT_PRICE_ASC, SORT_PRICE_DESC):
        return SORT_NEWEST
    return key


@dataclass
class CatalogQuery:
    search_text: Optional[str] = None
    category: str = ALL_CATEGORIES
    sort_key: str = SORT_NEWEST
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self):
        return (self.page - 1) * self.page_size

    @classmethod
    def from_args(cls, args):
        search = (args.get('query') or '').strip() or None
        category = (args.get('category') or '').strip() or ALL_CATEGORIES
        page = clean_int(args.get('page', 1), 'page', minimum=1)
        limit = clean_int(args.get('limit', DEFAULT_PAGE_SIZE), 'limit', 1, MAX_PAGE_SIZE)
        return cls(
            search_text=search,
            category=category,
            sort_key=normalize_sort(args.get('sort')),
            page=page,
            page_size=limit,
        )


def build_query(q):
    query = Product.query.options(joinedload(Product.owner)).filter(Product.is_active.is_(True))
    if q.search_text:
        query = query.filter(Product.title.icontains(q.search_text, autoescape=True))
    if q.category != ALL_CATEGORIES:
        query = query.filter(Product.category == q.category)
    if q.sort_key == SORT_PRICE_ASC:
        query = query.order_by(Product.price_cents.asc(), Product.created_at.desc())
    elif q.sort_key == SORT_PRICE_DESC:
        query = query.order_by(Product.price_cents.desc(), Product.created_at.desc())
    else:
        query = query.order_by(Product.created_at.desc())
    return query.offset(q.offset)


def fetch_products(q):
    """Run the catalog query; returns ``(products, has_more)``."""
    try:
        # one extra row tells us whether another page exists
        rows = build_query(q).limit(q.page_size + 1).all()
    except SQLAlchemyError as e:
        logger.error(f"Catalog query failed: {e}")
        raise StoreError('Error fetching products') from e
    return rows[:q.page_size], len(rows) > q.page_size


def filter_records(records, q):
    """Apply a CatalogQuery to in-memory product dicts; returns ``(records, has_more)``."""
    result = [r for r in records if r.get('is_active', True)]
    if q.search_text:
        needle = q.search_text.lower()
        result = [r for r in result if needle in r['title'].lower()]
    if q.category != ALL_CATEGORIES:
        result = [r for r in result if r['category'] == q.category]
    result.sort(key=lambda r: r['created_at'], reverse=True)
    if q.sort_key == SORT_PRICE_ASC:
        result.sort(key=lambda r: r['price_cents'])
    elif q.sort_key == SORT_PRICE_DESC:
        result.sort(key=lambda r: r['price_cents'], reverse=True)
    page = result[q.offset:q.offset + q.page_size]
    return page, len(result) > q.offset + q.page_size
