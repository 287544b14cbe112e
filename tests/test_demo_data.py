from ecofinds.demo_data import DEMO_OWNER_ID, demo_products, seed_demo_products
from ecofinds.models import Product


def test_demo_products_are_fresh_copies():
    first = demo_products()
    first[0]['title'] = 'changed'
    assert demo_products()[0]['title'] == 'Kindle Paperwhite (11th Gen)'
    assert len(first) == 5


def test_demo_products_embed_seller():
    sellers = {p['seller']['username'] for p in demo_products()}
    assert sellers == {'eco_seller', 'green_buyer'}


def test_seed_is_idempotent(app):
    assert seed_demo_products() == 5
    assert seed_demo_products() == 0
    assert Product.query.filter_by(owner_id=DEMO_OWNER_ID).count() == 5


def test_seed_command(app, client):
    result = app.test_cli_runner().invoke(args=['seed-demo'])
    assert 'Seeded 5 demo product(s).' in result.output

    titles = [p['title'] for p in client.get('/api/products').get_json()['products']]
    assert titles[0] == 'Kindle Paperwhite (11th Gen)'
