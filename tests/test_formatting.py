import pytest

from ecofinds.formatting import format_price, group_indian


@pytest.mark.parametrize('cents, expected', [
    (0, '₹0'),
    (100000, '₹1,000'),
    (50000, '₹500'),
    (10000000, '₹1,00,000'),
    (100000000, '₹10,00,000'),
    (12345678900, '₹12,34,56,789'),
    (450000, '₹4,500'),
])
def test_format_price(cents, expected):
    assert format_price(cents) == expected


def test_format_price_rounds_half_up():
    assert format_price(150) == '₹2'
    assert format_price(149) == '₹1'


def test_format_price_negative():
    assert format_price(-100000) == '-₹1,000'


def test_group_indian_short_numbers_untouched():
    assert group_indian('999') == '999'
    assert group_indian('1000') == '1,000'
