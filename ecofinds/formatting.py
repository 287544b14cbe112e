from decimal import ROUND_HALF_UP, Decimal

RUPEE = '₹'


def group_indian(digits):
    """Group a digit string the Indian way: 12,34,56,789."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ','.join(groups + [tail])


def format_price(cents):
    rupees = (Decimal(int(cents)) / 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = '-' if rupees < 0 else ''
    return f'{sign}{RUPEE}{group_indian(str(abs(int(rupees))))}'
