"""Money helpers — amounts are integer paise throughout the storefront.

Keeping every amount in the INR minor unit means totals are plain integer
sums: no rounding drift however many lines or additions a cart sees.
"""

from decimal import ROUND_HALF_UP, Decimal

PAISE_PER_RUPEE = 100


def to_paise(rupees) -> int:
    """Convert a rupee amount (int, str or Decimal) to integer paise.

    Floats are routed through ``str`` so ``19.99`` becomes ``1999`` and not
    ``1998``.
    """
    if isinstance(rupees, float):
        rupees = str(rupees)
    amount = Decimal(rupees) * PAISE_PER_RUPEE
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_rupees(paise: int) -> Decimal:
    return (Decimal(paise) / PAISE_PER_RUPEE).quantize(Decimal("0.01"))


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 1,00,00,000
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(paise: int) -> str:
    """Render paise as whole rupees the way the storefront displays prices.

    >>> format_inr(12345600)
    '₹1,23,456'
    """
    rupees = to_rupees(abs(paise)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if paise < 0 else ""
    return f"{sign}₹{_group_indian(str(rupees))}"
