"""
Invoice pricing rules: buyer's premium, VAT, insurance and dimensional shipping.

All amounts are Decimal in GBP.
"""
import re
from decimal import Decimal, ROUND_HALF_UP


PENNY = Decimal('0.01')

# (upper bound of the band, rate); the last band is open-ended
BUYERS_PREMIUM_BANDS = [
    (Decimal('100000'), Decimal('0.25')),
    (None, Decimal('0.15')),
]

LIVE_AUCTIONEER_COMMISSION_RATE = Decimal('0.05')

VAT_STANDARD = Decimal('0.20')
VAT_REDUCED = Decimal('0.05')
VAT_ZERO = Decimal('0.00')

# M margin scheme, N/Z zero-rated, E exempt, V standard, W reduced
VAT_CODE_RATES = {
    'M': VAT_ZERO,
    'N': VAT_ZERO,
    'Z': VAT_ZERO,
    'E': VAT_ZERO,
    'V': VAT_STANDARD,
    'W': VAT_REDUCED,
}

# (upper bound, charge); totals above the last bound need a specific contract
INSURANCE_TIERS = {
    'UK': [
        (Decimal('1000'), Decimal('20')),
        (Decimal('5000'), Decimal('35')),
        (Decimal('25000'), Decimal('45')),
        (Decimal('50000'), Decimal('60')),
    ],
    'International': [
        (Decimal('1000'), Decimal('30')),
        (Decimal('5000'), Decimal('50')),
        (Decimal('25000'), Decimal('60')),
        (Decimal('50000'), Decimal('75')),
    ],
}

SHIPPING_BASE_RATE = Decimal('50')
SHIPPING_DIMENSION_MULTIPLIER = Decimal('0.10')
SHIPPING_INTERNATIONAL_SURCHARGE = Decimal('0.50')
PACKAGING_ALLOWANCE_INCHES = Decimal('2')

DIMENSIONS_PATTERN = re.compile(r'(\d+(?:\.\d+)?)\s*[x×]\s*(\d+(?:\.\d+)?)', re.IGNORECASE)


def to_decimal(value):
    if value is None or value == '':
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(amount):
    return to_decimal(amount).quantize(PENNY, rounding=ROUND_HALF_UP)


def calculate_buyers_premium(hammer_price, premium_rate=None):
    """
    Buyer's premium on a hammer price.

    A client-specific premium_rate applies flat; otherwise 25% up to
    £100,000 and 15% on the excess.
    """
    hammer_price = to_decimal(hammer_price)
    if premium_rate is not None:
        return hammer_price * to_decimal(premium_rate)

    premium = Decimal('0')
    lower = Decimal('0')
    for upper, rate in BUYERS_PREMIUM_BANDS:
        if hammer_price <= lower:
            break
        band_top = hammer_price if upper is None else min(hammer_price, upper)
        premium += (band_top - lower) * rate
        if upper is None:
            break
        lower = upper
    return premium


def calculate_live_auctioneer_commission(hammer_price):
    return to_decimal(hammer_price) * LIVE_AUCTIONEER_COMMISSION_RATE


def vat_rate_for_code(vat_code):
    """Unknown or missing codes are charged at the standard rate."""
    return VAT_CODE_RATES.get((vat_code or '').upper(), VAT_STANDARD)


def calculate_vat(amount, vat_code):
    """Returns (vat_amount, vat_rate)."""
    rate = vat_rate_for_code(vat_code)
    return to_decimal(amount) * rate, rate


def calculate_insurance_cost(total_price, destination='UK'):
    """Insurance charge for a total; 0 above £50,000 or for an unknown region."""
    total_price = to_decimal(total_price)
    for upper, charge in INSURANCE_TIERS.get(destination, []):
        if total_price <= upper:
            return charge
    return Decimal('0')


def parse_dimensions(dimensions):
    """
    Height and width from strings like "12 x 8", "12x8 inches" or "12 × 8".

    Returns (height, width) as Decimals, or None.
    """
    if not dimensions:
        return None
    match = DIMENSIONS_PATTERN.search(str(dimensions))
    if not match:
        return None
    return Decimal(match.group(1)), Decimal(match.group(2))


def calculate_shipping_cost(destination, artworks):
    """
    Dimensional shipping estimate.

    Args:
        destination: 'within_uk' or 'international'
        artworks: iterable of (height, width) in inches

    Each artwork is padded by 2 inches per side for packaging; international
    shipments carry a 50% surcharge.
    """
    total_area = Decimal('0')
    for height, width in artworks:
        total_area += (to_decimal(height) + PACKAGING_ALLOWANCE_INCHES) * (to_decimal(width) + PACKAGING_ALLOWANCE_INCHES)

    cost = SHIPPING_BASE_RATE + total_area * SHIPPING_DIMENSION_MULTIPLIER
    if destination == 'international':
        cost *= 1 + SHIPPING_INTERNATIONAL_SURCHARGE
    return round_money(cost)


def calculate_item_total(item):
    """
    Total due for one invoice line.

    Hammer price plus premium, 20% VAT on the premium, VAT on the hammer by
    the item's code, shipping and insurance.
    """
    hammer_price = to_decimal(item.get('hammer_price'))
    premium = calculate_buyers_premium(hammer_price, item.get('premium_rate'))
    premium_vat, _ = calculate_vat(premium, 'V')
    item_vat, _ = calculate_vat(hammer_price, item.get('vat_code'))
    return (
        hammer_price + premium + premium_vat + item_vat
        + to_decimal(item.get('shipping_cost')) + to_decimal(item.get('insurance_cost'))
    )


def format_currency(amount):
    amount = round_money(amount)
    sign = '-' if amount < 0 else ''
    return f"{sign}£{abs(amount):,.2f}"
