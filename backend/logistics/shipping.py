"""
Evri courier rates (Standard Courier Collection).

Weights in kg, dimensions in cm unless a name says otherwise. Packages are
billed on the greater of actual and volumetric weight, capped at 15 kg.
"""
from decimal import Decimal

from backend.invoices.pricing import to_decimal, round_money

# (upper bound in kg, rate); the first bound is exclusive, the rest inclusive
EVRI_UK_RATES = [
    ('Under 1kg', Decimal('1'), Decimal('3.90')),
    ('1-2kg', Decimal('2'), Decimal('5.78')),
    ('2-5kg', Decimal('5'), Decimal('7.49')),
    ('5-10kg', Decimal('10'), Decimal('7.49')),
]
EVRI_UK_HEAVY_TIER = ('10-15kg', Decimal('10.99'))

# Per kg
EVRI_INTERNATIONAL_RATES = {
    'France': Decimal('8.91'),
    'Germany': Decimal('8.70'),
    'Ireland': Decimal('8.89'),
    'Italy': Decimal('9.22'),
    'Spain': Decimal('8.83'),
    'Netherlands': Decimal('9.55'),
    'Belgium': Decimal('9.49'),
    'Austria': Decimal('10.08'),
    'Switzerland': Decimal('11.55'),
    'Czech Republic': Decimal('10.19'),
    'USA': Decimal('13.72'),
    'Canada': Decimal('15.95'),
    'Australia': Decimal('16.16'),
    'New Zealand': Decimal('17.77'),
    'Japan': Decimal('15.05'),
    'India': Decimal('11.36'),
}
DEFAULT_INTERNATIONAL_RATE = Decimal('15.00')

MAX_BILLABLE_WEIGHT = Decimal('15')
VOLUMETRIC_DIVISOR = Decimal('5000')
SHIPPING_INVOICE_MULTIPLIER = Decimal('5')
CM_PER_INCH = Decimal('2.54')
PACKAGING_PADDING_INCHES = Decimal('2')


def inches_to_cm(inches):
    return to_decimal(inches) * CM_PER_INCH


def volumetric_weight(length, width, height):
    return to_decimal(length) * to_decimal(width) * to_decimal(height) / VOLUMETRIC_DIVISOR


def billable_weight(item):
    """item is a dict with length, width, height (cm) and optional weight (kg)"""
    volumetric = volumetric_weight(item['length'], item['width'], item['height'])
    return max(volumetric, to_decimal(item.get('weight')))


def total_billable_weight(items):
    """Sum of billable weights, capped at 15 kg"""
    total = sum((billable_weight(item) for item in items), Decimal('0'))
    return min(total, MAX_BILLABLE_WEIGHT)


def uk_weight_tier(weight):
    """Returns (tier name, rate) for a UK shipment weight"""
    weight = to_decimal(weight)
    name, upper, rate = EVRI_UK_RATES[0]
    if weight < upper:
        return name, rate
    for name, upper, rate in EVRI_UK_RATES[1:]:
        if weight <= upper:
            return name, rate
    return EVRI_UK_HEAVY_TIER


def uk_shipping_cost(items):
    _, rate = uk_weight_tier(total_billable_weight(items))
    return rate


def international_rate(country):
    return EVRI_INTERNATIONAL_RATES.get(country, DEFAULT_INTERNATIONAL_RATE)


def international_shipping_cost(items, country):
    return international_rate(country) * total_billable_weight(items)


def shipping_invoice_cost(items, destination, country=None):
    """
    Shipping charge to invoice: the courier cost times five.

    destination is 'within_uk' or anything else for international.
    """
    if destination == 'within_uk':
        base_cost = uk_shipping_cost(items)
    else:
        base_cost = international_shipping_cost(items, country)
    return round_money(base_cost * SHIPPING_INVOICE_MULTIPLIER)


def packaging_dimensions(length, width, height):
    """Add 2 inches of packaging to each dimension (all in cm)"""
    padding = inches_to_cm(PACKAGING_PADDING_INCHES)
    return {
        'length': to_decimal(length) + padding,
        'width': to_decimal(width) + padding,
        'height': to_decimal(height) + padding,
    }


def packaged_item_from_inches(length_inches, width_inches, height_inches, weight_kg=None):
    """Courier item dict for an artwork measured in inches, packaging included"""
    item = packaging_dimensions(
        inches_to_cm(length_inches), inches_to_cm(width_inches), inches_to_cm(height_inches),
    )
    item['weight'] = to_decimal(weight_kg)
    return item
