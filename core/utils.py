from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

MONTH_NAMES = [
    'Januari', 'Februari', 'Mac', 'April', 'Mei', 'Jun',
    'Julai', 'Ogos', 'September', 'Oktober', 'November', 'Disember'
]


def local_today():
    return timezone.localdate()


def month_bounds(year, month):
    """Return (first day, first day of next month) for a calendar month."""
    start = date(year, month, 1)
    if month == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, month + 1, 1)


def month_name(month):
    return MONTH_NAMES[month - 1]


def parse_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def quantize(value, places):
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_fixed(value, places=2):
    """Fixed-point text with exact halves rounded away from zero, e.g. 2.125 -> '2.13'."""
    return str(quantize(value, places))


def round_half_up(value, places=2):
    return float(quantize(value, places))


def signed(value, places=2, suffix=''):
    text = to_fixed(value, places)
    return f"{text}{suffix}" if text.startswith('-') else f"+{text}{suffix}"
