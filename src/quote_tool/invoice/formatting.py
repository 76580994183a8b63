"""
Rupiah and date formatting for invoices (id-ID conventions).
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from ..engine.models import Number, to_decimal

NBSP = "\u00a0"

MONTHS_ID = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def format_idr(amount: Number) -> str:
    """Format an amount as rupiah with no fraction digits, e.g. 'Rp 250.000'."""
    value = to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = f"{abs(int(value)):,}".replace(",", ".")
    return f"{sign}Rp{NBSP}{digits}"


def format_invoice_date(day: date) -> str:
    """Long Indonesian date, e.g. '19 Oktober 2026'."""
    return f"{day.day} {MONTHS_ID[day.month - 1]} {day.year}"
