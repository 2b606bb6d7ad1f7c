"""
Display formatting and derived account metrics.

All functions are pure and locale-fixed to en-US. Formatters that receive a
value they cannot interpret return it unchanged rather than raising, so a
single odd field never breaks a whole account summary.
"""

import enum
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from account_portal.validators import ACCOUNT_ID_LENGTH, parse_date, strip_non_digits

_CENT = Decimal("0.01")


class Severity(str, enum.Enum):
    """How favourable a metric is, from best to worst."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    CAUTION = "caution"
    DANGER = "danger"


class FicoBand(NamedTuple):
    label: str
    severity: Severity


# Evaluated top-down: the first floor the score reaches wins
_FICO_BANDS = (
    (800, FicoBand("Exceptional", Severity.SUCCESS)),
    (740, FicoBand("Very Good", Severity.INFO)),
    (670, FicoBand("Good", Severity.WARNING)),
    (580, FicoBand("Fair", Severity.CAUTION)),
)
_FICO_POOR = FicoBand("Poor", Severity.DANGER)

# Inclusive upper bounds, evaluated top-down
_UTILIZATION_BANDS = (
    (30, Severity.SUCCESS),
    (50, Severity.WARNING),
    (75, Severity.CAUTION),
)


# ---------------------------------------------------------------------------
# Identifiers and contact details
# ---------------------------------------------------------------------------

def format_ssn(ssn: str) -> str:
    """Format as NNN-NN-NNNN; anything without exactly 9 digits is returned as-is."""
    cleaned = strip_non_digits(ssn)
    if len(cleaned) != 9:
        return ssn
    return f"{cleaned[:3]}-{cleaned[3:5]}-{cleaned[5:]}"


def format_phone_number(phone: str) -> str:
    """Format as (NNN)NNN-NNNN; anything without exactly 10 digits is returned as-is."""
    cleaned = strip_non_digits(phone)
    if len(cleaned) != 10:
        return phone
    return f"({cleaned[:3]}){cleaned[3:6]}-{cleaned[6:]}"


def format_account_id(account_id: int | str) -> str:
    return str(account_id).rjust(ACCOUNT_ID_LENGTH, "0")


def get_full_name(first_name: str, middle_name: str | None, last_name: str) -> str:
    if middle_name:
        return f"{first_name} {middle_name} {last_name}"
    return f"{first_name} {last_name}"


def get_full_address(
    address_line1: str,
    address_line2: str | None,
    city: str,
    state_code: str,
    zip_code: str,
) -> str:
    parts = [address_line1]
    if address_line2:
        parts.append(address_line2)
    parts.append(f"{city}, {state_code} {zip_code}")
    return ", ".join(parts)


def get_status_label(status: str) -> str:
    return "Active" if status == "Y" else "Inactive"


# ---------------------------------------------------------------------------
# Money and dates
# ---------------------------------------------------------------------------

def format_currency(amount: int | float | Decimal) -> str:
    """
    Format an amount as US dollars with two decimals.

    Rounds half away from zero: 1234.565 -> "$1,234.57", -3 -> "-$3.00".
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return str(amount)
    if not value.is_finite():
        return str(amount)

    value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_date(value: str) -> str:
    """Format a date as MM/DD/YYYY; unparseable input is returned unchanged."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year:04d}"


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------

def calculate_available_credit(credit_limit: float, current_balance: float) -> float:
    return max(0, credit_limit - current_balance)


def calculate_credit_utilization(credit_limit: float, current_balance: float) -> float:
    """Current balance as a percentage of the credit limit; 0 when there is no limit."""
    if credit_limit == 0:
        return 0
    return current_balance / credit_limit * 100


def credit_utilization_band(utilization: float) -> Severity:
    for upper_bound, severity in _UTILIZATION_BANDS:
        if utilization <= upper_bound:
            return severity
    return Severity.DANGER


def fico_score_band(score: int) -> FicoBand:
    for floor, band in _FICO_BANDS:
        if score >= floor:
            return band
    return _FICO_POOR
