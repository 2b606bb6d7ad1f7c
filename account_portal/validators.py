"""
Field-level validation rules for account and customer data.

Every predicate takes a single value and returns a bool. They never raise:
a value of the wrong type simply fails its rule. The same rule table,
UPDATE_FIELD_RULES, backs both the edit session and the request validator
that runs before an update is forwarded upstream.
"""

import math
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

FICO_MIN = 300
FICO_MAX = 850

ACCOUNT_ID_LENGTH = 11

_NON_DIGITS = re.compile(r"[^0-9]")
_STATE_CODE = re.compile(r"[A-Z]{2}")
_ZIP_CODE = re.compile(r"[0-9]{5}")
_COUNTRY_CODE = re.compile(r"[A-Z]{2,3}")
_NAME = re.compile(r"[A-Za-z\s]+")

# Accepted in addition to ISO 8601 dates and datetimes
_DATE_FORMATS = ("%m/%d/%Y",)


def strip_non_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def parse_date(value: Any) -> date | None:
    """Parse a calendar date, returning None when the value is not one."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def validate_account_id(account_id: Any) -> bool:
    """An account ID is 11 digits once separators are removed, and not all zeros."""
    if not isinstance(account_id, str):
        return False
    cleaned = strip_non_digits(account_id)
    return len(cleaned) == ACCOUNT_ID_LENGTH and cleaned != "0" * ACCOUNT_ID_LENGTH


def validate_yes_no(value: Any) -> bool:
    return value == "Y" or value == "N"


validate_active_status = validate_yes_no
validate_primary_card_holder_indicator = validate_yes_no


def validate_monetary_amount(amount: Any) -> bool:
    """A monetary amount is a finite, non-negative number."""
    if isinstance(amount, bool):
        return False
    if isinstance(amount, int):
        return amount >= 0
    if isinstance(amount, float):
        return math.isfinite(amount) and amount >= 0
    if isinstance(amount, Decimal):
        return amount.is_finite() and amount >= 0
    return False


def validate_date(value: Any) -> bool:
    return parse_date(value) is not None


def validate_ssn(ssn: Any) -> bool:
    """
    Validate a Social Security Number.

    Separators are ignored. The area number (first three digits) cannot be
    000, 666 or 900 and above; the group number (middle two) cannot be 00;
    the serial number (last four) cannot be 0000.
    """
    if not isinstance(ssn, str):
        return False
    cleaned = strip_non_digits(ssn)
    if len(cleaned) != 9:
        return False

    area, group, serial = cleaned[:3], cleaned[3:5], cleaned[5:]
    if area in ("000", "666") or int(area) >= 900:
        return False
    if group == "00":
        return False
    if serial == "0000":
        return False
    return True


def validate_fico_score(score: Any) -> bool:
    if isinstance(score, bool):
        return False
    if isinstance(score, float):
        if not score.is_integer():
            return False
    elif not isinstance(score, int):
        return False
    return FICO_MIN <= score <= FICO_MAX


def validate_phone_number(phone: Any) -> bool:
    """A US phone number: 10 digits, area code not 000/911, exchange not 000."""
    if not isinstance(phone, str):
        return False
    cleaned = strip_non_digits(phone)
    if len(cleaned) != 10:
        return False

    area_code, prefix = cleaned[:3], cleaned[3:6]
    if area_code in ("000", "911"):
        return False
    if prefix == "000":
        return False
    return True


def validate_state_code(state: Any) -> bool:
    return isinstance(state, str) and _STATE_CODE.fullmatch(state) is not None


def validate_zip_code(zip_code: Any) -> bool:
    return isinstance(zip_code, str) and _ZIP_CODE.fullmatch(zip_code) is not None


def validate_country_code(country: Any) -> bool:
    return isinstance(country, str) and _COUNTRY_CODE.fullmatch(country) is not None


def validate_name(name: Any) -> bool:
    """Names hold letters and whitespace only, and are not blank."""
    if not isinstance(name, str):
        return False
    return _NAME.fullmatch(name) is not None and name.strip() != ""


def validate_text(value: Any) -> bool:
    return isinstance(value, str)


def validate_required_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _optional(predicate: Callable[[Any], bool]) -> Callable[[Any], bool]:
    """Allow an empty string (clearing the field) in addition to the rule."""

    def check(value: Any) -> bool:
        return value == "" or predicate(value)

    return check


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

FieldRule = tuple[Callable[[Any], bool], str]

_NON_NEGATIVE = "{} must be a non-negative number"
_ALPHABETIC = "{} must contain only alphabetic characters"
_VALID_DATE = "{} must be a valid date"
_VALID_PHONE = "{} must be a valid 10-digit phone number"

UPDATE_FIELD_RULES: dict[str, FieldRule] = {
    # Account fields
    "activeStatus": (validate_active_status, "Active status must be Y or N"),
    "currentBalance": (validate_monetary_amount, _NON_NEGATIVE.format("currentBalance")),
    "creditLimit": (validate_monetary_amount, _NON_NEGATIVE.format("creditLimit")),
    "cashCreditLimit": (validate_monetary_amount, _NON_NEGATIVE.format("cashCreditLimit")),
    "openDate": (validate_date, _VALID_DATE.format("openDate")),
    "expirationDate": (validate_date, _VALID_DATE.format("expirationDate")),
    "reissueDate": (validate_date, _VALID_DATE.format("reissueDate")),
    "currentCycleCredit": (validate_monetary_amount, _NON_NEGATIVE.format("currentCycleCredit")),
    "currentCycleDebit": (validate_monetary_amount, _NON_NEGATIVE.format("currentCycleDebit")),
    "groupId": (validate_text, "groupId must be a string"),
    # Customer fields
    "firstName": (validate_name, _ALPHABETIC.format("firstName")),
    "middleName": (_optional(validate_name), _ALPHABETIC.format("middleName")),
    "lastName": (validate_name, _ALPHABETIC.format("lastName")),
    "ssn": (validate_ssn, "SSN must be a valid 9-digit number"),
    "dateOfBirth": (validate_date, _VALID_DATE.format("dateOfBirth")),
    "ficoScore": (validate_fico_score, f"FICO score must be between {FICO_MIN} and {FICO_MAX}"),
    "addressLine1": (validate_required_text, "addressLine1 cannot be blank"),
    "addressLine2": (validate_text, "addressLine2 must be a string"),
    "city": (validate_required_text, "city cannot be blank"),
    "stateCode": (validate_state_code, "State code must be 2 uppercase letters"),
    "zipCode": (validate_zip_code, "ZIP code must be 5 digits"),
    "countryCode": (validate_text, "countryCode must be a string"),
    "phoneNumber1": (validate_phone_number, _VALID_PHONE.format("phoneNumber1")),
    "phoneNumber2": (_optional(validate_phone_number), _VALID_PHONE.format("phoneNumber2")),
    "governmentIssuedId": (validate_text, "governmentIssuedId must be a string"),
    "eftAccountId": (validate_text, "eftAccountId must be a string"),
    "primaryCardHolderIndicator": (
        validate_primary_card_holder_indicator,
        "Primary card holder indicator must be Y or N",
    ),
}

# Swapped in for the plain string check when country codes are enforced
COUNTRY_CODE_RULE: FieldRule = (
    validate_country_code,
    "Country code must be 2 or 3 uppercase letters",
)


def collect_field_errors(
    payload: Mapping[str, Any],
    enforce_country_code: bool = False,
) -> dict[str, str]:
    """
    Check every field present in an update against its rule.

    Only keys present in the payload are checked. A present None must pass
    its rule like any other value, so it is rejected everywhere; optional
    fields are cleared with an empty string instead.

    Returns:
        Offending fields mapped to their error message, in payload order.
        Empty when the payload is valid.
    """
    errors: dict[str, str] = {}
    for field, value in payload.items():
        rule = UPDATE_FIELD_RULES.get(field)
        if rule is None:
            errors[field] = f"{field} is not an updatable field"
            continue
        if field == "countryCode" and enforce_country_code:
            rule = COUNTRY_CODE_RULE

        predicate, message = rule
        if not predicate(value):
            errors[field] = message
    return errors
