"""
Request validation applied before anything is forwarded upstream.

These checks re-run the field rules from validators.py on the server side,
independently of any client, so a caller that bypasses the UI still cannot
push a malformed update to the backend. Validation is all-or-nothing: either
the whole payload passes, or nothing is forwarded.
"""

from typing import Any

from account_portal.exceptions import FieldValidationError
from account_portal.validators import (
    collect_field_errors,
    strip_non_digits,
    validate_account_id,
)

ACCOUNT_ID_MESSAGE = "Account ID must be a non-zero 11-digit number"


def require_valid_account_id(account_id: str) -> str:
    """
    Check an account ID and return it with separators removed.

    Raises:
        FieldValidationError: If the ID is not a non-zero 11-digit number.
    """
    if not validate_account_id(account_id):
        raise FieldValidationError("accountId", ACCOUNT_ID_MESSAGE)
    return strip_non_digits(account_id)


def validate_update_payload(
    payload: Any,
    enforce_country_code: bool = False,
) -> dict[str, Any]:
    """
    Check an untyped update body against the shared field rules.

    Args:
        payload: The decoded JSON body, or None if the request had none.
        enforce_country_code: Apply the country code rule as well.

    Returns:
        The payload, unchanged.

    Raises:
        FieldValidationError: If the body is missing, empty, not an object,
            or any present field fails its rule. The first failure becomes
            the detail message; all failures are listed in `errors`.
    """
    if payload is None or payload == {}:
        raise FieldValidationError(None, "Request body cannot be empty")
    if not isinstance(payload, dict):
        raise FieldValidationError(None, "Request body must be a JSON object")

    errors = collect_field_errors(payload, enforce_country_code=enforce_country_code)
    if errors:
        field, message = next(iter(errors.items()))
        raise FieldValidationError(field, message, errors)
    return payload
