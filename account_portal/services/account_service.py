"""
Account service — search, view, summarize and update a single account.

Every operation validates its input before the backend is contacted, then
relays the request through an UpstreamClient. Backend failures arrive as
UpstreamError with a structured kind and are remapped here:

  view:    NOT_FOUND -> AccountNotFoundError ("Account not found in the system")
  update:  NOT_FOUND -> AccountNotFoundError ("Account or customer not found")
           CONFLICT  -> ConcurrentModificationError
  either:  anything else -> UpstreamError with a generic message (500)

The functions hold no state; the client and the caller's token are passed
in on every call.
"""

import logging
from typing import Any

from pydantic import ValidationError

from account_portal.config import settings
from account_portal.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    FieldValidationError,
    UpstreamError,
    UpstreamErrorKind,
)
from account_portal.formatters import (
    calculate_available_credit,
    calculate_credit_utilization,
    credit_utilization_band,
    fico_score_band,
    format_account_id,
    format_currency,
    format_date,
    format_phone_number,
    format_ssn,
    get_full_address,
    get_full_name,
    get_status_label,
)
from account_portal.schemas.account import AccountSummary, AccountView
from account_portal.services.request_validation import (
    require_valid_account_id,
    validate_update_payload,
)
from account_portal.upstream import UpstreamClient, UpstreamResponse

logger = logging.getLogger(__name__)

VIEW_PATH = "/api/accounts/{account_id}/view"
UPDATE_PATH = "/api/accounts/{account_id}/update"


def search_account(query: str | None) -> str:
    """
    Resolve a search box entry to a normalized account ID.

    Raises:
        FieldValidationError: If the entry is blank or not a valid ID.
    """
    if query is None or not query.strip():
        raise FieldValidationError("accountId", "Please enter an account ID")
    return require_valid_account_id(query)


async def get_account_view(
    client: UpstreamClient,
    account_id: str,
    token: str | None,
) -> UpstreamResponse:
    """
    Fetch the merged account and customer record.

    The account ID is checked before any backend call is made.

    Raises:
        FieldValidationError: If the account ID is malformed.
        AccountNotFoundError: If the backend has no such account.
        UpstreamError: For any other backend failure.
    """
    normalized = require_valid_account_id(account_id)
    try:
        return await client.get(VIEW_PATH.format(account_id=normalized), token)
    except UpstreamError as exc:
        if exc.kind is UpstreamErrorKind.NOT_FOUND:
            raise AccountNotFoundError(normalized) from exc
        raise UpstreamError(exc.kind, exc.status_code, "Failed to fetch account view") from exc


async def get_account_summary(
    client: UpstreamClient,
    account_id: str,
    token: str | None,
) -> UpstreamResponse:
    """
    Fetch an account and format it for display.

    Non-2xx backend answers that pass through (such as 401) are returned
    untouched; only a successful record is summarized.
    """
    result = await get_account_view(client, account_id, token)
    if not 200 <= result.status_code < 300:
        return result

    try:
        record = AccountView.model_validate(result.data)
    except ValidationError as exc:
        logger.error("Backend returned a malformed account record for %s", account_id)
        raise UpstreamError(
            UpstreamErrorKind.UNEXPECTED,
            result.status_code,
            "Failed to fetch account view",
        ) from exc

    return UpstreamResponse(result.status_code, build_account_summary(record))


def build_account_summary(record: AccountView) -> AccountSummary:
    """Derive the display values shown on the account detail view."""
    utilization = calculate_credit_utilization(record.credit_limit, record.current_balance)
    available = calculate_available_credit(record.credit_limit, record.current_balance)
    fico = fico_score_band(record.fico_score)

    return AccountSummary(
        account_id=format_account_id(record.account_id),
        status=record.active_status,
        status_label=get_status_label(record.active_status),
        current_balance=format_currency(record.current_balance),
        credit_limit=format_currency(record.credit_limit),
        cash_credit_limit=format_currency(record.cash_credit_limit),
        available_credit=format_currency(available),
        credit_utilization=round(utilization, 1),
        credit_utilization_severity=credit_utilization_band(utilization).value,
        current_cycle_credit=format_currency(record.current_cycle_credit),
        current_cycle_debit=format_currency(record.current_cycle_debit),
        open_date=format_date(record.open_date),
        expiration_date=format_date(record.expiration_date),
        reissue_date=format_date(record.reissue_date),
        group_id=record.group_id,
        customer_id=str(record.customer_id),
        full_name=get_full_name(record.first_name, record.middle_name, record.last_name),
        ssn=format_ssn(record.ssn),
        date_of_birth=format_date(record.date_of_birth),
        fico_score=record.fico_score,
        fico_label=fico.label,
        fico_severity=fico.severity.value,
        full_address=get_full_address(
            record.address_line1,
            record.address_line2,
            record.city,
            record.state_code,
            record.zip_code,
        ),
        country_code=record.country_code,
        phone_number1=format_phone_number(record.phone_number1),
        phone_number2=(
            format_phone_number(record.phone_number2) if record.phone_number2 else None
        ),
        primary_card_holder=record.primary_card_holder_indicator == "Y",
    )


async def update_account(
    client: UpstreamClient,
    account_id: str,
    payload: Any,
    token: str | None,
    enforce_country_code: bool | None = None,
) -> UpstreamResponse:
    """
    Validate a partial update and forward it to the backend unchanged.

    Args:
        client: Upstream client.
        account_id: Account to update (separators allowed).
        payload: Decoded JSON body with any subset of the update fields.
        token: The caller's bearer token.
        enforce_country_code: Override ENFORCE_COUNTRY_CODE from settings.

    Raises:
        FieldValidationError: If the ID or any field is invalid.
        AccountNotFoundError: If the account or its customer is missing upstream.
        ConcurrentModificationError: If the backend reports a conflicting edit.
        UpstreamError: For any other backend failure.
    """
    if enforce_country_code is None:
        enforce_country_code = settings.ENFORCE_COUNTRY_CODE

    normalized = require_valid_account_id(account_id)
    try:
        body = validate_update_payload(payload, enforce_country_code=enforce_country_code)
    except FieldValidationError as exc:
        logger.info(
            "Rejected update for account %s: %s",
            normalized,
            ", ".join(sorted(exc.errors)) or exc.detail,
            extra={"extra": {"account_id": normalized, "fields": sorted(exc.errors)}},
        )
        raise

    logger.info(
        "Forwarding update for account %s: %s",
        normalized,
        ", ".join(sorted(body)),
        extra={"extra": {"account_id": normalized, "fields": sorted(body)}},
    )
    try:
        return await client.put(UPDATE_PATH.format(account_id=normalized), token, body)
    except UpstreamError as exc:
        if exc.kind is UpstreamErrorKind.NOT_FOUND:
            raise AccountNotFoundError(normalized, "Account or customer not found") from exc
        if exc.kind is UpstreamErrorKind.CONFLICT:
            raise ConcurrentModificationError(normalized) from exc
        raise UpstreamError(exc.kind, exc.status_code, "Failed to update account") from exc
