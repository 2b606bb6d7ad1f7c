"""
Accounts router — search, view and update a single credit-card account.

    GET  /api/accounts/search?accountId=...     — Normalize and check an account ID
    GET  /api/accounts/{accountId}/view         — Merged account + customer record
    GET  /api/accounts/{accountId}/summary      — Display-ready account details
    PUT  /api/accounts/{accountId}/update       — Partial update of any fields

Each handler validates its input before the backend is called, then relays
the backend's status and body. The caller's bearer token is passed through
to the backend, which decides whether it is acceptable.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.responses import JSONResponse

from account_portal.dependencies import get_upstream_client, oauth2_scheme
from account_portal.schemas.account import (
    AccountSearchResponse,
    AccountSummary,
    UpdateAccountRequest,
)
from account_portal.services import account_service
from account_portal.services.account_service import VIEW_PATH
from account_portal.upstream import UpstreamClient, UpstreamResponse

router = APIRouter()


def _relay(result: UpstreamResponse) -> Response:
    # An empty backend body (e.g. 204) must stay empty
    if result.data is None:
        return Response(status_code=result.status_code)
    return JSONResponse(content=result.data, status_code=result.status_code)


@router.get(
    "/search",
    response_model=AccountSearchResponse,
    summary="Look up an account ID",
)
async def search_account(
    account_id: str | None = Query(None, alias="accountId"),
):
    """
    Check a search entry and return the normalized 11-digit ID.

    Separators such as dashes or spaces are ignored. No backend call is made.
    """
    normalized = account_service.search_account(account_id)
    return AccountSearchResponse(
        account_id=normalized,
        view_path=VIEW_PATH.format(account_id=normalized),
    )


@router.get(
    "/{account_id}/view",
    summary="Get account and customer details",
)
async def view_account(
    account_id: str,
    token: str | None = Depends(oauth2_scheme),
    client: UpstreamClient = Depends(get_upstream_client),
):
    """
    Get the merged account and customer record from the backend.

    Returns 400 for a malformed account ID (before contacting the backend)
    and 404 if the backend has no such account.
    """
    result = await account_service.get_account_view(client, account_id, token)
    return _relay(result)


@router.get(
    "/{account_id}/summary",
    response_model=AccountSummary,
    summary="Get display-ready account details",
)
async def account_summary(
    account_id: str,
    token: str | None = Depends(oauth2_scheme),
    client: UpstreamClient = Depends(get_upstream_client),
):
    """
    Get the account with formatted amounts, dates and contact details, plus
    available credit, utilization and FICO band.
    """
    result = await account_service.get_account_summary(client, account_id, token)
    if isinstance(result.data, AccountSummary):
        return result.data
    return _relay(result)


@router.put(
    "/{account_id}/update",
    summary="Update account and customer information",
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {
                    "schema": UpdateAccountRequest.model_json_schema(by_alias=True),
                },
            },
        },
    },
)
async def update_account(
    account_id: str,
    payload: Any = Body(None),
    token: str | None = Depends(oauth2_scheme),
    client: UpstreamClient = Depends(get_upstream_client),
):
    """
    Update any subset of the account and customer fields.

    Every field present is checked before anything is forwarded; one bad
    field rejects the whole update with 400. Returns 404 if the account or
    customer is missing, and 409 if the record changed since it was loaded.
    """
    result = await account_service.update_account(client, account_id, payload, token)
    return _relay(result)
