"""
Pydantic schemas for the account endpoints.

The backend speaks camelCase JSON, so every model maps snake_case attribute
names to camelCase aliases. Monetary amounts are plain dollar figures with
two decimals, as the backend returns them.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountView(CamelModel):
    """Merged account and customer record as returned by the backend."""
    # Account
    account_id: int | str
    active_status: str
    current_balance: float
    credit_limit: float
    cash_credit_limit: float
    open_date: str
    expiration_date: str
    reissue_date: str
    current_cycle_credit: float
    current_cycle_debit: float
    group_id: str | None = None

    # Customer
    customer_id: int | str
    first_name: str
    middle_name: str | None = None
    last_name: str
    ssn: str
    fico_score: int
    date_of_birth: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state_code: str
    zip_code: str
    country_code: str | None = None
    phone_number1: str
    phone_number2: str | None = None
    government_issued_id: str | None = None
    eft_account_id: str | None = None
    primary_card_holder_indicator: str


class UpdateAccountRequest(CamelModel):
    """
    Request body for PUT /api/accounts/{accountId}/update (all fields optional).

    Used to document the body in OpenAPI. The body itself is checked against
    validators.UPDATE_FIELD_RULES so that errors come back as 400 with the
    offending field named.
    """
    active_status: str | None = None
    current_balance: float | None = None
    credit_limit: float | None = None
    cash_credit_limit: float | None = None
    open_date: str | None = None
    expiration_date: str | None = None
    reissue_date: str | None = None
    current_cycle_credit: float | None = None
    current_cycle_debit: float | None = None
    group_id: str | None = None

    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    ssn: str | None = None
    date_of_birth: str | None = None
    fico_score: int | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state_code: str | None = None
    zip_code: str | None = None
    country_code: str | None = None
    phone_number1: str | None = None
    phone_number2: str | None = None
    government_issued_id: str | None = None
    eft_account_id: str | None = None
    primary_card_holder_indicator: str | None = None


class AccountSearchResponse(CamelModel):
    """Normalized account ID and where to fetch its record."""
    account_id: str
    view_path: str


class AccountSummary(CamelModel):
    """
    Display-ready account details.

    Amounts and dates are formatted strings; utilization is a percentage
    rounded to one decimal place, with a severity for highlighting.
    """
    account_id: str
    status: str
    status_label: str
    current_balance: str
    credit_limit: str
    cash_credit_limit: str
    available_credit: str
    credit_utilization: float
    credit_utilization_severity: str
    current_cycle_credit: str
    current_cycle_debit: str
    open_date: str
    expiration_date: str
    reissue_date: str
    group_id: str | None

    customer_id: str
    full_name: str
    ssn: str
    date_of_birth: str
    fico_score: int
    fico_label: str
    fico_severity: str
    full_address: str
    country_code: str | None
    phone_number1: str
    phone_number2: str | None
    primary_card_holder: bool
