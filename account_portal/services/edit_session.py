"""
Edit session — the state behind the account edit view.

A session holds two things:
  - the original record, loaded once and never modified
  - the dirty fields, i.e. only what the user has touched

Submitting runs the shared field rules and a change check locally, so a
malformed or no-op submission fails without any call to the backend. Only
fields whose value really differs from the original are sent. The session
closes on a successful submit or on cancel; nothing outlives it.

Typical use:
    session = await EditSession.start(client, "12345678901", token)
    session.set_field("creditLimit", 7500)
    await session.submit()
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from account_portal.change_detection import extract_changes, has_changes
from account_portal.config import settings
from account_portal.exceptions import (
    FieldValidationError,
    NoChangesError,
    UpstreamError,
    UpstreamErrorKind,
)
from account_portal.services import account_service
from account_portal.services.request_validation import require_valid_account_id
from account_portal.upstream import UpstreamClient, UpstreamResponse
from account_portal.validators import UPDATE_FIELD_RULES, collect_field_errors


class EditSession:
    """Mutable partial copy of an account record plus its original snapshot."""

    def __init__(
        self,
        client: UpstreamClient,
        account_id: str,
        original: Mapping[str, Any],
        token: str | None = None,
        enforce_country_code: bool | None = None,
    ):
        if enforce_country_code is None:
            enforce_country_code = settings.ENFORCE_COUNTRY_CODE

        self.account_id = require_valid_account_id(account_id)
        self.original: Mapping[str, Any] = MappingProxyType(dict(original))
        self.closed = False
        self._client = client
        self._token = token
        self._enforce_country_code = enforce_country_code
        self._dirty: dict[str, Any] = {}

    @classmethod
    async def start(
        cls,
        client: UpstreamClient,
        account_id: str,
        token: str | None = None,
        enforce_country_code: bool | None = None,
    ) -> "EditSession":
        """
        Load the account and open a session on it.

        Raises:
            FieldValidationError: If the account ID is malformed.
            AccountNotFoundError: If the backend has no such account.
            UpstreamError: If the record could not be loaded.
        """
        result = await account_service.get_account_view(client, account_id, token)
        if not 200 <= result.status_code < 300 or not isinstance(result.data, dict):
            raise UpstreamError(
                UpstreamErrorKind.UNEXPECTED,
                result.status_code,
                "Failed to load account",
            )
        return cls(client, account_id, result.data, token, enforce_country_code)

    @property
    def dirty(self) -> dict[str, Any]:
        """Fields the user has touched, with their current values."""
        return dict(self._dirty)

    @property
    def form(self) -> dict[str, Any]:
        """Every editable field, showing the edited value where there is one."""
        values = {field: self.original.get(field) for field in UPDATE_FIELD_RULES}
        values.update(self._dirty)
        return values

    def set_field(self, field: str, value: Any) -> None:
        self._ensure_open()
        if field not in UPDATE_FIELD_RULES:
            raise FieldValidationError(field, f"{field} is not an updatable field")
        self._dirty[field] = value

    def update(self, changes: Mapping[str, Any]) -> None:
        """Apply several edits at once; one unknown field rejects them all."""
        self._ensure_open()
        unknown = [field for field in changes if field not in UPDATE_FIELD_RULES]
        if unknown:
            raise FieldValidationError(
                unknown[0],
                f"{unknown[0]} is not an updatable field",
                {field: f"{field} is not an updatable field" for field in unknown},
            )
        self._dirty.update(changes)

    def reset(self) -> None:
        """Discard every edit, returning the form to the original record."""
        self._ensure_open()
        self._dirty.clear()

    def validate(self) -> dict[str, str]:
        """Return the offending fields and their messages; empty when valid."""
        return collect_field_errors(self._dirty, enforce_country_code=self._enforce_country_code)

    def has_changes(self) -> bool:
        return has_changes(self.original, self._dirty)

    async def submit(self) -> UpstreamResponse:
        """
        Validate, diff and send the changed fields to the backend.

        Raises:
            FieldValidationError: If any touched field fails its rule.
            NoChangesError: If no touched field differs from the original.
            (Both are raised before any backend call.)
            AccountNotFoundError, ConcurrentModificationError, UpstreamError:
                As raised by account_service.update_account().
        """
        self._ensure_open()

        errors = self.validate()
        if errors:
            field = next(iter(errors))
            raise FieldValidationError(
                field,
                "Please fix the validation errors before submitting",
                errors,
            )

        changes = extract_changes(self.original, self._dirty)
        if not changes:
            raise NoChangesError()

        result = await account_service.update_account(
            self._client,
            self.account_id,
            changes,
            self._token,
            enforce_country_code=self._enforce_country_code,
        )
        if 200 <= result.status_code < 300:
            self.closed = True
        return result

    def cancel(self) -> None:
        self.closed = True

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError("Edit session is closed")
