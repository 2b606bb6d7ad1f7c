"""
Tests for the edit session behind the account edit view.

These tests verify:
  - A session loads the original record and never modifies it
  - Only touched fields are tracked, and only real changes are sent
  - Invalid fields and no-op submissions are rejected without a backend call
  - Backend errors are remapped the same way as the update endpoint
  - A session is unusable once submitted successfully or cancelled
"""

import json

import pytest

from account_portal.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    FieldValidationError,
    NoChangesError,
    UpstreamError,
)
from account_portal.services.edit_session import EditSession
from tests.conftest import ACCOUNT_ID, TEST_TOKEN

VIEW_PATH = f"/api/accounts/{ACCOUNT_ID}/view"
UPDATE_PATH = f"/api/accounts/{ACCOUNT_ID}/update"


@pytest.fixture
def backend(upstream, account_record):
    """Fake backend holding one account that accepts updates."""
    upstream.respond("GET", VIEW_PATH, json=account_record)
    upstream.respond("PUT", UPDATE_PATH, text="Success: Account and customer information updated successfully")
    return upstream


def sent_updates(upstream):
    return [json.loads(r.content) for r in upstream.requests if r.method == "PUT"]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestStart:

    async def test_start_loads_record(self, backend, upstream_client, account_record):
        session = await EditSession.start(upstream_client, ACCOUNT_ID, TEST_TOKEN)

        assert session.account_id == ACCOUNT_ID
        assert dict(session.original) == account_record
        assert session.dirty == {}
        assert backend.requests[0].headers["Authorization"] == f"Bearer {TEST_TOKEN}"

    async def test_start_rejects_bad_id_without_backend_call(self, upstream, upstream_client):
        with pytest.raises(FieldValidationError):
            await EditSession.start(upstream_client, "00000000000")

        assert upstream.requests == []

    async def test_start_not_found(self, upstream, upstream_client):
        with pytest.raises(AccountNotFoundError):
            await EditSession.start(upstream_client, ACCOUNT_ID)

    async def test_start_unauthorized(self, upstream, upstream_client):
        upstream.respond("GET", VIEW_PATH, status_code=401, json={"error": "Unauthorized"})

        with pytest.raises(UpstreamError):
            await EditSession.start(upstream_client, ACCOUNT_ID)

    async def test_original_is_read_only(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)

        with pytest.raises(TypeError):
            session.original["creditLimit"] = 1


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------

class TestEditing:

    async def test_form_shows_edits_over_original(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)

        session.set_field("creditLimit", 7500)

        assert session.form["creditLimit"] == 7500
        assert session.form["firstName"] == "Jane"
        assert "accountId" not in session.form
        assert session.original["creditLimit"] == 5000.0

    async def test_unknown_field_is_refused(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)

        with pytest.raises(FieldValidationError):
            session.set_field("customerId", 1)

    async def test_update_with_unknown_field_applies_nothing(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)

        with pytest.raises(FieldValidationError) as exc_info:
            session.update({"creditLimit": 7500, "customerId": 1, "accountId": "1"})

        assert set(exc_info.value.errors) == {"customerId", "accountId"}
        assert session.dirty == {}

    async def test_has_changes(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)

        session.set_field("creditLimit", 5000)
        assert session.has_changes() is False

        session.set_field("creditLimit", 5200)
        assert session.has_changes() is True

    async def test_reset_discards_edits(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.update({"creditLimit": 5200, "city": "Chicago"})

        session.reset()

        assert session.dirty == {}
        assert session.has_changes() is False

    async def test_validate_reports_touched_fields(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.update({"ficoScore": 900, "zipCode": "1234", "city": "Chicago"})

        assert set(session.validate()) == {"ficoScore", "zipCode"}


# ---------------------------------------------------------------------------
# Submitting
# ---------------------------------------------------------------------------

class TestSubmit:

    async def test_submit_sends_only_changed_fields(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID, TEST_TOKEN)
        session.update({"creditLimit": 7500, "firstName": "Jane", "city": "Chicago"})

        result = await session.submit()

        assert result.status_code == 200
        assert sent_updates(backend) == [{"creditLimit": 7500, "city": "Chicago"}]
        assert session.closed is True

    async def test_no_changes_rejected_without_backend_call(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.update({"creditLimit": 5000, "firstName": "Jane"})

        with pytest.raises(NoChangesError) as exc_info:
            await session.submit()

        assert exc_info.value.detail == "No changes detected"
        assert sent_updates(backend) == []
        assert session.closed is False

    async def test_nothing_touched_is_no_changes(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)

        with pytest.raises(NoChangesError):
            await session.submit()

    async def test_invalid_field_rejected_without_backend_call(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.update({"ssn": "666-12-3456", "creditLimit": 7500})

        with pytest.raises(FieldValidationError) as exc_info:
            await session.submit()

        assert exc_info.value.field == "ssn"
        assert set(exc_info.value.errors) == {"ssn"}
        assert sent_updates(backend) == []

    async def test_null_value_rejected_without_backend_call(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.set_field("creditLimit", None)

        with pytest.raises(FieldValidationError) as exc_info:
            await session.submit()

        assert set(exc_info.value.errors) == {"creditLimit"}
        assert sent_updates(backend) == []
        assert session.closed is False

    async def test_validation_runs_before_change_check(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.set_field("ficoScore", 200)

        with pytest.raises(FieldValidationError) as exc_info:
            await session.submit()

        assert not isinstance(exc_info.value, NoChangesError)

    async def test_conflict(self, backend, upstream_client):
        backend.respond("PUT", UPDATE_PATH, status_code=409, json={"error": "stale"})
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.set_field("creditLimit", 7500)

        with pytest.raises(ConcurrentModificationError):
            await session.submit()

        assert session.closed is False

    async def test_customer_missing(self, backend, upstream_client):
        backend.respond("PUT", UPDATE_PATH, status_code=404, json={"error": "missing"})
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.set_field("lastName", "Smith")

        with pytest.raises(AccountNotFoundError) as exc_info:
            await session.submit()

        assert exc_info.value.detail == "Account or customer not found"


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:

    async def test_closed_after_submit(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.set_field("creditLimit", 7500)
        await session.submit()

        with pytest.raises(RuntimeError):
            session.set_field("creditLimit", 8000)
        with pytest.raises(RuntimeError):
            await session.submit()

    async def test_cancel_makes_no_call(self, backend, upstream_client):
        session = await EditSession.start(upstream_client, ACCOUNT_ID)
        session.set_field("creditLimit", 7500)

        session.cancel()

        assert session.closed is True
        assert sent_updates(backend) == []
        with pytest.raises(RuntimeError):
            await session.submit()
