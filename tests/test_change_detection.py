"""Tests for partial-update change detection."""

from account_portal.change_detection import changed_fields, extract_changes, has_changes


class TestHasChanges:

    def test_same_value_is_not_a_change(self):
        assert has_changes({"creditLimit": 1000}, {"creditLimit": 1000}) is False

    def test_different_value_is_a_change(self):
        assert has_changes({"creditLimit": 1000}, {"creditLimit": 1200}) is True

    def test_comparison_is_by_value(self):
        assert has_changes({"creditLimit": 1000}, {"creditLimit": 1000.0}) is False
        assert has_changes({"tags": ["a"]}, {"tags": ["a"]}) is False

    def test_empty_candidate_has_no_changes(self):
        assert has_changes({"creditLimit": 1000}, {}) is False

    def test_fields_absent_from_candidate_are_ignored(self):
        original = {"creditLimit": 1000, "ficoScore": 700}
        assert has_changes(original, {"ficoScore": 700}) is False

    def test_key_missing_from_original_compares_as_none(self):
        assert has_changes({}, {"middleName": None}) is False
        assert has_changes({}, {"middleName": "Q"}) is True

    def test_clearing_a_value_is_a_change(self):
        assert has_changes({"middleName": "Q"}, {"middleName": ""}) is True


class TestChangedFields:

    def test_lists_only_differing_keys(self):
        original = {"creditLimit": 1000, "ficoScore": 700, "city": "Springfield"}
        candidate = {"creditLimit": 1000, "ficoScore": 720, "city": "Chicago"}
        assert changed_fields(original, candidate) == ["ficoScore", "city"]

    def test_extract_changes(self):
        original = {"creditLimit": 1000, "ficoScore": 700}
        candidate = {"creditLimit": 1000, "ficoScore": 720}
        assert extract_changes(original, candidate) == {"ficoScore": 720}
