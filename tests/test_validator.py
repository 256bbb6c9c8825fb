"""
Record Validator Tests

Tests for required-field, address and location rules.
"""

import pytest

from gymsync.errors import ValidationError
from gymsync.validator import (
    ADDRESS_ERROR,
    LOCATION_ERROR,
    RecordValidator,
    ensure_valid,
    validate_catalog,
    validate_record,
)


class TestRequiredFields:
    """Tests for the required-field rule."""

    def test_valid_record(self, sample_record):
        result = validate_record(sample_record)
        assert result.valid is True
        assert result.errors == []

    def test_missing_currency(self, sample_record):
        del sample_record["currency"]

        result = validate_record(sample_record)

        assert result.valid is False
        assert result.errors == ["Missing required fields: currency"]

    def test_missing_fields_listed_in_order(self, sample_record):
        for name in ("currency", "name", "region"):
            del sample_record[name]

        result = validate_record(sample_record)

        assert result.errors == ["Missing required fields: name, region, currency"]

    def test_empty_values_count_as_missing(self, sample_record):
        sample_record["name"] = ""
        sample_record["company"] = {}

        result = validate_record(sample_record)

        assert result.errors == ["Missing required fields: name, company"]

    def test_zero_id_counts_as_missing(self, sample_record):
        sample_record["id"] = 0

        result = validate_record(sample_record)

        assert result.errors == ["Missing required fields: id"]

    def test_empty_record(self):
        result = validate_record({})
        assert result.valid is False
        assert result.errors[0].startswith("Missing required fields: id, name, company")

    def test_custom_required_fields(self):
        validator = RecordValidator(required_fields=("id",))
        result = validator.validate({"id": 1, "address": {"street": "a", "city": "b", "postalCode": "c"}, "location": "DK"})
        assert result.valid is True


class TestStructuralRules:
    """Tests for the address and location rules."""

    def test_incomplete_address(self, sample_record):
        del sample_record["address"]["postalCode"]

        result = validate_record(sample_record)

        assert result.errors == [ADDRESS_ERROR]

    def test_address_not_an_object(self, sample_record):
        sample_record["address"] = "Vesterbrogade 149, 1620 København V"

        result = validate_record(sample_record)

        assert result.errors == [ADDRESS_ERROR]

    @pytest.mark.parametrize("location", ["dk", "DNK", "D", "D1", "Denmark", "DK\n", " DK"])
    def test_invalid_location(self, sample_record, location):
        sample_record["location"] = location

        result = validate_record(sample_record)

        assert result.valid is False
        assert result.errors == [LOCATION_ERROR]

    def test_non_string_location(self, sample_record):
        sample_record["location"] = 45

        assert validate_record(sample_record).errors == [LOCATION_ERROR]

    def test_at_most_one_error(self, sample_record):
        # Missing fields win over a bad location
        del sample_record["currency"]
        sample_record["location"] = "dk"

        result = validate_record(sample_record)

        assert result.errors == ["Missing required fields: currency"]

    def test_extra_fields_ignored(self, sample_record):
        sample_record["customField"] = {"anything": True}
        assert validate_record(sample_record).valid is True


class TestEnsureValid:
    """Tests for ensure_valid and validate_catalog."""

    def test_valid_record_passes(self, sample_record):
        ensure_valid(sample_record)

    def test_invalid_record_raises(self, sample_record):
        sample_record["location"] = "dk"

        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(sample_record)

        error = exc_info.value
        assert error.identifier == 1
        assert error.errors == [LOCATION_ERROR]
        assert error.to_dict()["error"] == "ValidationError"

    def test_validate_catalog_reports_positions(self, catalog):
        catalog[2]["location"] = "dk"
        del catalog[7]["currency"]

        invalid = validate_catalog(catalog)

        assert sorted(invalid) == [2, 7]
        assert invalid[2].errors == [LOCATION_ERROR]

    def test_builtin_catalog_is_valid(self, catalog):
        assert validate_catalog(catalog) == {}
