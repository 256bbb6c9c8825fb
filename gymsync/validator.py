"""
Record validator for business units.

Checks a candidate record against required-field and structural rules
before it is sent. Pure: no I/O.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from .errors import ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "id",
    "name",
    "company",
    "companyNameForInvoice",
    "address",
    "location",
    "region",
    "currency",
)

REQUIRED_ADDRESS_FIELDS = ("street", "city", "postalCode")

ADDRESS_ERROR = "Address must include street, city, and postalCode"
LOCATION_ERROR = "Location must be a valid ISO 3166-1 alpha-2 country code"


@dataclass
class ValidationResult:
    """Result of validating one record."""
    valid: bool = True
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


class RecordValidator:
    """Validate business unit records.

    Rule classes run in order and stop at the first one that fails, so a
    result carries at most one error.
    """

    LOCATION_PATTERN = re.compile(r"[A-Z]{2}")

    def __init__(self, required_fields: Iterable[str] = REQUIRED_FIELDS):
        self.required_fields = tuple(required_fields)

    def validate(self, record: dict[str, Any]) -> ValidationResult:
        """Validate a single record."""
        missing = [name for name in self.required_fields if not record.get(name)]
        if missing:
            return ValidationResult(
                valid=False,
                errors=[f"Missing required fields: {', '.join(missing)}"],
            )

        address = record["address"]
        if not isinstance(address, dict) or not all(
            address.get(name) for name in REQUIRED_ADDRESS_FIELDS
        ):
            return ValidationResult(valid=False, errors=[ADDRESS_ERROR])

        location = record["location"]
        if not isinstance(location, str) or not self.LOCATION_PATTERN.fullmatch(location):
            return ValidationResult(valid=False, errors=[LOCATION_ERROR])

        return ValidationResult(valid=True, errors=[])


_default_validator = RecordValidator()


def validate_record(record: dict[str, Any]) -> ValidationResult:
    """Convenience function to validate a record with the default rules."""
    return _default_validator.validate(record)


def ensure_valid(record: dict[str, Any]) -> None:
    """Raise ValidationError if the record is not eligible for submission."""
    result = validate_record(record)
    if not result.valid:
        identifier = record.get("id")
        raise ValidationError(
            f"Record {identifier!r} is invalid: {'; '.join(result.errors)}",
            identifier=identifier,
            errors=result.errors,
        )


def validate_catalog(records: Iterable[dict[str, Any]]) -> dict[int, ValidationResult]:
    """Validate many records; returns the failing results keyed by position."""
    invalid = {}
    for index, record in enumerate(records):
        result = validate_record(record)
        if not result.valid:
            logger.debug(f"Record at position {index} invalid: {result.errors}")
            invalid[index] = result
    return invalid
