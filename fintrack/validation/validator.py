"""
Transaction Field Validation

DESIGN DECISION: The pydantic input models define what a valid
transaction looks like; this module turns their failures into the
ledger's own ValidationError, with one ValidationIssue per offending
field so callers can point at exactly what was wrong.

IMPORTANT: Validation NEVER silently fixes issues. A negative amount is
rejected, not made absolute; an unknown type is rejected, not defaulted.
"""

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from fintrack.errors import ValidationError
from fintrack.models.transaction import (
    TransactionFields,
    TransactionPatch,
    ValidationIssue,
)


# pydantic error types folded into friendlier issue types
ISSUE_TYPES = {
    "missing": "missing",
    "greater_than_equal": "negative_value",
    "enum": "invalid_choice",
    "string_too_short": "empty",
    "string_too_long": "too_long",
    "decimal_parsing": "not_a_number",
    "decimal_type": "not_a_number",
    "finite_number": "not_a_number",
}


class TransactionValidator:
    """
    Validates caller supplied transaction fields.

    create payloads must be complete; update payloads are checked only for
    the fields they contain.
    """

    def _issues_from(self, error: PydanticValidationError) -> list[ValidationIssue]:
        issues = []
        for err in error.errors():
            loc = err.get("loc") or ("body",)
            field = str(loc[0])
            message = err.get("msg", "Invalid value")
            if err.get("type") == "value_error" and "null" in message:
                issue_type = "null_value"
            else:
                issue_type = ISSUE_TYPES.get(err.get("type", ""), "invalid_value")
            issues.append(ValidationIssue(
                field=field,
                issue_type=issue_type,
                message=message,
            ))
        return issues

    def _require_mapping(self, fields: Any) -> Mapping[str, Any]:
        if not isinstance(fields, Mapping):
            raise ValidationError([
                ValidationIssue(
                    field="body",
                    issue_type="invalid_value",
                    message="Transaction fields must be an object",
                ),
            ])
        return fields

    def validate_create(self, fields: Any) -> TransactionFields:
        """
        Validate a complete set of fields for a new transaction.

        Raises:
            ValidationError: naming every offending field
        """
        fields = self._require_mapping(fields)
        try:
            return TransactionFields.model_validate(dict(fields))
        except PydanticValidationError as e:
            raise ValidationError(self._issues_from(e))

    def validate_update(self, fields: Any) -> TransactionPatch:
        """
        Validate the fields present in a partial update.

        Raises:
            ValidationError: naming every offending field
        """
        fields = self._require_mapping(fields)
        try:
            return TransactionPatch.model_validate(dict(fields))
        except PydanticValidationError as e:
            raise ValidationError(self._issues_from(e))
