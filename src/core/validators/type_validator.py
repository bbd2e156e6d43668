"""
TypeValidator - validates that a field holds a value of a semantic type.
"""

from typing import Any

from .base_validator import BaseValidator, ValidationError
from .coercion import is_iso_timestamp, is_numeric


class TypeValidator(BaseValidator):
    """
    Validates that a field matches the expected semantic type.

    Values are not converted; the check only asks whether coercion would
    succeed (e.g., "99.99" is a valid decimal).

    Supported types:
    - "numeric" (aliases: "decimal", "float", "number")
    - "iso_timestamp" (aliases: "timestamp", "datetime")

    A missing or null value fails the check.
    """

    TYPE_MAPPING = {
        "numeric": "numeric",
        "decimal": "numeric",
        "float": "numeric",
        "number": "numeric",
        "iso_timestamp": "iso_timestamp",
        "timestamp": "iso_timestamp",
        "datetime": "iso_timestamp",
    }

    CHECKS = {
        "numeric": is_numeric,
        "iso_timestamp": is_iso_timestamp,
    }

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        expected_type = self.parameters.get("expected_type")
        if not expected_type:
            raise ValueError("TypeValidator requires 'expected_type' parameter")

        self.expected_type = self.TYPE_MAPPING.get(str(expected_type).lower())
        if not self.expected_type:
            raise ValueError(f"Unsupported type: {expected_type}")

        self._check = self.CHECKS[self.expected_type]

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate that the value matches the expected type.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If type validation fails
        """
        if value is None:
            raise ValidationError(
                rule_name=self.rule_name,
                field_name=self.field_name,
                message=f"Field is missing, expected {self.expected_type}"
            )

        if not self._check(value):
            raise ValidationError(
                rule_name=self.rule_name,
                field_name=self.field_name,
                message=f"Expected {self.expected_type}, got {value!r}"
            )
        return None

    @property
    def rule_type(self) -> str:
        return self.expected_type
