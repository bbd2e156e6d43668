"""
RequiredFieldValidator - ensures a field is present and not null/empty.
"""

from typing import Any, Dict
from .base_validator import BaseValidator, ValidationError


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present and not null/empty.

    Fails if:
    - Field is missing from the record
    - Field value is None
    - Field value is an empty string (whitespace-only counts as empty unless
      ``strip_whitespace`` is disabled)

    Non-string values such as 0 or False are present, not empty.
    """

    def __init__(self, field_name: str, parameters: Dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.strip_whitespace = self.parameters.get("strip_whitespace", True)

    def validate(self, value: Any, record: Dict[str, Any]) -> None:
        """
        Validate that the field is present and not null/empty.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If field is missing, None, or empty string
        """
        if self.field_name not in record:
            raise ValidationError(
                rule_name=self.rule_name,
                field_name=self.field_name,
                message="Field is missing from record"
            )

        if value is None:
            raise ValidationError(
                rule_name=self.rule_name,
                field_name=self.field_name,
                message="Field value is null"
            )

        if isinstance(value, str):
            text = value.strip() if self.strip_whitespace else value
            if text == "":
                raise ValidationError(
                    rule_name=self.rule_name,
                    field_name=self.field_name,
                    message="Field value is empty string"
                )
        return None

    @property
    def rule_type(self) -> str:
        return "required"
