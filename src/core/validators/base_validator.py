"""
Base validator interface for all validation rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a validation rule fails. Caught by the rule engine, never propagated."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements a specific rule type
    (required, numeric, iso_timestamp, derived).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule-specific parameters
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @property
    def rule_name(self) -> str:
        """Stable name reported in ValidationResult.passed_rules / failed_rules."""
        return f"{self.field_name}_{self.rule_type}"

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> str | None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate
            record: The working copy of the record (may be updated by derived-field rules)

        Returns:
            Name of the transformation applied to the record, if any

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
