"""
DerivedFieldValidator - fills a numeric field from the product of two others.
"""

import math
from typing import Any

from .base_validator import BaseValidator, ValidationError
from .coercion import is_numeric, to_number


class DerivedFieldValidator(BaseValidator):
    """
    Ensures a numeric field is present, deriving it when it is not.

    If the field is already numeric the record is left alone. Otherwise the
    field is overwritten with the product of the ``factors`` fields. When the
    factors cannot be coerced or their product overflows the float range,
    the rule fails and the record keeps its original value.

    Parameters:
    - factors: Two field names whose product fills the field
      (e.g., ["price", "quantity"] for subtotal)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.factors = list(self.parameters.get("factors") or [])
        if len(self.factors) != 2:
            raise ValueError("DerivedFieldValidator requires exactly two 'factors'")

    def validate(self, value: Any, record: dict[str, Any]) -> str | None:
        """
        Keep a numeric value or derive it from the factors.

        Args:
            value: The field value to validate
            record: Working copy of the record; updated in place when deriving

        Returns:
            The transformation name when the field was derived, else None

        Raises:
            ValidationError: If the factors cannot be coerced to numbers
                or their product is not finite
        """
        if is_numeric(value):
            return None

        left, right = (record.get(name) for name in self.factors)
        try:
            derived = to_number(left) * to_number(right)
        except ValueError as e:
            raise ValidationError(
                rule_name=self.rule_name,
                field_name=self.field_name,
                message=f"Cannot derive from {' x '.join(self.factors)}: {e}"
            )

        if not math.isfinite(derived):
            raise ValidationError(
                rule_name=self.rule_name,
                field_name=self.field_name,
                message=f"Product of {' x '.join(self.factors)} is out of range"
            )

        record[self.field_name] = derived
        return self.rule_name

    @property
    def rule_type(self) -> str:
        return "derived"
