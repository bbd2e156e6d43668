"""
ValidationResult model representing the outcome of validating a record (ephemeral).
"""

from typing import Any, List

from pydantic import BaseModel, Field, field_validator


class ValidationResult(BaseModel):
    """
    Outcome of validating a record (ephemeral, used during processing).

    Attributes:
        passed: Overall validation status
        passed_rules: Rules that succeeded, in evaluation order
        failed_rules: Rules that failed, in evaluation order
        transformations_applied: Derived-field fills (e.g., "subtotal_derived")
        record: The annotated record (original fields plus is_valid and processed_timestamp)
    """

    passed: bool
    passed_rules: List[str] = Field(default_factory=list)
    failed_rules: List[str] = Field(default_factory=list)
    transformations_applied: List[str] = Field(default_factory=list)
    record: dict[str, Any] = Field(default_factory=dict)

    @field_validator('failed_rules')
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies failed_rules is empty."""
        if info.data.get('passed') and len(v) > 0:
            raise ValueError("passed=True but failed_rules is not empty")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "passed": True,
                "passed_rules": [
                    "transaction_id_required",
                    "transaction_date_iso_timestamp",
                    "price_numeric",
                    "quantity_numeric",
                    "email_required",
                    "subtotal_derived"
                ],
                "failed_rules": [],
                "transformations_applied": ["subtotal_derived"],
                "record": {
                    "transaction_id": "T-1001",
                    "transaction_date": "2024-01-15T10:30:00Z",
                    "price": "3.33",
                    "quantity": "3",
                    "email": "buyer@example.com",
                    "subtotal": 9.99,
                    "order_type": "S",
                    "is_valid": True,
                    "processed_timestamp": "2024-01-15T10:31:02.118Z"
                }
            }
        }
