"""
Validation rule implementations.

Provides field coercion checks and the validators for required fields,
semantic types and derived fields.
"""

from .base_validator import BaseValidator, ValidationError
from .coercion import is_iso_timestamp, is_numeric, to_number
from .derived_field_validator import DerivedFieldValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "TypeValidator",
    "DerivedFieldValidator",
    "is_numeric",
    "is_iso_timestamp",
    "to_number",
]
