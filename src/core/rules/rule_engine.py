"""
Rule engine for validating sales records.

The rule engine applies the configured rules to a record in order,
collects failures, fills derived fields and annotates the record with the
outcome.
"""

from typing import Any, Callable

from src.core.models import RawRecord, ValidationResult, annotate, utc_timestamp
from src.core.rules.rule_config import sales_rules
from src.core.validators import (
    BaseValidator,
    DerivedFieldValidator,
    RequiredFieldValidator,
    TypeValidator,
    ValidationError,
)


class RuleEngine:
    """
    Orchestrates validation rules on records.

    Every enabled rule is evaluated, even after a failure, so that
    ``failed_rules`` lists every reason a record was rejected in rule order.
    Validation is a pure function of the record and the clock: the caller's
    mapping is never mutated.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "type_check": TypeValidator,
        "derived_field": DerivedFieldValidator,
    }

    def __init__(
        self,
        rules: list[dict[str, Any]] | None = None,
        clock: Callable[[], str] = utc_timestamp,
    ):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: List of rule configurations (defaults to the sales rule set), each containing:
                   - rule_name: str
                   - rule_type: str (required_field, type_check, derived_field)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - enabled: bool (default True)
            clock: Returns the processed_timestamp stamped on each record
        """
        self.rules = sales_rules() if rules is None else rules
        self.clock = clock
        self.validators: list[tuple[str, BaseValidator]] = []
        self._build_validators()

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]
            field_name = rule["field_name"]
            parameters = rule.get("parameters", {})

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(field_name, parameters)
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}") from e
            self.validators.append((rule_name, validator))

    def validate_record(self, record: RawRecord) -> ValidationResult:
        """
        Validate a record against all rules.

        Args:
            record: The raw record (column name -> scalar value)

        Returns:
            ValidationResult whose ``record`` is the annotated copy
        """
        passed_rules = []
        failed_rules = []
        transformations = []

        working = dict(record)

        for rule_name, validator in self.validators:
            value = working.get(validator.field_name)
            try:
                transformation = validator.validate(value, working)
            except ValidationError:
                failed_rules.append(rule_name)
                continue

            passed_rules.append(rule_name)
            if transformation:
                transformations.append(transformation)

        passed = len(failed_rules) == 0

        return ValidationResult(
            passed=passed,
            passed_rules=passed_rules,
            failed_rules=failed_rules,
            transformations_applied=transformations,
            record=annotate(working, passed, self.clock()),
        )

    def validate_batch(self, records: list[RawRecord]) -> list[ValidationResult]:
        """
        Validate a batch of records.

        Args:
            records: Raw records in row order

        Returns:
            List of ValidationResult objects, one per record, in the same order
        """
        return [self.validate_record(record) for record in records]

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and types
        """
        counts: dict[str, int] = {}
        for _, validator in self.validators:
            counts[validator.rule_type] = counts.get(validator.rule_type, 0) + 1
        return {
            "total_rules": len(self.validators),
            "rule_names": [name for name, _ in self.validators],
            "rules_by_type": counts,
        }


_default_engine: RuleEngine | None = None


def validate(record: RawRecord) -> tuple[bool, RawRecord]:
    """
    Validate one record with the sales rule set.

    Returns:
        (is_valid, annotated_record)
    """
    global _default_engine
    if _default_engine is None:
        _default_engine = RuleEngine()
    result = _default_engine.validate_record(record)
    return result.passed, result.record
