"""
Rule configuration.

The sales rule set is fixed; RuleConfigBuilder assembles it (and ad-hoc rule
sets in tests) in evaluation order.
"""

from typing import Any


class RuleConfigBuilder:
    """
    Programmatically build rule configurations.

    Rules are evaluated in the order they are added.
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []

    def add_required_field(self, field_name: str, strip_whitespace: bool = True) -> "RuleConfigBuilder":
        """Add a required field rule."""
        self.rules.append({
            "rule_name": f"{field_name}_required",
            "rule_type": "required_field",
            "field_name": field_name,
            "parameters": {"strip_whitespace": strip_whitespace},
            "enabled": True,
        })
        return self

    def add_type_check(self, field_name: str, expected_type: str) -> "RuleConfigBuilder":
        """Add a semantic type check rule ("numeric" or "iso_timestamp")."""
        self.rules.append({
            "rule_name": f"{field_name}_{expected_type}",
            "rule_type": "type_check",
            "field_name": field_name,
            "parameters": {"expected_type": expected_type},
            "enabled": True,
        })
        return self

    def add_derived_field(self, field_name: str, factors: list[str]) -> "RuleConfigBuilder":
        """Add a rule that fills a non-numeric field with the product of ``factors``."""
        self.rules.append({
            "rule_name": f"{field_name}_derived",
            "rule_type": "derived_field",
            "field_name": field_name,
            "parameters": {"factors": list(factors)},
            "enabled": True,
        })
        return self

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules


def sales_rules() -> list[dict[str, Any]]:
    """
    The fixed rule set for sales transaction records.

    A record is valid iff every rule passes.
    """
    return RuleConfigBuilder() \
        .add_required_field("transaction_id") \
        .add_type_check("transaction_date", "iso_timestamp") \
        .add_type_check("price", "numeric") \
        .add_type_check("quantity", "numeric") \
        .add_required_field("email") \
        .add_derived_field("subtotal", ["price", "quantity"]) \
        .build()
