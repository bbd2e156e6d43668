"""
Validation rule engine and rule set configuration.
"""

from .rule_config import RuleConfigBuilder, sales_rules
from .rule_engine import RuleEngine, validate

__all__ = [
    "RuleEngine",
    "RuleConfigBuilder",
    "sales_rules",
    "validate",
]
