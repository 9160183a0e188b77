"""
Built-in domain rule sets.
"""

from .branding import BRANDING_RULES
from .cine import CINE_RULES
from .devops import DEVOPS_RULES
from .general import (
    CONTEXT_RULE_ID,
    FORMATTING_RULES,
    GENERAL_RULES,
    OPTIMIZATION_RULES,
    POLISH_RULE,
    context_rules,
)
from .saas import SAAS_RULES
from .sql import SQL_RULES

DOMAIN_RULE_SETS = {
    rule_set.domain: rule_set
    for rule_set in (SQL_RULES, BRANDING_RULES, CINE_RULES, SAAS_RULES, DEVOPS_RULES, GENERAL_RULES)
}

__all__ = [
    "DOMAIN_RULE_SETS",
    "FORMATTING_RULES",
    "OPTIMIZATION_RULES",
    "POLISH_RULE",
    "CONTEXT_RULE_ID",
    "context_rules",
    "SQL_RULES",
    "BRANDING_RULES",
    "CINE_RULES",
    "SAAS_RULES",
    "DEVOPS_RULES",
    "GENERAL_RULES",
]
