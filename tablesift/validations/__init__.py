"""
Validation passes: contextual and cross-field checks, built-in checks and
user-defined custom rules.
"""

from .builtin_checks import BUILTIN_RULES, DuplicateRowCheck, NullValueCheck
from .contextual_validator import ContextualValidator
from .cross_field_validator import CrossFieldValidator
from .custom_rules import CustomRule, CustomRuleEngine, InMemoryRuleRepository, RuleSet
from .rule_matcher import KeywordRuleMatcher, RuleMatcher

__all__ = [
    'BUILTIN_RULES',
    'ContextualValidator',
    'CrossFieldValidator',
    'CustomRule',
    'CustomRuleEngine',
    'DuplicateRowCheck',
    'InMemoryRuleRepository',
    'KeywordRuleMatcher',
    'NullValueCheck',
    'RuleMatcher',
    'RuleSet',
]
