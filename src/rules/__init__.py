"""Rule catalog, configuration and scoring."""

from rules.catalog import RULE_CATALOG, RULES_BY_ID, Rule, RuleKind
from rules.config import (
    ComplianceConfig,
    ConfigError,
    ModuleDef,
    load_config,
)
from rules.engine import RuleEngine, RuleEvaluation
from rules.layers import ModuleLayer

__all__ = [
    "RULES_BY_ID",
    "RULE_CATALOG",
    "ComplianceConfig",
    "ConfigError",
    "ModuleDef",
    "ModuleLayer",
    "Rule",
    "RuleEngine",
    "RuleEvaluation",
    "RuleKind",
    "load_config",
]
