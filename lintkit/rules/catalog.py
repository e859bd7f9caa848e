# Built-in rule catalog: every rule the engine knows, keyed by rule id.

from __future__ import annotations

from lintkit.rules.base import Rule
from lintkit.rules.default_case import DefaultCaseRule
from lintkit.rules.eqeqeq import EqeqeqRule
from lintkit.rules.new_parens import NewParensRule
from lintkit.rules.no_caller import NoCallerRule
from lintkit.rules.no_cond_assign import NoCondAssignRule
from lintkit.rules.no_empty_pattern import NoEmptyPatternRule
from lintkit.rules.no_eval import NoEvalRule
from lintkit.rules.no_extra_semi import NoExtraSemiRule
from lintkit.rules.no_restricted_globals import NoRestrictedGlobalsRule
from lintkit.rules.no_self_compare import NoSelfCompareRule
from lintkit.rules.no_unreachable import NoUnreachableRule
from lintkit.rules.no_unused_vars import NoUnusedVarsRule
from lintkit.rules.no_useless_computed_key import NoUselessComputedKeyRule
from lintkit.rules.no_var import NoVarRule
from lintkit.rules.no_whitespace_before_property import NoWhitespaceBeforePropertyRule

BUILTIN_RULES: tuple[type[Rule], ...] = (
    DefaultCaseRule,
    EqeqeqRule,
    NewParensRule,
    NoCallerRule,
    NoCondAssignRule,
    NoEmptyPatternRule,
    NoEvalRule,
    NoExtraSemiRule,
    NoRestrictedGlobalsRule,
    NoSelfCompareRule,
    NoUnreachableRule,
    NoUnusedVarsRule,
    NoUselessComputedKeyRule,
    NoVarRule,
    NoWhitespaceBeforePropertyRule,
)


def builtin_catalog() -> dict[str, Rule]:
    """Return a fresh rule id -> rule instance mapping of all built-in rules."""
    return {cls.id: cls() for cls in BUILTIN_RULES}
