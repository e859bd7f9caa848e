from __future__ import annotations

"""
Lint configuration: which rules run, at what severity, with which options.

Rule entries use ESLint's shapes so an existing .eslintrc rules block can be
pasted in as a dict:

    "no-var": "warn"
    "eqeqeq": ["warn", "allow-null"]
    "default-case": ["warn", {"commentPattern": "^no default$"}]
    "no-restricted-globals": ["error", "event", "name"]
    "no-eval": 0

Entries past the severity are handed to the rule as one options value; a
single extra element is passed as is, several are passed as a list.

Precedence, lowest first: get_default_config() < Config.rules passed by the
caller < apply_overrides() (the CLI's --rule flags).
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional, Sequence

from lintkit.errors import ConfigError
from lintkit.findings.models import Severity
from lintkit.rules.base import ActiveRule
from lintkit.rules.no_restricted_globals import CONFUSING_BROWSER_GLOBALS
from lintkit.rules.registry import RuleRegistry, parse_severity

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: frozenset[str] = frozenset({".js", ".jsx", ".mjs", ".cjs"})

# Severities from the project's .eslintrc for the rules implemented here
DEFAULT_RULES: dict[str, Any] = {
    "default-case": ["warn", {"commentPattern": "^no default$"}],
    "eqeqeq": ["warn", "allow-null"],
    "new-parens": "error",
    "no-caller": "warn",
    "no-cond-assign": "error",
    "no-empty-pattern": "warn",
    "no-eval": "warn",
    "no-extra-semi": "warn",
    "no-restricted-globals": ["error", *CONFUSING_BROWSER_GLOBALS],
    "no-self-compare": "warn",
    "no-unreachable": "warn",
    "no-unused-vars": ["warn", {"args": "none", "ignoreRestSiblings": True}],
    "no-useless-computed-key": "warn",
    "no-var": "warn",
    "no-whitespace-before-property": "warn",
}


@dataclass
class Config:
    """
    Linter configuration.

    fix_passes bounds the fix/re-lint loop: 1 (default) applies fixes once
    and reports what remains; higher values keep going until nothing changes.
    """

    rules: dict[str, Any] = field(default_factory=dict)
    extensions: frozenset[str] = DEFAULT_EXTENSIONS
    ignore_dirs: Optional[set[str]] = None
    jobs: int = 1
    fix_passes: int = 1

    def __post_init__(self) -> None:
        if self.jobs < 1:
            raise ConfigError(f"jobs must be at least 1, got {self.jobs}")
        if self.fix_passes < 1:
            raise ConfigError(f"fix_passes must be at least 1, got {self.fix_passes}")


def get_default_config() -> Config:
    """Return the default configuration with every built-in rule at its project severity."""
    return Config(rules=dict(DEFAULT_RULES))


def parse_rule_entry(entry: Any) -> tuple[Severity, Any]:
    """Split an ESLint-style rule entry into (severity, options)."""
    if isinstance(entry, (list, tuple)):
        if not entry:
            raise ConfigError("Empty rule entry")
        severity = parse_severity(entry[0])
        if len(entry) == 1:
            return severity, None
        if len(entry) == 2:
            return severity, entry[1]
        return severity, list(entry[1:])
    return parse_severity(entry), None


def apply_overrides(config: Config, overrides: Iterable[str]) -> Config:
    """
    Layer "rule-id=severity" strings on top of config.

    Options already configured for a rule are kept; only the severity changes.
    """
    rules = dict(config.rules)
    for item in overrides:
        rule_id, sep, level = item.partition("=")
        rule_id = rule_id.strip()
        if not sep or not rule_id:
            raise ConfigError(f"Expected RULE=SEVERITY, got {item!r}")
        severity = parse_severity(level)
        current = rules.get(rule_id)
        if isinstance(current, (list, tuple)) and len(current) > 1:
            rules[rule_id] = [severity.value, *current[1:]]
        else:
            rules[rule_id] = severity.value
        logger.debug("Override: %s=%s", rule_id, severity.value)
    return replace(config, rules=rules)


def build_registry(config: Optional[Config] = None, registry: Optional[RuleRegistry] = None) -> RuleRegistry:
    """
    Register every rule in config and freeze the result.

    Raises ConfigError before any file is touched if an entry is invalid.
    """
    if config is None:
        config = get_default_config()
    if registry is None:
        registry = RuleRegistry()
    for rule_id, entry in config.rules.items():
        severity, options = parse_rule_entry(entry)
        registry.register(rule_id, severity, options)
    logger.debug("Registry built: %d rule(s), %d active", len(registry), len(registry.active_rules()))
    return registry.freeze()


def get_enabled_rules(config: Optional[Config] = None) -> Sequence[ActiveRule]:
    """Return the active rules of config (or the default config)."""
    return build_registry(config).active_rules()
