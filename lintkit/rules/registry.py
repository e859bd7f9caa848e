# Rule registry: per-run mapping of rule id -> configured severity and options.

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from lintkit.errors import ConfigError
from lintkit.findings.models import Severity
from lintkit.rules.base import ActiveRule, Rule

logger = logging.getLogger(__name__)

# ESLint numeric severities
_NUMERIC_SEVERITY = {0: Severity.OFF, 1: Severity.WARN, 2: Severity.ERROR}


def parse_severity(value: Union[str, int, Severity]) -> Severity:
    """Accept "off"/"warn"/"error", "warning", or ESLint's 0/1/2."""
    if isinstance(value, Severity):
        return value
    if isinstance(value, bool):
        raise ConfigError(f"Invalid severity: {value!r}")
    if isinstance(value, int):
        if value in _NUMERIC_SEVERITY:
            return _NUMERIC_SEVERITY[value]
        raise ConfigError(f"Invalid severity: {value!r} (expected 0, 1 or 2)")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "warning":
            normalized = "warn"
        if normalized.isdigit():
            return parse_severity(int(normalized))
        try:
            return Severity(normalized)
        except ValueError:
            pass
    raise ConfigError(f"Invalid severity: {value!r} (expected off, warn or error)")


class RuleRegistry:
    """
    Configured rules for one run.

    Each run owns its own registry, so runs with different configurations can
    proceed side by side. Once frozen it is read-only and safe to share between
    worker threads.
    """

    def __init__(self, catalog: Optional[Mapping[str, Rule]] = None) -> None:
        if catalog is None:
            from lintkit.rules.catalog import builtin_catalog

            catalog = builtin_catalog()
        self._catalog = dict(catalog)
        self._entries: dict[str, ActiveRule] = {}
        self._frozen = False

    @property
    def catalog(self) -> Mapping[str, Rule]:
        return self._catalog

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, rule_id: str, severity: Union[str, int, Severity], options: Any = None) -> None:
        """
        Add or replace the configuration of rule_id (last write wins).

        Raises ConfigError for an unknown rule, a bad severity, options that
        fail the rule's schema, or a frozen registry.
        """
        if self._frozen:
            raise ConfigError(f"Cannot register '{rule_id}': registry is frozen")
        rule = self._catalog.get(rule_id)
        if rule is None:
            raise ConfigError(f"Unknown rule '{rule_id}'")
        level = parse_severity(severity)
        validated = rule.validate_options(options)
        if rule_id in self._entries:
            logger.debug("Overriding configuration for rule %s", rule_id)
        self._entries[rule_id] = ActiveRule(rule=rule, severity=level, options=validated)

    def severity_of(self, rule_id: str) -> Severity:
        entry = self._entries.get(rule_id)
        return entry.severity if entry else Severity.OFF

    def active_rules(self) -> list[ActiveRule]:
        """Rules with severity other than off, in registration order."""
        return [e for e in self._entries.values() if e.severity is not Severity.OFF]

    def freeze(self) -> "RuleRegistry":
        self._frozen = True
        return self

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
