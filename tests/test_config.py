"""Tests for configuration parsing, overrides and registry building."""

import pytest

from lintkit.config import (
    DEFAULT_RULES,
    Config,
    apply_overrides,
    build_registry,
    get_default_config,
    get_enabled_rules,
    parse_rule_entry,
)
from lintkit.errors import ConfigError
from lintkit.findings.models import Severity


@pytest.mark.parametrize(
    "entry, severity, options",
    [
        ("warn", Severity.WARN, None),
        (2, Severity.ERROR, None),
        (["error"], Severity.ERROR, None),
        (["warn", "allow-null"], Severity.WARN, "allow-null"),
        (("off", {"mode": "always"}), Severity.OFF, {"mode": "always"}),
        (["error", "event", "name"], Severity.ERROR, ["event", "name"]),
    ],
)
def test_parse_rule_entry(entry, severity, options):
    assert parse_rule_entry(entry) == (severity, options)


@pytest.mark.parametrize("entry", [[], ["loud", {}], "loud"])
def test_parse_rule_entry_rejects_bad_entries(entry):
    with pytest.raises(ConfigError):
        parse_rule_entry(entry)


def test_default_config_enables_every_builtin_rule():
    active = get_enabled_rules(get_default_config())
    assert {a.id for a in active} == set(DEFAULT_RULES)
    by_id = {a.id: a for a in active}
    assert by_id["new-parens"].severity is Severity.ERROR
    assert by_id["no-var"].severity is Severity.WARN
    assert by_id["eqeqeq"].options.mode == "allow-null"
    assert by_id["no-unused-vars"].options.ignore_rest_siblings
    assert "event" in {g.name for g in by_id["no-restricted-globals"].options.globals}


def test_overrides_take_precedence_and_keep_options():
    config = apply_overrides(get_default_config(), ["eqeqeq=error", "no-var=off"])
    registry = build_registry(config)
    assert registry.severity_of("eqeqeq") is Severity.ERROR
    assert registry.severity_of("no-var") is Severity.OFF
    eqeqeq = next(a for a in registry.active_rules() if a.id == "eqeqeq")
    assert eqeqeq.options.mode == "allow-null"


def test_overrides_do_not_mutate_original():
    config = get_default_config()
    apply_overrides(config, ["no-var=error"])
    assert config.rules["no-var"] == "warn"


@pytest.mark.parametrize("override", ["no-var", "=warn", "no-var=loud"])
def test_bad_override_rejected(override):
    with pytest.raises(ConfigError):
        apply_overrides(get_default_config(), [override])


def test_unknown_rule_in_config_fails_at_build():
    with pytest.raises(ConfigError, match="Unknown rule"):
        build_registry(Config(rules={"no-such-rule": "warn"}))


def test_build_registry_freezes():
    assert build_registry(Config(rules={"no-var": "warn"})).frozen


@pytest.mark.parametrize("kwargs", [{"jobs": 0}, {"fix_passes": 0}])
def test_config_rejects_non_positive_limits(kwargs):
    with pytest.raises(ConfigError):
        Config(**kwargs)
