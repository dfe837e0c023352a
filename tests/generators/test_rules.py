"""Tests for protoweave.generators.rules."""

from __future__ import annotations

import pytest

from protoweave.generators import FilePattern, GenerationRule, PatternCase


def test_suffix_and_prefix_patterns() -> None:
    assert FilePattern.of_suffix("events.proto").matches("acme/orders_events.proto")
    assert not FilePattern.of_suffix("events.proto").matches("acme/events.proto.bak")
    assert FilePattern.of_prefix("acme/").matches("acme/orders.proto")
    assert not FilePattern.of_prefix("acme/").matches("other/acme/orders.proto")


def test_regex_pattern_must_match_the_whole_name() -> None:
    pattern = FilePattern.of_regex(r".*_events\.proto")

    assert pattern.matches("acme/orders_events.proto")
    assert not FilePattern.of_regex("events").matches("acme/orders_events.proto")


def test_unset_pattern_never_matches() -> None:
    pattern = FilePattern()

    assert pattern.case is PatternCase.VALUE_NOT_SET
    assert not pattern.matches("")
    assert not pattern.matches("acme/orders.proto")


def test_pattern_sets_a_single_kind() -> None:
    assert FilePattern(prefix="acme/").case is PatternCase.PREFIX
    with pytest.raises(ValueError):
        FilePattern(suffix=".proto", prefix="acme/")


@pytest.mark.parametrize("target", ["", "   ", "\t"])
def test_blank_targets(target: str) -> None:
    assert GenerationRule(FilePattern.of_suffix(".proto"), target).is_blank()


def test_rule_predicate_defaults_to_accepting() -> None:
    rule = GenerationRule(FilePattern.of_suffix(".proto"), "com.acme.Marker")

    assert not rule.is_blank()
    assert rule.accepts(object())  # type: ignore[arg-type]
