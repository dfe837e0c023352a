"""Tests for assembling generators from configuration."""

from __future__ import annotations

import pytest

from protoweave.config import GeneratorsConfig, ProtoweaveConfig
from protoweave.generators import (
    BuilderGenerator,
    FilePattern,
    GenerationRule,
    InterfaceGenerator,
    MethodGenerator,
    NestedClassGenerator,
    build_generator,
)
from protoweave.types import MessageType


def test_all_generators_are_enabled_by_default() -> None:
    composite = build_generator(ProtoweaveConfig())

    assert [type(generator) for generator in composite.generators] == [
        InterfaceGenerator,
        MethodGenerator,
        NestedClassGenerator,
        BuilderGenerator,
    ]


def test_enabled_generators_narrow_the_composite() -> None:
    config = ProtoweaveConfig(generators=GeneratorsConfig(enabled=["Builders", "interfaces"]))

    composite = build_generator(config)

    assert [generator.name for generator in composite.generators] == ["interfaces", "builders"]


def test_unknown_generators_are_rejected() -> None:
    config = ProtoweaveConfig(generators=GeneratorsConfig(enabled=["interfaces", "getters"]))

    with pytest.raises(ValueError, match="getters"):
        build_generator(config)


def test_composite_runs_configured_rules(order_placed: MessageType) -> None:
    config = ProtoweaveConfig(
        interfaces=[GenerationRule(FilePattern.of_suffix("events.proto"), "com.acme.EventMarker")],
        builders=[GenerationRule(FilePattern.of_suffix("events.proto"), "com.acme.EventBuilder")],
    )

    fragments = build_generator(config).generate(order_placed)

    assert [(fragment.insertion_point, fragment.content) for fragment in fragments] == [
        ("message_implements:com.acme.OrderPlaced", "com.acme.EventMarker,"),
        ("builder_implements:com.acme.OrderPlaced", "com.acme.EventBuilder,"),
    ]
