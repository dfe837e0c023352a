"""Configuration loading for protoweave.

The protoc plugin receives its configuration through a side channel: the request
``parameter`` carries the Base64-encoded path of a YAML file.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .generators.rules import FilePattern, GenerationRule
from .logging import get_logger
from .types.typeset import TypeUrlPrefixes
from .types.url import Prefix

LOGGER = get_logger("config")

RULE_SECTIONS = ("interfaces", "methods", "nested_classes", "builders")

_PATTERN_KEYS = {"suffix": "suffix", "postfix": "suffix", "prefix": "prefix", "regex": "regex"}


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be read or parsed."""


@dataclass
class UuidConfig:
    """What to generate for messages holding a single string ``uuid`` field."""

    interface: Optional[str] = None
    methods: List[str] = field(default_factory=list)


@dataclass
class OptionNames:
    """Full names of the message and file options naming implemented interfaces."""

    is_option: str = "spine.is"
    every_is_option: str = "spine.every_is"


@dataclass
class GeneratorsConfig:
    """Generator enablement; ``None`` enables every registered generator."""

    enabled: Optional[List[str]] = None


@dataclass
class ProtoweaveConfig:
    """Represents the settings of a single plugin invocation."""

    type_url_prefix: str = Prefix.GOOGLE_APIS.value
    type_url_prefixes: Dict[str, str] = field(default_factory=dict)
    interfaces: List[GenerationRule] = field(default_factory=list)
    methods: List[GenerationRule] = field(default_factory=list)
    nested_classes: List[GenerationRule] = field(default_factory=list)
    builders: List[GenerationRule] = field(default_factory=list)
    uuids: UuidConfig = field(default_factory=UuidConfig)
    options: OptionNames = field(default_factory=OptionNames)
    generators: GeneratorsConfig = field(default_factory=GeneratorsConfig)
    templates_dir: Optional[Path] = None
    source: Optional[Path] = None

    def prefixes(self) -> TypeUrlPrefixes:
        return TypeUrlPrefixes(self.type_url_prefix, self.type_url_prefixes)


def load_config(config_path: Path, *, required: bool = False) -> ProtoweaveConfig:
    """Load configuration from disk.

    A missing file yields the defaults unless ``required`` is set.
    """
    config_file = config_path.expanduser()
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file {config_file} does not exist")
        return ProtoweaveConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = ProtoweaveConfig(source=config_file.resolve())

    prefix = _as_str(data.get("type_url_prefix"))
    if prefix is not None:
        if not prefix.strip() or "/" in prefix:
            raise ConfigError(f"Invalid type URL prefix `{prefix}`")
        config.type_url_prefix = prefix
    config.type_url_prefixes = {
        str(name): str(value) for name, value in _as_dict(data.get("type_url_prefixes")).items()
    }

    for section in RULE_SECTIONS:
        setattr(config, section, _parse_rules(data.get(section), section))

    uuid_data = _as_dict(data.get("uuids"))
    if uuid_data:
        config.uuids = UuidConfig(
            interface=_as_str(uuid_data.get("interface")),
            methods=_as_str_list(uuid_data.get("methods")),
        )

    option_data = _as_dict(data.get("options"))
    if option_data:
        config.options = OptionNames(
            is_option=_as_str(option_data.get("is")) or OptionNames.is_option,
            every_is_option=_as_str(option_data.get("every_is")) or OptionNames.every_is_option,
        )

    generator_data = _as_dict(data.get("generators"))
    if "enabled" in generator_data:
        config.generators.enabled = _as_str_list(generator_data.get("enabled"))

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        config.templates_dir = config_file.parent.resolve() / templates_dir

    return config


def decode_parameter(parameter: str) -> Optional[Path]:
    """Decode the plugin parameter into the path of a configuration file.

    An empty parameter means no configuration was passed.
    """
    if not parameter or not parameter.strip():
        return None
    try:
        decoded = base64.b64decode(parameter.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ConfigError(f"Plugin parameter is not a Base64-encoded path: {exc}") from exc
    if not decoded.strip():
        raise ConfigError("Plugin parameter decodes to an empty path")
    return Path(decoded)


def encode_parameter(path: Path) -> str:
    """Encode ``path`` the way ``decode_parameter`` expects it."""
    return base64.b64encode(str(path).encode("utf-8")).decode("ascii")


def config_from_parameter(parameter: str) -> ProtoweaveConfig:
    path = decode_parameter(parameter)
    if path is None:
        return ProtoweaveConfig()
    LOGGER.debug("Reading configuration from %s", path)
    return load_config(path, required=True)


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _parse_rules(value: Any, section: str) -> List[GenerationRule]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"`{section}` must be a list of rules")
    rules: List[GenerationRule] = []
    for position, item in enumerate(value):
        where = f"{section}[{position}]"
        if not isinstance(item, dict):
            raise ConfigError(f"{where} must be a mapping")
        rules.append(
            GenerationRule(
                pattern=_parse_pattern(item.get("pattern"), where),
                target=_as_str(item.get("target")) or "",
                generate=_as_bool(item.get("generate")) or False,
            )
        )
    return rules


def _parse_pattern(value: Any, where: str) -> FilePattern:
    if value is None:
        LOGGER.warning("%s has no file pattern and never matches", where)
        return FilePattern()
    if not isinstance(value, dict):
        raise ConfigError(f"{where}.pattern must be a mapping")
    selected: Dict[str, str] = {}
    for key, raw in value.items():
        kind = _PATTERN_KEYS.get(str(key))
        if kind is None:
            raise ConfigError(f"{where}.pattern has unknown key `{key}`")
        text = _as_str(raw)
        if text is None:
            raise ConfigError(f"{where}.pattern.{key} must be a string")
        if kind in selected:
            raise ConfigError(f"{where}.pattern sets `{kind}` twice")
        selected[kind] = text
    if len(selected) > 1:
        raise ConfigError(f"{where}.pattern must set only one of suffix, prefix or regex")
    if not selected:
        LOGGER.warning("%s has an empty file pattern and never matches", where)
        return FilePattern()
    if "regex" in selected:
        try:
            re.compile(selected["regex"])
        except re.error as exc:
            raise ConfigError(f"{where}.pattern.regex is invalid: {exc}") from exc
    return FilePattern(**selected)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "ConfigError",
    "GeneratorsConfig",
    "OptionNames",
    "ProtoweaveConfig",
    "UuidConfig",
    "config_from_parameter",
    "decode_parameter",
    "encode_parameter",
    "load_config",
]
