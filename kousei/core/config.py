"""
Configuration Module

Immutable linter configuration: which rules are enabled, their options and
the file extensions they apply to. Configurations are validated when they are
constructed, so a LinterConfig that exists is always usable.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)


def _known_rule_ids() -> FrozenSet[str]:
    from ..rules.registry import RULE_CLASSES
    return frozenset(RULE_CLASSES)


def freeze(value: Any) -> Any:
    """Read-only copy of an option value: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Plain JSON-ready copy of a frozen option value."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith('.'):
        extension = '.' + extension
    return extension


@dataclass(frozen=True)
class RuleSettings:
    """Per-rule settings."""
    enabled: bool = True
    options: Mapping[str, Any] = field(default_factory=dict)
    extensions: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.enabled, bool):
            raise ConfigError(f"'enabled' must be a boolean, got {self.enabled!r}")
        if not isinstance(self.options, Mapping):
            raise ConfigError(f"'options' must be a mapping, got {type(self.options).__name__}")
        if isinstance(self.extensions, str) or not all(isinstance(e, str) for e in self.extensions):
            raise ConfigError(f"'extensions' must be a list of strings, got {self.extensions!r}")
        object.__setattr__(self, 'options', freeze(self.options))
        object.__setattr__(self, 'extensions', tuple(_normalize_extension(e) for e in self.extensions))

    def applies_to(self, extension: Optional[str]) -> bool:
        """Whether the rule runs on documents with this extension."""
        if not self.extensions or not extension:
            return True
        return _normalize_extension(extension) in self.extensions

    @classmethod
    def from_value(cls, value: Union[bool, Mapping[str, Any]]) -> "RuleSettings":
        """Build settings from `true`/`false` or an {enabled, options, extensions} mapping."""
        if isinstance(value, bool):
            return cls(enabled=value)
        if not isinstance(value, Mapping):
            raise ConfigError(f"Rule settings must be a boolean or a mapping, got {value!r}")
        unknown = set(value) - {'enabled', 'options', 'extensions'}
        if unknown:
            raise ConfigError(f"Unknown rule setting(s): {', '.join(sorted(unknown))}")
        return cls(
            enabled=value.get('enabled', True),
            options=value.get('options') or {},
            extensions=value.get('extensions') or ()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'options': thaw(self.options),
            'extensions': list(self.extensions),
        }


DEFAULT_RULE_SETTINGS = RuleSettings()


@dataclass(frozen=True)
class LinterConfig:
    """
    Linter configuration.

    Rules that are not mentioned keep their default settings (enabled, no
    options, every extension).
    """
    rules: Mapping[str, RuleSettings] = field(default_factory=dict)
    max_workers: int = 1
    keep_partial_output: bool = False

    def __post_init__(self):
        known = _known_rule_ids()
        unknown = [rule_id for rule_id in self.rules if rule_id not in known]
        if unknown:
            raise ConfigError(f"Unknown rule id(s): {', '.join(sorted(unknown))}")
        for rule_id, settings in self.rules.items():
            if not isinstance(settings, RuleSettings):
                raise ConfigError(f"Settings for '{rule_id}' must be RuleSettings")
        if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ConfigError(f"'max_workers' must be a positive integer, got {self.max_workers!r}")
        if not isinstance(self.keep_partial_output, bool):
            raise ConfigError("'keep_partial_output' must be a boolean")
        object.__setattr__(self, 'rules', MappingProxyType(dict(self.rules)))

    def settings_for(self, rule_id: str) -> RuleSettings:
        return self.rules.get(rule_id, DEFAULT_RULE_SETTINGS)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LinterConfig":
        """
        Build a configuration from a plain mapping.

        Args:
            data: Mapping with optional keys 'rules', 'maxWorkers' and 'keepPartialOutput'

        Returns:
            LinterConfig object

        Raises:
            ConfigError: if the mapping is malformed
        """
        if not isinstance(data, Mapping):
            raise ConfigError("Configuration must be a JSON object")
        rules_data = data.get('rules') or {}
        if not isinstance(rules_data, Mapping):
            raise ConfigError("'rules' must be an object keyed by rule id")

        rules = {rule_id: RuleSettings.from_value(value) for rule_id, value in rules_data.items()}
        return cls(
            rules=rules,
            max_workers=data.get('maxWorkers', data.get('max_workers', 1)),
            keep_partial_output=data.get('keepPartialOutput', data.get('keep_partial_output', False))
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LinterConfig":
        """Load a JSON configuration file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config {path}: {e}") from e

        logger.info(f"Loaded configuration from {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rules': {rule_id: settings.to_dict() for rule_id, settings in self.rules.items()},
            'maxWorkers': self.max_workers,
            'keepPartialOutput': self.keep_partial_output,
        }
