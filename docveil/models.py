"""Data models for docveil."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .exceptions import SchemaDefinitionError


# Option keys, as spelled by schema authors
HIDE = "hide"
HIDE_OBJECT = "hideObject"
HIDE_JSON = "hideJSON"
HIDDEN = "hidden"
DEFAULT_HIDDEN = "defaultHidden"
VIRTUALS = "virtuals"
APPLY_RECURSIVELY = "applyRecursively"

ID_KEY = "_id"
VERSION_KEY = "__v"


class Target(Enum):
    OBJECT = "Object"
    JSON = "JSON"

    @property
    def hide_key(self) -> str:
        """Name of the target-specific hide option, e.g. 'hideJSON'."""
        return HIDE + self.value

    @classmethod
    def coerce(cls, value: Target | str) -> Target:
        if isinstance(value, cls):
            return value
        for target in cls:
            if value in (target.value, target.value.lower(), target.name):
                return target
        raise SchemaDefinitionError(f"Unknown serialization target: {value!r}")


class NodeKind(Enum):
    LEAF = "leaf"
    NESTED = "nested"
    ARRAY = "array"
    EMBEDDED = "embedded"
    VIRTUAL = "virtual"


class RuleKind(Enum):
    ABSENT = "absent"
    ALWAYS_TRUE = "always_true"
    ALWAYS_FALSE = "always_false"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class HideRule:
    """A normalized hide rule attached to a single field."""
    kind: RuleKind = RuleKind.ABSENT
    predicate: Optional[Callable[[Any, dict], Any]] = None

    @classmethod
    def from_option(cls, value: Any) -> HideRule:
        if value is True:
            return cls(RuleKind.ALWAYS_TRUE)
        if value is False:
            return cls(RuleKind.ALWAYS_FALSE)
        if callable(value):
            return cls(RuleKind.DYNAMIC, value)
        return ABSENT_RULE

    def fires(self, doc: Any, transformed: dict) -> bool:
        if self.kind is RuleKind.ALWAYS_TRUE:
            return True
        if self.kind is RuleKind.DYNAMIC:
            # Only an exact True hides; truthy results do not
            return self.predicate(doc, transformed) is True
        return False


ABSENT_RULE = HideRule()


@dataclass(frozen=True)
class FieldRules:
    """Hide rules extracted from a field's definition options."""
    hide: HideRule = ABSENT_RULE
    hide_object: HideRule = ABSENT_RULE
    hide_json: HideRule = ABSENT_RULE

    def for_target(self, target: Target) -> HideRule:
        if target is Target.JSON:
            return self.hide_json
        return self.hide_object


@dataclass
class SerializationOptions:
    """Per-target serialization settings of a schema."""
    getters: bool = False
    virtuals: bool = False
    transform: Optional[Callable[[Any, dict, Any], Any]] = None

    def merged(self, overrides: dict) -> SerializationOptions:
        return SerializationOptions(
            getters=overrides.get("getters", self.getters),
            virtuals=overrides.get("virtuals", self.virtuals),
            transform=overrides.get("transform", self.transform),
        )


def _default_hidden_factory() -> dict:
    return {ID_KEY: True, VERSION_KEY: True}


@dataclass
class PluginDefaults:
    """Library-level defaults shared by every schema a plugin is applied to."""
    apply_recursively: bool = False
    auto_hide: bool = True
    auto_hide_json: bool = True
    auto_hide_object: bool = True
    default_hidden: dict = field(default_factory=_default_hidden_factory)
    virtuals: dict = field(default_factory=dict)

    _KEY_MAP = {
        "applyRecursively": "apply_recursively",
        "autoHide": "auto_hide",
        "autoHideJSON": "auto_hide_json",
        "autoHideObject": "auto_hide_object",
        "defaultHidden": "default_hidden",
    }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> PluginDefaults:
        """Build defaults from camelCase or snake_case keys; unknown keys are ignored."""
        values = {}
        for key, value in (data or {}).items():
            name = cls._KEY_MAP.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "applyRecursively": self.apply_recursively,
            "autoHide": self.auto_hide,
            "autoHideJSON": self.auto_hide_json,
            "autoHideObject": self.auto_hide_object,
            "defaultHidden": dict(self.default_hidden),
            "virtuals": dict(self.virtuals),
        }


@dataclass
class VisibilityOptions:
    """Options resolved for one schema registration."""
    hide: bool = True
    hide_object: bool = True
    hide_json: bool = True
    default_hidden: dict = field(default_factory=_default_hidden_factory)
    virtuals: dict = field(default_factory=dict)
    apply_recursively: bool = False

    @property
    def hide_enabled(self) -> bool:
        return self.hide is not False

    def hide_for(self, target: Target) -> Any:
        if target is Target.JSON:
            return self.hide_json
        return self.hide_object

    def to_dict(self) -> dict:
        return {
            HIDE: self.hide,
            HIDE_OBJECT: self.hide_object,
            HIDE_JSON: self.hide_json,
            DEFAULT_HIDDEN: dict(self.default_hidden),
            VIRTUALS: dict(self.virtuals),
            APPLY_RECURSIVELY: self.apply_recursively,
        }
