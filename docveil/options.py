"""Option resolution and rule extraction for docveil."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from .models import (
    APPLY_RECURSIVELY,
    DEFAULT_HIDDEN,
    HIDDEN,
    HIDE,
    HIDE_JSON,
    HIDE_OBJECT,
    VIRTUALS,
    FieldRules,
    HideRule,
    PluginDefaults,
    VisibilityOptions,
)


# snake_case spellings accepted alongside the camelCase option keys
_ALIASES = {
    "hide_object": HIDE_OBJECT,
    "hide_json": HIDE_JSON,
    "default_hidden": DEFAULT_HIDDEN,
    "apply_recursively": APPLY_RECURSIVELY,
}


def _canonical(options: Optional[Mapping]) -> dict:
    """Map option keys to their camelCase spelling; camelCase wins on conflict."""
    result = {}
    for key, value in (options or {}).items():
        canonical = _ALIASES.get(key)
        if canonical is None:
            result[key] = value
        elif canonical not in options:
            result[canonical] = value
    return result


class OptionsResolver:
    """Merges library defaults and per-schema options into VisibilityOptions."""

    @staticmethod
    def resolve(
        defaults: Optional[PluginDefaults | Mapping] = None,
        options: Optional[Mapping | VisibilityOptions] = None
    ) -> VisibilityOptions:
        """
        Resolve the options for one registration.

        Args:
            defaults: Library-level defaults (PluginDefaults or its dict form)
            options: Options given when the plugin is applied to a schema

        Returns:
            VisibilityOptions with independent copies of all mappings
        """
        if not isinstance(defaults, PluginDefaults):
            defaults = PluginDefaults.from_dict(defaults)
        if isinstance(options, VisibilityOptions):
            options = options.to_dict()
        options = _canonical(options)

        def ensure(key: str, fallback: Any) -> Any:
            return options[key] if key in options else fallback

        resolved = VisibilityOptions(
            apply_recursively=ensure(APPLY_RECURSIVELY, defaults.apply_recursively),
            hide=ensure(HIDE, defaults.auto_hide),
            hide_json=ensure(HIDE_JSON, defaults.auto_hide_json),
            hide_object=ensure(HIDE_OBJECT, defaults.auto_hide_object),
            default_hidden=dict(ensure(DEFAULT_HIDDEN, defaults.default_hidden) or {}),
            virtuals=dict(ensure(VIRTUALS, defaults.virtuals) or {}),
        )

        # Add to the always hidden paths
        hidden = options.get(HIDDEN)
        if isinstance(hidden, Mapping):
            resolved.default_hidden.update(hidden)

        if resolved.hide is False:
            resolved.hide_json = False
            resolved.hide_object = False

        return resolved


class RuleExtractor:
    """Extracts hide rules from a field's definition options."""

    @staticmethod
    def extract_field_rules(field_options: Optional[Mapping]) -> FieldRules:
        """
        Normalize the hide options of a field.

        Args:
            field_options: The options bag of the field definition

        Returns:
            FieldRules with one tagged HideRule per option
        """
        field_options = _canonical(field_options)
        return FieldRules(
            hide=HideRule.from_option(field_options.get(HIDE)),
            hide_object=HideRule.from_option(field_options.get(HIDE_OBJECT)),
            hide_json=HideRule.from_option(field_options.get(HIDE_JSON)),
        )
