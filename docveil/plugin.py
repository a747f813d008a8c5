"""Registration of the hidden-fields transforms on schemas."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from .models import PluginDefaults, SerializationOptions, Target, VisibilityOptions
from .options import OptionsResolver
from .schema import Schema
from .transformer import VisibilityPlan, make_transform

logger = logging.getLogger(__name__)


class HiddenFieldsPlugin:
    """
    Schema plugin that hides fields when documents are serialized.

    Usage:
        hidden = create_plugin({"defaultHidden": {"password": True}})
        schema.plugin(hidden, {"hidden": {"token": True}})

    For both targets the plugin installs a transform that runs after any
    transform already configured on the schema, keeping the target's
    getters and virtuals settings as they are.
    """

    def __init__(self, defaults: Optional[PluginDefaults | Mapping] = None):
        if not isinstance(defaults, PluginDefaults):
            defaults = PluginDefaults.from_dict(defaults)
        self.defaults = defaults

    def __call__(self, schema: Schema, options: Optional[Mapping] = None) -> VisibilityPlan:
        resolved = OptionsResolver.resolve(self.defaults, options)
        return self.register(schema, resolved)

    def register(self, schema: Schema, options: VisibilityOptions) -> VisibilityPlan:
        """Attach transforms for already resolved options."""
        plan = VisibilityPlan.build(schema, options)
        logger.debug(
            "Registering hidden fields: hide=%s hideObject=%s hideJSON=%s paths=%s",
            options.hide, options.hide_object, options.hide_json, plan.paths
        )

        for target in Target:
            current = schema.get_serialization(target)
            schema.set_serialization(target, SerializationOptions(
                getters=current.getters or False,
                virtuals=current.virtuals or False,
                transform=make_transform(plan, target, current.transform),
            ))

        if options.apply_recursively:
            for child in schema.child_schemas:
                self.register(child, options)

        return plan


def create_plugin(defaults: Optional[PluginDefaults | Mapping] = None) -> HiddenFieldsPlugin:
    """Create a plugin with library-level defaults."""
    return HiddenFieldsPlugin(defaults)
