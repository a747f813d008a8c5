"""Serialization transforms that drop hidden fields."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .models import FieldRules, Target, VisibilityOptions
from .options import RuleExtractor
from .paths import PathEnumerator
from .pathutils import MISSING, get_path, set_path, unset_path
from .predicate import should_copy_virtual, should_hide
from .schema import Schema

logger = logging.getLogger(__name__)


@dataclass
class VisibilityPlan:
    """Everything a transform needs that depends only on schema and options."""
    schema: Schema
    options: VisibilityOptions
    paths: list[str] = field(default_factory=list)
    rules: dict[str, Optional[FieldRules]] = field(default_factory=dict)

    @classmethod
    def build(cls, schema: Schema, options: VisibilityOptions) -> VisibilityPlan:
        paths = PathEnumerator.enumerate(schema, options.default_hidden)
        rules = {}
        for pathname in paths:
            node = schema.path(pathname)
            rules[pathname] = (
                RuleExtractor.extract_field_rules(node.options) if node is not None else None
            )
        return cls(schema=schema, options=options, paths=paths, rules=rules)


class TreeTransformer:
    """
    Builds the filtered output of one document for one target.

    Any transform that was registered before runs first and its result seeds
    the output. Every enumerated path is then either removed or copied from
    the materialized document, and finally the top-level virtuals that are
    not overridden as hidden are copied.
    """

    def __init__(
        self,
        plan: VisibilityPlan,
        target: Target,
        previous: Optional[Callable[[Any, dict, Any], Any]] = None
    ):
        self.plan = plan
        self.target = target
        self.previous = previous

    def __call__(self, doc: Any, transformed: dict, opts: Any = None) -> dict:
        plan = self.plan
        options = plan.options

        # Apply existing transformer
        final = {}
        if callable(self.previous):
            previous_result = self.previous(doc, transformed, opts)
            if previous_result is not None:
                final = copy.deepcopy(previous_result)

        # Copy real values
        for pathname in plan.paths:
            rules = plan.rules.get(pathname)
            if should_hide(rules, options, self.target, doc, transformed, pathname):
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Hiding '%s' for target %s", pathname, self.target.value)
                unset_path(final, pathname)
            else:
                value = get_path(transformed, pathname)
                if value is not MISSING:
                    set_path(final, pathname, copy.deepcopy(value))

        # Copy virtual values
        for key in transformed:
            if isinstance(key, str) and should_copy_virtual(plan.schema, key, options, self.target):
                set_path(final, key, copy.deepcopy(transformed[key]))

        return final

    def __repr__(self) -> str:
        return f"TreeTransformer(target={self.target.value}, paths={len(self.plan.paths)})"


def make_transform(
    plan: VisibilityPlan,
    target: Target,
    previous: Optional[Callable[[Any, dict, Any], Any]] = None
) -> TreeTransformer:
    """Create the transform of target, composed after previous."""
    return TreeTransformer(plan, target, previous)
