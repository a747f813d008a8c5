"""Visibility decisions for docveil."""

from __future__ import annotations

from typing import Any, Optional

from .models import HIDE, FieldRules, Target, VisibilityOptions
from .schema import Schema


def matches_options(options: VisibilityOptions, pathname: str) -> bool:
    """True if the path is always hidden or named in the virtual overrides."""
    return bool(options.default_hidden.get(pathname)) or pathname in options.virtuals


def matches_rules(rules: Optional[FieldRules], target: Optional[Target], doc: Any, transformed: dict) -> bool:
    """
    True if a field rule fires.

    With target None only the target-agnostic rule is consulted.
    """
    if rules is None:
        return False
    rule = rules.hide if target is None else rules.for_target(target)
    return rule.fires(doc, transformed)


def should_hide(
    rules: Optional[FieldRules],
    options: VisibilityOptions,
    target: Target,
    doc: Any,
    transformed: dict,
    pathname: str
) -> bool:
    """
    Decide whether a field is dropped from the output of target.

    Order:
    1. Hiding turned off for the target keeps everything
    2. Always hidden paths and paths named in the virtual overrides
    3. The field's 'hide' rule
    4. The field's target-specific rule, e.g. 'hideJSON'
    """
    if options.hide_for(target) is False:
        return False

    return (
        matches_options(options, pathname)
        or matches_rules(rules, None, doc, transformed)
        or matches_rules(rules, target, doc, transformed)
    )


def should_copy_virtual(schema: Schema, key: str, options: VisibilityOptions, target: Target) -> bool:
    """True if key is a virtual whose override does not hide it for target."""
    return (
        schema.path_type(key) == "virtual"
        and options.virtuals.get(key) not in (HIDE, target.hide_key)
    )
