"""
docveil - Declarative field hiding for document serialization

Attaches a transform to a schema's plain-object and JSON serialization that
drops fields according to per-field rules, always-hidden paths and virtual
field overrides.
"""

from .plugin import HiddenFieldsPlugin, create_plugin
from .schema import Schema, SchemaNode
from .document import Document
from .models import (
    NodeKind,
    PluginDefaults,
    RuleKind,
    SerializationOptions,
    Target,
    VisibilityOptions,
)
from .options import OptionsResolver, RuleExtractor
from .paths import PathEnumerator
from .pathutils import MISSING, get_path, set_path, unset_path
from .predicate import should_copy_virtual, should_hide
from .transformer import TreeTransformer, VisibilityPlan, make_transform
from .config import DefaultsLoader, load_defaults, load_plugin
from .exceptions import DocVeilError, InvalidPathError, SchemaDefinitionError

__version__ = "1.0.0"
__all__ = [
    # Plugin
    "HiddenFieldsPlugin",
    "create_plugin",
    # Host model
    "Schema",
    "SchemaNode",
    "Document",
    # Models
    "NodeKind",
    "PluginDefaults",
    "RuleKind",
    "SerializationOptions",
    "Target",
    "VisibilityOptions",
    # Engine
    "OptionsResolver",
    "RuleExtractor",
    "PathEnumerator",
    "TreeTransformer",
    "VisibilityPlan",
    "make_transform",
    "should_hide",
    "should_copy_virtual",
    # Paths
    "MISSING",
    "get_path",
    "set_path",
    "unset_path",
    # Config
    "DefaultsLoader",
    "load_defaults",
    "load_plugin",
    # Errors
    "DocVeilError",
    "InvalidPathError",
    "SchemaDefinitionError",
]
