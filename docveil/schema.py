"""Schema definitions for docveil documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .models import ID_KEY, VERSION_KEY, NodeKind, SerializationOptions, Target
from .pathutils import join_key, split_path
from .exceptions import SchemaDefinitionError


@dataclass
class SchemaNode:
    """A node of an ingested schema tree."""
    kind: NodeKind
    path: str
    type: Any = None
    options: dict = field(default_factory=dict)
    children: dict[str, SchemaNode] = field(default_factory=dict)
    schema: Optional[Schema] = None
    getter: Optional[Callable[[Any], Any]] = None

    @property
    def is_real(self) -> bool:
        """True for stored fields (everything but nested containers and virtuals)."""
        return self.kind in (NodeKind.LEAF, NodeKind.ARRAY, NodeKind.EMBEDDED)

    @property
    def is_document_array(self) -> bool:
        return self.kind is NodeKind.ARRAY and self.schema is not None


class Schema:
    """
    Declares the fields of a document type.

    The plain definition is ingested once into a tree of tagged SchemaNodes:

        Schema({
            "name": str,
            "email": {"prefix": str, "suffix": {"type": str, "hide": True}},
            "tags": [str],
            "spouse": Schema({"name": str}),
        })

    Per-target serialization options (getters, virtuals, transform) are the
    hook point used by the visibility plugin.
    """

    def __init__(
        self,
        definition: Optional[dict] = None,
        _id: bool = True,
        id: bool = True,
        version_key: str | bool = VERSION_KEY,
    ):
        self.tree: dict[str, SchemaNode] = {}
        self.version_key = version_key or None
        self._serialization: dict[Target, SerializationOptions] = {
            target: SerializationOptions() for target in Target
        }

        if _id:
            self.add({ID_KEY: {"type": str, "auto": True}})
        if definition:
            self.add(definition)
        if self.version_key:
            self.add({self.version_key: int})
        if _id and id:
            self.virtual("id", lambda doc: None if doc.get(ID_KEY) is None else str(doc.get(ID_KEY)))

    # Definition ingestion

    def add(self, definition: dict, prefix: str = "") -> Schema:
        """Add field definitions, optionally below a nested prefix."""
        container = self.tree
        if prefix:
            container = self._nested_container(prefix, create=True)
        for key, value in definition.items():
            if not isinstance(key, str) or not key:
                raise SchemaDefinitionError(f"Invalid field name {key!r}", prefix or None)
            container[key] = self._build_node(value, join_key(prefix, key))
        return self

    def _build_node(self, value: Any, path: str) -> SchemaNode:
        if isinstance(value, Schema):
            return SchemaNode(NodeKind.EMBEDDED, path, type=Schema, schema=value)

        if isinstance(value, list):
            return self._build_array(value, path, {})

        if isinstance(value, dict):
            if not value:
                # Free-form mixed value
                return SchemaNode(NodeKind.LEAF, path, type=dict)
            if "type" in value and not isinstance(value["type"], dict):
                options = {k: v for k, v in value.items() if k != "type"}
                field_type = value["type"]
                if isinstance(field_type, list):
                    return self._build_array(field_type, path, options)
                if isinstance(field_type, Schema):
                    return SchemaNode(
                        NodeKind.EMBEDDED, path, type=Schema, options=options, schema=field_type
                    )
                return SchemaNode(
                    NodeKind.LEAF, path, type=field_type, options=options,
                    getter=options.get("get"),
                )

            node = SchemaNode(NodeKind.NESTED, path, type=dict)
            for key, child in value.items():
                node.children[key] = self._build_node(child, join_key(path, key))
            return node

        return SchemaNode(NodeKind.LEAF, path, type=value)

    def _build_array(self, items: list, path: str, options: dict) -> SchemaNode:
        node = SchemaNode(NodeKind.ARRAY, path, type=list, options=options)
        if len(items) == 1:
            element = items[0]
            if isinstance(element, Schema):
                node.schema = element
            elif isinstance(element, dict) and element and "type" not in element:
                node.schema = Schema(element, version_key=False)
        return node

    def _nested_container(self, path: str, create: bool = False) -> Optional[dict]:
        container = self.tree
        prefix = ""
        for segment in split_path(path):
            prefix = join_key(prefix, segment)
            node = container.get(segment)
            if node is None:
                if not create:
                    return None
                node = container[segment] = SchemaNode(NodeKind.NESTED, prefix, type=dict)
            if node.kind is NodeKind.EMBEDDED:
                container = node.schema.tree
            elif node.kind is NodeKind.NESTED:
                container = node.children
            else:
                if create:
                    raise SchemaDefinitionError("Cannot nest below a non-object field", path)
                return None
        return container

    def virtual(self, path: str, getter: Callable[[Any], Any]) -> Schema:
        """Declare a computed field; getter receives the document."""
        if not callable(getter):
            raise SchemaDefinitionError("Virtual getter must be callable", path)
        segments = split_path(path)
        if not all(segments):
            raise SchemaDefinitionError("Empty virtual path", path)
        parent = ".".join(segments[:-1])
        container = self._nested_container(parent, create=True) if parent else self.tree
        container[segments[-1]] = SchemaNode(NodeKind.VIRTUAL, path, getter=getter)
        return self

    def remove(self, path: str) -> Schema:
        """Remove a field definition."""
        segments = split_path(path)
        parent = ".".join(segments[:-1])
        container = self._nested_container(parent) if parent else self.tree
        if container is not None:
            container.pop(segments[-1], None)
        return self

    # Lookups

    def node(self, path: str) -> Optional[SchemaNode]:
        """Return the node at path, descending into nested and embedded schemas."""
        segments = split_path(path)
        parent = ".".join(segments[:-1])
        container = self._nested_container(parent) if parent else self.tree
        if container is None:
            return None
        return container.get(segments[-1])

    def path(self, path: str) -> Optional[SchemaNode]:
        """Return the stored field at path, or None for virtuals, nested objects and unknowns."""
        node = self.node(path)
        if node is not None and node.is_real:
            return node
        return None

    def path_type(self, path: str) -> str:
        node = self.node(path)
        if node is None:
            return "adhocOrUndefined"
        if node.kind is NodeKind.VIRTUAL:
            return "virtual"
        if node.kind is NodeKind.NESTED:
            return "nested"
        return "real"

    @property
    def virtuals(self) -> list[SchemaNode]:
        return [node for node in self.iter_nodes() if node.kind is NodeKind.VIRTUAL]

    @property
    def child_schemas(self) -> list[Schema]:
        """Embedded sub-document and document-array element schemas."""
        return [
            node.schema
            for node in self.iter_nodes()
            if node.kind is NodeKind.EMBEDDED or node.is_document_array
        ]

    def iter_nodes(self, tree: Optional[dict] = None):
        """Yield every node, depth first, without entering embedded schemas."""
        for node in (self.tree if tree is None else tree).values():
            yield node
            if node.kind is NodeKind.NESTED:
                yield from self.iter_nodes(node.children)

    # Serialization hooks

    def get_serialization(self, target: Target | str) -> SerializationOptions:
        return self._serialization[Target.coerce(target)]

    def set_serialization(
        self,
        target: Target | str,
        options: Optional[SerializationOptions] = None,
        **kwargs
    ) -> Schema:
        """Replace the serialization options of a target."""
        if options is None:
            options = SerializationOptions(**kwargs)
        self._serialization[Target.coerce(target)] = options
        return self

    def plugin(self, fn: Callable, options: Optional[dict] = None) -> Schema:
        """Apply a plugin, e.g. the visibility plugin, to this schema."""
        fn(self, options)
        return self
