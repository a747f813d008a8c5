"""Documents and their plain-object / JSON serialization."""

from __future__ import annotations

import copy
import uuid
from collections.abc import Mapping
from typing import Any, Optional

from .models import ID_KEY, NodeKind, SerializationOptions, Target
from .pathutils import MISSING, get_path, set_path, split_path
from .schema import Schema


class Document:
    """
    A document instance of a schema.

    Stored values are kept as plain data; embedded sub-documents and the
    elements of document arrays are wrapped in Documents of their own schema
    so they serialize through that schema's hooks.

        user = Document(schema, {"name": "Joe", "password": "secret"})
        user.name           # stored value
        user.to_json()      # plain dict after the JSON transform

    Keys the schema does not declare are kept by default, but the hidden
    fields transform only copies declared or listed paths, so they never
    reach the serialized output. With strict=True they are dropped on
    construction instead, as a strict document store would.
    """

    def __init__(self, schema: Schema, data: Optional[Mapping] = None, strict: bool = False):
        self._schema = schema
        self._strict = strict
        self._data = self._wrap_tree(schema.tree, dict(data or {}))
        if schema.node(ID_KEY) is not None and self._data.get(ID_KEY) is None:
            self._data[ID_KEY] = uuid.uuid4().hex[:24]

    def _wrap_tree(self, tree: dict, data: dict) -> dict:
        if self._strict:
            data = {key: value for key, value in data.items() if key in tree}
        for key, node in tree.items():
            if key not in data:
                continue
            value = data[key]
            if node.kind is NodeKind.EMBEDDED and isinstance(value, Mapping):
                data[key] = Document(node.schema, value, self._strict)
            elif node.is_document_array and isinstance(value, list):
                data[key] = [
                    Document(node.schema, item, self._strict) if isinstance(item, Mapping) else item
                    for item in value
                ]
            elif node.kind is NodeKind.NESTED and isinstance(value, Mapping):
                data[key] = self._wrap_tree(node.children, dict(value))
        return data

    @property
    def schema(self) -> Schema:
        return self._schema

    # Access

    def get(self, path: str, default: Any = None) -> Any:
        """Read a stored value, falling back to a virtual of that path."""
        segments = split_path(path)
        current = self._data
        for index, segment in enumerate(segments):
            if isinstance(current, Document):
                return current.get(".".join(segments[index:]), default)
            if not isinstance(current, Mapping) or segment not in current:
                return self._virtual_value(path, default)
            current = current[segment]
        return current

    def _virtual_value(self, path: str, default: Any) -> Any:
        node = self._schema.node(path)
        if node is not None and node.kind is NodeKind.VIRTUAL:
            return node.getter(self)
        return default

    def set(self, path: str, value: Any) -> Document:
        """Write a stored value, descending into embedded sub-documents."""
        segments = split_path(path)
        current = self._data
        for index, segment in enumerate(segments[:-1]):
            current = current.get(segment) if isinstance(current, Mapping) else None
            if isinstance(current, Document):
                current.set(".".join(segments[index + 1:]), value)
                return self
        set_path(self._data, path, value)
        return self

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        value = self.get(name, MISSING)
        if value is MISSING:
            raise AttributeError(f"{type(self).__name__} has no field '{name}'")
        return value

    def __getitem__(self, path: str) -> Any:
        value = self.get(path, MISSING)
        if value is MISSING:
            raise KeyError(path)
        return value

    def __contains__(self, path: str) -> bool:
        return self.get(path, MISSING) is not MISSING

    # Serialization

    def to_object(self, **overrides) -> Any:
        """Serialize through the schema's Object hooks."""
        return self.serialize(Target.OBJECT, **overrides)

    def to_json(self, **overrides) -> Any:
        """Serialize through the schema's JSON hooks."""
        return self.serialize(Target.JSON, **overrides)

    def serialize(self, target: Target | str, **overrides) -> Any:
        """
        Materialize the document and run the target's transform.

        Args:
            target: Serialization target
            **overrides: getters, virtuals or transform for this call only

        Returns:
            The transform's result, or the materialized dict when there is
            no transform or it returns None
        """
        target = Target.coerce(target)
        options = self._schema.get_serialization(target).merged(overrides)
        ret = self._materialize(target, options)

        if callable(options.transform):
            transformed = options.transform(self, ret, options)
            if transformed is not None:
                ret = transformed
        return ret

    def _materialize(self, target: Target, options: SerializationOptions) -> dict:
        ret = {key: self._clone(value, target, options) for key, value in self._data.items()}

        if options.getters:
            for node in self._schema.iter_nodes():
                if node.getter is not None and node.kind is not NodeKind.VIRTUAL:
                    value = get_path(ret, node.path)
                    if value is not MISSING:
                        set_path(ret, node.path, node.getter(value))

        if options.virtuals:
            for node in self._schema.virtuals:
                set_path(ret, node.path, node.getter(self))

        return ret

    def _clone(self, value: Any, target: Target, options: SerializationOptions) -> Any:
        if isinstance(value, Document):
            # Sub-documents keep their own transform, but follow the caller's flags
            return value.serialize(target, getters=options.getters, virtuals=options.virtuals)
        if isinstance(value, list):
            return [self._clone(item, target, options) for item in value]
        if isinstance(value, Mapping):
            return {key: self._clone(item, target, options) for key, item in value.items()}
        return copy.deepcopy(value)

    def __repr__(self) -> str:
        return f"Document({self._data!r})"
