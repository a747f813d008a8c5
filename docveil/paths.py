"""Path enumeration over schema trees."""

from __future__ import annotations

from typing import Optional

from .models import NodeKind
from .pathutils import join_key
from .schema import Schema, SchemaNode


class PathEnumerator:
    """
    Builds the list of addressable field paths of a schema.

    Nested objects and embedded sub-documents are walked; arrays and leaves
    are terminal, virtuals contribute their own path. Paths configured as
    always hidden are appended when the schema does not declare them, so
    properties that only exist on document instances can still be hidden.
    """

    @classmethod
    def enumerate(cls, schema: Schema, default_hidden: Optional[dict] = None) -> list[str]:
        paths = cls.paths_from_tree(schema.tree)
        seen = set(paths)
        for path in default_hidden or {}:
            if path not in seen:
                paths.append(path)
                seen.add(path)
        return paths

    @classmethod
    def paths_from_tree(cls, tree: dict[str, SchemaNode], parent_path: str = "") -> list[str]:
        paths = []
        for key, node in tree.items():
            path = join_key(parent_path, key)
            if node.kind is NodeKind.NESTED:
                paths.extend(cls.paths_from_tree(node.children, path))
            elif node.kind is NodeKind.EMBEDDED:
                paths.extend(cls.paths_from_tree(node.schema.tree, path))
            else:
                paths.append(path)
        return paths
