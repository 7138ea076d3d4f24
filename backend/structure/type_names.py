"""
TSStructure Type-Name Renderer.

Renders a type annotation node as a human-readable type string.
Requires Python 3.11+.
"""

from tree_sitter import Node

from structure.syntax import node_text


PRIMITIVE_TYPE_NAMES = frozenset({"any", "boolean", "number", "string"})
ABSENT_TYPE_NAME = "undefined"

_TYPE_REFERENCE_NODE_TYPES = frozenset({"type_identifier", "nested_type_identifier"})


def render_type(type_node: Node | None) -> str:
    """
    Render a type node.

    Primitive keywords map to their lowercase name, function types to
    ``function``, arrays to ``Array&lt;Element&gt;`` and named references to
    their name path. Anything else renders as the grammar's numeric kind id,
    and a missing annotation as ``undefined``.

    Args:
        type_node: A type node, or the ``type_annotation`` wrapping one

    Returns:
        Rendered type name
    """
    if type_node is not None and type_node.type == "type_annotation":
        type_node = type_node.named_children[0] if type_node.named_children else None
    if type_node is None:
        return ABSENT_TYPE_NAME

    node_type = type_node.type
    if node_type == "predefined_type":
        text = node_text(type_node).strip()
        if text in PRIMITIVE_TYPE_NAMES:
            return text
    elif node_type == "function_type":
        return "function"
    elif node_type == "array_type":
        element = type_node.named_children[0]
        return f"Array&lt;{node_text(element).strip()}&gt;"
    elif node_type in _TYPE_REFERENCE_NODE_TYPES:
        return node_text(type_node).strip()
    elif node_type == "generic_type":
        return node_text(type_node.child_by_field_name("name")).strip()

    return str(type_node.kind_id)
