"""
TSStructure Syntax Helpers.

Maps tree-sitter-typescript node types onto the closed set of declaration
kinds the walker understands, and derives modifier lists and the syntactic
parent context of a declaration node.
Requires Python 3.11+.
"""

from enum import Enum

from tree_sitter import Node


class DeclarationKind(str, Enum):
    """Declaration kinds that materialise as entities."""

    MODULE = "module"
    IMPORT_EQUALS = "import_equals"
    IMPORT = "import"
    CLASS = "class"
    GET_ACCESSOR = "get_accessor"
    SET_ACCESSOR = "set_accessor"
    PROPERTY = "property"
    METHOD = "method"
    FUNCTION = "function"


class ContextKind(str, Enum):
    """Syntactic parent of a declaration, used for default visibility."""

    CLASS = "class"
    MODULE = "module"
    OTHER = "other"


class Modifier(str, Enum):
    """Modifier keywords recognised on declarations."""

    EXPORT = "export"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    STATIC = "static"
    ABSTRACT = "abstract"
    READONLY = "readonly"
    DECLARE = "declare"
    ASYNC = "async"
    OVERRIDE = "override"


NAMESPACE_NODE_TYPES = frozenset({"internal_module", "module"})
CLASS_NODE_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})
FUNCTION_NODE_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration", "function_signature"}
)
METHOD_NODE_TYPES = frozenset(
    {"method_definition", "method_signature", "abstract_method_signature"}
)

# Nodes that sit between a declaration and the construct that owns it.
_WRAPPER_NODE_TYPES = frozenset(
    {
        "export_statement",
        "ambient_declaration",
        "expression_statement",
        "class_body",
        "statement_block",
    }
)

_TOKEN_MODIFIERS = {
    "static": Modifier.STATIC,
    "abstract": Modifier.ABSTRACT,
    "readonly": Modifier.READONLY,
    "declare": Modifier.DECLARE,
    "async": Modifier.ASYNC,
    "override_modifier": Modifier.OVERRIDE,
}

_ACCESSIBILITY_MODIFIERS = {
    "public": Modifier.PUBLIC,
    "protected": Modifier.PROTECTED,
    "private": Modifier.PRIVATE,
}


def node_text(node: Node | None) -> str:
    """Decode the source text covered by a node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def unquote(text: str) -> str:
    """Strip the surrounding quotes of a string literal."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return text[1:-1]
    return text


def classify(node: Node) -> DeclarationKind | None:
    """
    Classify a node into a declaration kind.

    Returns None for every node type that does not start a named entity;
    the walker passes through such nodes with an unchanged parent.
    Constructors are not entities, and method signatures only count inside
    a class body (overloads and ambient class members), never in interfaces.
    """
    node_type = node.type
    if node_type in NAMESPACE_NODE_TYPES:
        return DeclarationKind.MODULE
    if node_type == "import_alias":
        return DeclarationKind.IMPORT_EQUALS
    if node_type == "import_statement":
        if _child_of_type(node, "import_require_clause") is not None:
            return DeclarationKind.IMPORT_EQUALS
        return DeclarationKind.IMPORT
    if node_type in CLASS_NODE_TYPES:
        return DeclarationKind.CLASS
    if node_type == "public_field_definition":
        return DeclarationKind.PROPERTY
    if node_type == "method_signature" and not _in_class_body(node):
        return None
    if node_type in METHOD_NODE_TYPES:
        if node_text(node.child_by_field_name("name")) == "constructor":
            return None
        if _child_of_type(node, "get") is not None:
            return DeclarationKind.GET_ACCESSOR
        if _child_of_type(node, "set") is not None:
            return DeclarationKind.SET_ACCESSOR
        return DeclarationKind.METHOD
    if node_type in FUNCTION_NODE_TYPES:
        return DeclarationKind.FUNCTION
    return None


def modifiers_of(node: Node) -> list[Modifier]:
    """
    Collect the modifiers written on a declaration.

    ``export`` and ``declare`` are lifted from a wrapping export statement
    or ambient declaration, mirroring how they prefix the declaration in
    source. Order follows the source.
    """
    modifiers: list[Modifier] = []
    parent = node.parent
    while parent is not None and parent.type in ("export_statement", "ambient_declaration"):
        if parent.type == "export_statement":
            modifiers.insert(0, Modifier.EXPORT)
        else:
            modifiers.insert(0, Modifier.DECLARE)
        parent = parent.parent

    for child in node.children:
        if child.type == "accessibility_modifier":
            modifiers.append(_ACCESSIBILITY_MODIFIERS[node_text(child).strip()])
        elif child.type in _TOKEN_MODIFIERS:
            modifiers.append(_TOKEN_MODIFIERS[child.type])
    return modifiers


def context_kind_of(node: Node) -> ContextKind:
    """Find the construct that syntactically owns a declaration."""
    parent = node.parent
    while parent is not None and parent.type in _WRAPPER_NODE_TYPES:
        parent = parent.parent
    if parent is None:
        return ContextKind.OTHER
    if parent.type in CLASS_NODE_TYPES:
        return ContextKind.CLASS
    if parent.type in NAMESPACE_NODE_TYPES:
        return ContextKind.MODULE
    return ContextKind.OTHER


def _in_class_body(node: Node) -> bool:
    return node.parent is not None and node.parent.type == "class_body"


def _child_of_type(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
    return None
