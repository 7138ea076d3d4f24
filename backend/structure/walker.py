"""
TSStructure Structural Walker.

Single depth-first pass over a file's syntax tree that materialises
modules, imports, classes, properties and methods into an entity tree.
Requires Python 3.11+.
"""

from pathlib import PurePath

from tree_sitter import Node

from structure.diagnostics import DiagnosticSink
from structure.models import Class, Element, ImportedModule, Method, Module, Property
from structure.modifiers import is_abstract, lifetime_of, resolve_visibility, visibility_of
from structure.qualified_names import resolve_base_type
from structure.resolver import SymbolResolver
from structure.syntax import (
    ContextKind,
    DeclarationKind,
    classify,
    modifiers_of,
    node_text,
    unquote,
)
from structure.type_names import render_type
from utils.logger import LoggerMixin


# Kinds whose subtrees carry no structural information.
LEAF_KINDS = frozenset(
    {
        DeclarationKind.GET_ACCESSOR,
        DeclarationKind.SET_ACCESSOR,
        DeclarationKind.PROPERTY,
        DeclarationKind.METHOD,
        DeclarationKind.FUNCTION,
    }
)


class StructuralWalker(LoggerMixin):
    """
    Builds the entity tree for one file.

    Nodes of unrecognised kinds create nothing; their children are visited
    with the same current parent. Property and method nodes are leaves: their
    bodies, initialisers and nested closures are never visited.
    """

    def __init__(self, resolver: SymbolResolver, diagnostics: DiagnosticSink) -> None:
        self._resolver = resolver
        self._diagnostics = diagnostics

    def walk(self, root: Node, root_element: Element) -> None:
        """
        Visit ``root`` and its descendants in source order.

        Args:
            root: Node to start from (usually the ``program`` node)
            root_element: Entity receiving the top-level declarations
        """
        # Explicit stack keeps deeply nested expressions off the call stack;
        # children are pushed in reverse so they are visited in source order.
        stack: list[tuple[Node, Element]] = [(root, root_element)]
        while stack:
            node, current = stack.pop()
            kind = classify(node)
            parent = current
            if kind is not None:
                element = self._create_element(kind, node, current)
                current.add_element(element)
                if kind in LEAF_KINDS:
                    continue
                parent = _innermost(element) if kind is DeclarationKind.MODULE else element
            stack.extend((child, parent) for child in reversed(node.children))

    def _create_element(self, kind: DeclarationKind, node: Node, current: Element) -> Element:
        if kind is DeclarationKind.MODULE:
            return _namespace_chain(node, current)

        if kind is DeclarationKind.IMPORT_EQUALS:
            return ImportedModule(_import_equals_alias(node), current)

        if kind is DeclarationKind.IMPORT:
            source = _required_field(node, "source")
            return ImportedModule(unquote(node_text(source)), current)

        if kind is DeclarationKind.CLASS:
            class_def = Class(
                node_text(_required_field(node, "name")),
                current,
                visibility=visibility_of(node),
                is_abstract=is_abstract(modifiers_of(node)),
            )
            base = _first_extends_expression(node)
            if base is not None:
                class_def.extends = resolve_base_type(base, self._resolver, self._diagnostics)
            return class_def

        if kind in (
            DeclarationKind.PROPERTY,
            DeclarationKind.GET_ACCESSOR,
            DeclarationKind.SET_ACCESSOR,
        ):
            type_field = "type" if kind is DeclarationKind.PROPERTY else "return_type"
            return Property(
                _declared_name(node),
                current,
                visibility=visibility_of(node),
                lifetime=lifetime_of(node),
                type_name=render_type(node.child_by_field_name(type_field)),
                has_getter=kind is DeclarationKind.GET_ACCESSOR,
                has_setter=kind is DeclarationKind.SET_ACCESSOR,
            )

        # DeclarationKind.METHOD, DeclarationKind.FUNCTION
        return Method(
            _declared_name(node),
            current,
            visibility=visibility_of(node),
            lifetime=lifetime_of(node),
            is_abstract=is_abstract(modifiers_of(node)),
        )


def collect_information(
    root: Node,
    file_path: PurePath | str,
    resolver: SymbolResolver,
    diagnostics: DiagnosticSink | None = None,
) -> Module:
    """
    Extract the structural model of one file.

    The root module is named after the file without its extension, and its
    ``path`` is the file's directory.

    Args:
        root: The ``program`` node of the file's tree
        file_path: Path of the source file
        resolver: Symbol oracle for this file
        diagnostics: Sink for non-fatal problems; a private one is used if omitted

    Returns:
        Populated root module
    """
    stem = module_path_of(file_path)
    module = Module(stem.name, None, path=stem.parent.as_posix())

    walker = StructuralWalker(resolver, diagnostics if diagnostics is not None else DiagnosticSink())
    walker.walk(root, module)
    walker.log.debug("structure_collected", module=module.name, children=len(module.children))
    return module


def module_path_of(file_path: PurePath | str) -> PurePath:
    """File path without its last extension (``src/a.d.ts`` -> ``src/a.d``)."""
    path = PurePath(file_path)
    return path.with_suffix("") if path.suffix else path


def _required_field(node: Node, field_name: str) -> Node:
    child = node.child_by_field_name(field_name)
    if child is None:
        raise ValueError(
            f"{node.type} at line {node.start_point[0] + 1} has no '{field_name}'"
        )
    return child


def _declared_name(node: Node) -> str:
    """Name of a member; string-literal keys lose their quotes."""
    name_node = _required_field(node, "name")
    name = node_text(name_node)
    return unquote(name) if name_node.type == "string" else name


def _namespace_chain(node: Node, current: Element) -> Module:
    """
    Build the module for a namespace declaration.

    ``namespace A.B`` declares ``B`` inside ``A``: one module per segment,
    each nested in the previous one. Only the outermost segment carries the
    written modifiers; inner segments take the namespace default.
    """
    name_node = _required_field(node, "name")
    if name_node.type == "string":
        names = [unquote(node_text(name_node))]
    elif name_node.type == "nested_identifier":
        names = node_text(name_node).split(".")
    else:
        names = [node_text(name_node)]

    outer = Module(names[0].strip(), current, visibility=visibility_of(node))
    inner = outer
    for name in names[1:]:
        segment = Module(
            name.strip(), inner, visibility=resolve_visibility(None, ContextKind.MODULE)
        )
        inner.add_element(segment)
        inner = segment
    return outer


def _innermost(module: Element) -> Element:
    """Deepest module of a freshly built namespace chain."""
    while module.children:
        module = module.children[-1]
    return module


def _import_equals_alias(node: Node) -> str:
    """Local alias bound by ``import x = require(...)`` or ``import x = A.B``."""
    if node.type == "import_statement":
        clause = next(c for c in node.named_children if c.type == "import_require_clause")
        return node_text(clause.named_children[0])
    return node_text(node.named_children[0])


def _first_extends_expression(node: Node) -> Node | None:
    """First type listed in the class's first ``extends`` clause."""
    for heritage in node.children:
        if heritage.type != "class_heritage":
            continue
        for clause in heritage.children:
            if clause.type == "extends_clause":
                value = clause.child_by_field_name("value")
                if value is None and clause.named_children:
                    value = clause.named_children[0]
                return value
    return None
