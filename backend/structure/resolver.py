"""
TSStructure Symbol Resolver.

Binds identifier use sites to the symbols declared in one TypeScript file
and computes their fully qualified names. The walker only depends on the
``SymbolResolver`` protocol; ``TreeSitterSymbolResolver`` is the binder used
when no richer oracle (e.g. a full type checker) is available.
Requires Python 3.11+.
"""

from dataclasses import dataclass, field
from typing import Protocol

from tree_sitter import Node

from structure.syntax import (
    CLASS_NODE_TYPES,
    FUNCTION_NODE_TYPES,
    NAMESPACE_NODE_TYPES,
    node_text,
    unquote,
)
from utils.logger import LoggerMixin


IMPORT_SPECIFIER = "import_specifier"
IMPORT_ALIAS = "import_alias"

# Declarations whose symbol lives in another module.
IMPORTED_DECLARATION_KINDS = frozenset(
    {IMPORT_SPECIFIER, "import_clause", "namespace_import", "import_require_clause"}
)

_NAMED_DECLARATION_TYPES = (
    CLASS_NODE_TYPES
    | FUNCTION_NODE_TYPES
    | {"interface_declaration", "enum_declaration", "type_alias_declaration"}
)
_TRANSPARENT_STATEMENT_TYPES = frozenset(
    {"export_statement", "ambient_declaration", "expression_statement"}
)


@dataclass(slots=True)
class Declaration:
    """One syntactic declaration contributing to a symbol."""

    kind: str  # tree-sitter node type of the declaration
    node: Node
    module_specifier: str | None = None  # set for import-derived declarations
    imported_name: str | None = None  # name inside the originating module
    target: str | None = None  # dotted target of an import alias


@dataclass(slots=True, eq=False)
class Symbol:
    """A named entity; namespaces carry their members."""

    name: str
    declarations: list[Declaration] = field(default_factory=list)
    parent: "Symbol | None" = None
    members: dict[str, "Symbol"] = field(default_factory=dict)

    @property
    def declaration(self) -> Declaration:
        """The originating (first) declaration."""
        return self.declarations[0]

    @property
    def is_imported(self) -> bool:
        """Check if the symbol is bound by an import."""
        return self.declaration.kind in IMPORTED_DECLARATION_KINDS


class SymbolResolver(Protocol):
    """Read-only oracle mapping use sites to declared symbols."""

    def get_symbol_at_location(self, node: Node) -> Symbol | None:
        """Bind an expression to its symbol; None when it cannot be resolved."""
        ...

    def get_fully_qualified_name(self, symbol: Symbol) -> str:
        """Dotted fully qualified name; a module name segment may be quoted."""
        ...


class TreeSitterSymbolResolver(LoggerMixin):
    """
    Scope-based binder over a single file's tree-sitter tree.

    Namespaces with the same name merge, and dotted namespace names
    (``namespace A.B``) expand into nested namespaces. Symbols imported from
    other files are bound to their import declaration; their contents are not
    visible, so member lookups through them fail.
    """

    def __init__(self, root: Node, module_name: str | None = None) -> None:
        """
        Bind every declaration in the file.

        Args:
            root: The ``program`` node of the tree
            module_name: Module path (file path without extension) used to
                qualify names when the file is an ES module
        """
        self._module_name = module_name
        self._globals: dict[str, Symbol] = {}
        self._namespaces: dict[int, Symbol] = {}  # namespace node id -> innermost symbol
        self.is_external_module = any(
            child.type in ("import_statement", "export_statement")
            for child in root.named_children
        )
        self._bind_block(root, self._globals, None)
        self.log.debug(
            "symbols_bound",
            module=module_name,
            globals=len(self._globals),
            namespaces=len(self._namespaces),
        )

    # ------------------------------------------------------------------ #
    # Queries

    def get_symbol_at_location(self, node: Node) -> Symbol | None:
        if node.type == "identifier":
            symbol = self._lookup(node_text(node), self._enclosing_namespace(node))
        elif node.type in ("member_expression", "nested_identifier"):
            object_node = node.child_by_field_name("object") or node.named_children[0]
            property_node = node.child_by_field_name("property") or node.named_children[-1]
            owner = self.get_symbol_at_location(object_node)
            symbol = owner.members.get(node_text(property_node)) if owner else None
        else:
            return None
        return self._resolve_alias(symbol, set())

    def get_fully_qualified_name(self, symbol: Symbol) -> str:
        """
        Dotted name of a symbol.

        Imported symbols yield the name they are exported under, so
        ``import { A as B }`` gives ``A`` rather than the local alias. Local
        symbols are named by their namespace path; the quoted module name
        is prepended only when the outermost symbol is exported from an ES
        module, since unexported locals have no containing module symbol.
        """
        if symbol.is_imported:
            return symbol.declaration.imported_name or symbol.name

        parts: list[str] = []
        outermost = current = symbol
        while current is not None:
            parts.append(current.name)
            outermost = current
            current = current.parent
        qualified = ".".join(reversed(parts))

        if self.is_external_module and self._module_name and _is_exported(outermost):
            return f'"{self._module_name}".{qualified}'
        return qualified

    # ------------------------------------------------------------------ #
    # Lookup helpers

    def _lookup(self, name: str, scope: Symbol | None) -> Symbol | None:
        """Search enclosing namespaces outward, then the file scope."""
        while scope is not None:
            if name in scope.members:
                return scope.members[name]
            scope = scope.parent
        return self._globals.get(name)

    def _enclosing_namespace(self, node: Node) -> Symbol | None:
        parent = node.parent
        while parent is not None:
            symbol = self._namespaces.get(parent.id)
            if symbol is not None:
                return symbol
            parent = parent.parent
        return None

    def _resolve_alias(self, symbol: Symbol | None, seen: set[int]) -> Symbol | None:
        """Follow ``import X = A.B`` aliases to their target symbol."""
        if symbol is None or symbol.declaration.kind != IMPORT_ALIAS:
            return symbol
        if id(symbol) in seen:
            return None
        seen.add(id(symbol))

        declaration = symbol.declaration
        head, *rest = (declaration.target or "").split(".")
        target = self._lookup(head, self._enclosing_namespace(declaration.node))
        for name in rest:
            target = self._resolve_alias(target, seen)
            if target is None:
                return None
            target = target.members.get(name)
        return self._resolve_alias(target, seen)

    # ------------------------------------------------------------------ #
    # Binding

    def _bind_block(self, block: Node, table: dict[str, Symbol], owner: Symbol | None) -> None:
        for child in block.named_children:
            self._bind_statement(child, table, owner)

    def _bind_statement(self, node: Node, table: dict[str, Symbol], owner: Symbol | None) -> None:
        node_type = node.type
        if node_type in _TRANSPARENT_STATEMENT_TYPES:
            self._bind_block(node, table, owner)
        elif node_type in NAMESPACE_NODE_TYPES:
            self._bind_namespace(node, table, owner)
        elif node_type in _NAMED_DECLARATION_TYPES:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                self._declare(table, node_text(name_node), Declaration(node_type, node), owner)
        elif node_type in ("lexical_declaration", "variable_declaration"):
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    self._declare(
                        table, node_text(name_node), Declaration(declarator.type, declarator), owner
                    )
        elif node_type == "import_statement":
            self._bind_import(node, table, owner)
        elif node_type == IMPORT_ALIAS:
            alias, target = node.named_children[0], node.named_children[-1]
            self._declare(
                table,
                node_text(alias),
                Declaration(IMPORT_ALIAS, node, target=node_text(target)),
                owner,
            )

    def _bind_namespace(self, node: Node, table: dict[str, Symbol], owner: Symbol | None) -> None:
        name_node = node.child_by_field_name("name")
        if name_node.type == "string":
            # Ambient external module: keep the quotes, as module names are quoted
            names = [node_text(name_node)]
        else:
            names = node_text(name_node).split(".")

        scope, symbol = table, owner
        for name in names:
            symbol = self._declare(scope, name.strip(), Declaration(node.type, node), symbol)
            scope = symbol.members
        self._namespaces[node.id] = symbol

        body = node.child_by_field_name("body")
        if body is not None:
            self._bind_block(body, symbol.members, symbol)

    def _bind_import(self, node: Node, table: dict[str, Symbol], owner: Symbol | None) -> None:
        specifier = _module_specifier(node)
        for child in node.named_children:
            if child.type == "import_require_clause":
                self._declare(
                    table,
                    node_text(child.named_children[0]),
                    Declaration(child.type, child, module_specifier=_module_specifier(child)),
                    owner,
                )
            elif child.type == "import_clause":
                for part in child.named_children:
                    self._bind_import_clause_part(part, specifier, table, owner)

    def _bind_import_clause_part(
        self, part: Node, specifier: str | None, table: dict[str, Symbol], owner: Symbol | None
    ) -> None:
        if part.type == "identifier":
            # import Default from "x"
            self._declare(
                table,
                node_text(part),
                Declaration("import_clause", part, module_specifier=specifier),
                owner,
            )
        elif part.type == "namespace_import":
            # import * as ns from "x"
            identifier = part.named_children[-1]
            self._declare(
                table,
                node_text(identifier),
                Declaration(part.type, part, module_specifier=specifier),
                owner,
            )
        elif part.type == "named_imports":
            for import_specifier in part.named_children:
                if import_specifier.type != IMPORT_SPECIFIER:
                    continue
                name_node = import_specifier.child_by_field_name("name")
                alias_node = import_specifier.child_by_field_name("alias")
                self._declare(
                    table,
                    node_text(alias_node or name_node),
                    Declaration(
                        IMPORT_SPECIFIER,
                        import_specifier,
                        module_specifier=specifier,
                        imported_name=node_text(name_node),
                    ),
                    owner,
                )

    @staticmethod
    def _declare(
        table: dict[str, Symbol], name: str, declaration: Declaration, owner: Symbol | None
    ) -> Symbol:
        symbol = table.get(name)
        if symbol is None:
            symbol = Symbol(name=name, parent=owner)
            table[name] = symbol
        symbol.declarations.append(declaration)
        return symbol


def _is_exported(symbol: Symbol) -> bool:
    """Check if any declaration of a symbol is wrapped in ``export``."""
    for declaration in symbol.declarations:
        node = declaration.node
        if node.type == "variable_declarator":
            node = node.parent
        if node.parent is not None and node.parent.type == "export_statement":
            return True
    return False


def _module_specifier(node: Node) -> str | None:
    """Unquoted module specifier of an import statement or require clause."""
    source = node.child_by_field_name("source")
    if source is None:
        source = next((c for c in node.named_children if c.type == "string"), None)
    return unquote(node_text(source)) if source is not None else None
