"""
TSStructure Qualified-Name Resolver.

Turns an inheritance reference into an import-aware QualifiedName.
Requires Python 3.11+.
"""

from tree_sitter import Node

from structure.diagnostics import DiagnosticSink
from structure.models import QualifiedName
from structure.resolver import IMPORT_SPECIFIER, SymbolResolver
from structure.syntax import node_text, unquote


def resolve_base_type(
    expression: Node, resolver: SymbolResolver, diagnostics: DiagnosticSink
) -> QualifiedName:
    """
    Resolve the expression of an ``extends`` clause.

    A base imported through a named import is prefixed with the module it is
    imported from. Unresolvable references yield ``["unknown?"]`` and record
    a warning; a single lookup is made.

    Args:
        expression: The referenced expression (identifier or member access)
        resolver: Symbol oracle for the file
        diagnostics: Sink receiving the unresolved-reference warning

    Returns:
        Qualified name of the base type
    """
    symbol = resolver.get_symbol_at_location(expression)
    if symbol is None:
        diagnostics.warning(f"Unable to resolve type: '{node_text(expression)}'", expression)
        return QualifiedName.unknown()

    parts = split_qualified_name(resolver.get_fully_qualified_name(symbol))
    declaration = symbol.declarations[0] if symbol.declarations else None
    if declaration is not None and declaration.kind == IMPORT_SPECIFIER:
        parts.insert(0, declaration.module_specifier or "")
    elif parts and parts[0].startswith('"'):
        parts[0] = unquote(parts[0])
    return QualifiedName(parts)


def split_qualified_name(text: str) -> list[str]:
    """
    Split a dotted name into segments.

    A leading quoted module name stays one segment even when the module path
    itself contains dots.
    """
    if text.startswith('"'):
        end = text.find('"', 1)
        if end != -1:
            rest = text[end + 1 :].lstrip(".")
            return [text[: end + 1], *(rest.split(".") if rest else [])]
    return text.split(".")
