"""
TSStructure Modifier Policy.

Derives visibility, lifetime and abstractness of a declaration from its
explicit modifiers, falling back to positional defaults.
Requires Python 3.11+.
"""

from collections.abc import Iterable

from tree_sitter import Node

from structure.models import Lifetime, Visibility
from structure.syntax import ContextKind, Modifier, context_kind_of, modifiers_of


# First match wins; export is treated as public.
_VISIBILITY_PRIORITY: tuple[tuple[Modifier, Visibility], ...] = (
    (Modifier.PROTECTED, Visibility.PROTECTED),
    (Modifier.PRIVATE, Visibility.PRIVATE),
    (Modifier.PUBLIC, Visibility.PUBLIC),
    (Modifier.EXPORT, Visibility.PUBLIC),
)

_DEFAULT_VISIBILITY: dict[ContextKind, Visibility] = {
    ContextKind.CLASS: Visibility.PUBLIC,
    ContextKind.MODULE: Visibility.PRIVATE,
    ContextKind.OTHER: Visibility.PRIVATE,
}


def resolve_visibility(
    modifiers: Iterable[Modifier] | None, context: ContextKind
) -> Visibility:
    """
    Pick a visibility from a modifier set and the declaration's context.

    Args:
        modifiers: Explicit modifiers, or None when the node has none
        context: Kind of the construct that syntactically owns the node

    Returns:
        Visibility of the declaration
    """
    if modifiers:
        present = set(modifiers)
        for modifier, visibility in _VISIBILITY_PRIORITY:
            if modifier in present:
                return visibility
    return _DEFAULT_VISIBILITY.get(context, Visibility.PRIVATE)


def resolve_lifetime(modifiers: Iterable[Modifier] | None) -> Lifetime:
    """Static when a ``static`` modifier is present, else instance."""
    if modifiers and Modifier.STATIC in set(modifiers):
        return Lifetime.STATIC
    return Lifetime.INSTANCE


def is_abstract(modifiers: Iterable[Modifier] | None) -> bool:
    """True iff an explicit ``abstract`` modifier is present."""
    if not modifiers:
        return False
    return Modifier.ABSTRACT in set(modifiers)


def visibility_of(node: Node) -> Visibility:
    """Visibility of a declaration node."""
    return resolve_visibility(modifiers_of(node), context_kind_of(node))


def lifetime_of(node: Node) -> Lifetime:
    """Lifetime of a declaration node."""
    return resolve_lifetime(modifiers_of(node))
