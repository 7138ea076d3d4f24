"""
TSStructure Data Models.

Defines the structural model extracted from one TypeScript source file:
a tree of modules, classes, properties, methods and import edges.
Requires Python 3.11+.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


UNKNOWN_TYPE_SEGMENT = "unknown?"


class Visibility(str, Enum):
    """Accessibility of an element."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class Lifetime(str, Enum):
    """Whether a member lives on the class or on each instance."""

    STATIC = "static"
    INSTANCE = "instance"


class Severity(str, Enum):
    """Diagnostic severity levels."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class QualifiedName:
    """
    Dotted, module-aware reference to a type.

    Segment 0 may be a module specifier (e.g. ``"some-module"``) rather than
    a namespace name.
    """

    parts: list[str] = field(default_factory=list)

    @property
    def is_unknown(self) -> bool:
        """Check if this is the sentinel produced for unresolvable references."""
        return self.parts == [UNKNOWN_TYPE_SEGMENT]

    @property
    def name(self) -> str:
        """Last segment: the referenced type's own name."""
        return self.parts[-1] if self.parts else ""

    def __str__(self) -> str:
        return ".".join(self.parts)

    @classmethod
    def unknown(cls) -> "QualifiedName":
        return cls([UNKNOWN_TYPE_SEGMENT])


@dataclass(slots=True)
class Element:
    """
    Base of every entity in the structural model.

    ``parent`` is assigned once at construction; it is excluded from equality
    and repr so that structurally identical trees compare equal.
    """

    name: str
    parent: "Element | None" = field(default=None, repr=False, compare=False)
    visibility: Visibility = Visibility.PUBLIC
    lifetime: Lifetime = Lifetime.INSTANCE
    children: list["Element"] = field(default_factory=list)

    kind = "element"

    def add_element(self, element: "Element") -> None:
        """Append a child created with this element as its parent."""
        if element.parent is not self:
            raise ValueError(
                f"{element.kind} '{element.name}' belongs to another parent"
            )
        self.children.append(element)

    @property
    def qualified_name(self) -> str:
        """Dotted path of names from the root module down to this element."""
        parts: list[str] = []
        current: Element | None = self
        while current is not None:
            parts.append(current.name)
            current = current.parent
        return ".".join(reversed(parts))

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind,
            "name": self.name,
            "visibility": self.visibility.value,
            "lifetime": self.lifetime.value,
            "children": [child.as_dict for child in self.children],
        }


@dataclass(slots=True)
class Module(Element):
    """A source file (root) or a namespace declared inside it."""

    path: str | None = None

    kind = "module"

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind,
            "name": self.name,
            "path": self.path,
            "visibility": self.visibility.value,
            "children": [child.as_dict for child in self.children],
        }


@dataclass(slots=True)
class ImportedModule(Element):
    """Dependency edge on another module; carries no further structure."""

    kind = "imported_module"

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"kind": self.kind, "name": self.name}


@dataclass(slots=True)
class Class(Element):
    """Class declaration."""

    is_abstract: bool = False
    extends: QualifiedName | None = None

    kind = "class"

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind,
            "name": self.name,
            "visibility": self.visibility.value,
            "is_abstract": self.is_abstract,
            "extends": list(self.extends.parts) if self.extends else None,
            "children": [child.as_dict for child in self.children],
        }


@dataclass(slots=True)
class Property(Element):
    """Field or accessor. One accessor node maps to one Property."""

    type_name: str = "undefined"
    has_getter: bool = False
    has_setter: bool = False

    kind = "property"

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind,
            "name": self.name,
            "visibility": self.visibility.value,
            "lifetime": self.lifetime.value,
            "type_name": self.type_name,
            "has_getter": self.has_getter,
            "has_setter": self.has_setter,
        }


@dataclass(slots=True)
class Method(Element):
    """Method or free function. Parameters and return types are not modelled."""

    is_abstract: bool = False

    kind = "method"

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind,
            "name": self.name,
            "visibility": self.visibility.value,
            "lifetime": self.lifetime.value,
            "is_abstract": self.is_abstract,
        }


@dataclass(slots=True)
class Diagnostic:
    """A non-fatal problem observed during extraction."""

    severity: Severity
    message: str
    line: int | None = None
    column: int | None = None

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "severity": self.severity.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


@dataclass(slots=True)
class ExtractionResult:
    """Result of extracting the structure of a single file."""

    module: Module
    diagnostics: list[Diagnostic] = field(default_factory=list)
    parse_time_ms: float = 0.0

    @property
    def warnings(self) -> list[Diagnostic]:
        """Diagnostics with warning severity."""
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "module": self.module.as_dict,
            "diagnostics": [d.as_dict for d in self.diagnostics],
            "parse_time_ms": self.parse_time_ms,
        }
