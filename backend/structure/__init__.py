"""
TSStructure Extraction Package.

Tree-sitter based extraction of the structural model (modules, classes,
properties, methods, imports) of TypeScript source files.
Requires Python 3.11+.
"""

from structure.models import (
    Visibility,
    Lifetime,
    Severity,
    QualifiedName,
    Element,
    Module,
    ImportedModule,
    Class,
    Property,
    Method,
    Diagnostic,
    ExtractionResult,
)
from structure.diagnostics import DiagnosticSink
from structure.resolver import SymbolResolver, TreeSitterSymbolResolver
from structure.walker import StructuralWalker, collect_information
from structure.typescript_parser import TypeScriptParser
from structure.project_parser import ProjectParser, ProjectResult

__all__ = [
    # Enums
    "Visibility",
    "Lifetime",
    "Severity",
    # Data classes
    "QualifiedName",
    "Element",
    "Module",
    "ImportedModule",
    "Class",
    "Property",
    "Method",
    "Diagnostic",
    "ExtractionResult",
    "ProjectResult",
    # Extraction
    "DiagnosticSink",
    "SymbolResolver",
    "TreeSitterSymbolResolver",
    "StructuralWalker",
    "collect_information",
    "TypeScriptParser",
    "ProjectParser",
]
