"""
TSStructure API Dependencies.

Shared dependencies for FastAPI routes.
Requires Python 3.11+.
"""

from structure.typescript_parser import TypeScriptParser


def get_parser() -> TypeScriptParser:
    """
    Provide a parser for the current request.

    Tree-sitter parsers are not shared between threads, so every request
    gets its own instance.
    """
    return TypeScriptParser()
