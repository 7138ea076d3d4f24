"""
TSStructure Tree-sitter Front End.

Parses TypeScript source with Tree-sitter, binds its symbols and runs the
structural walker over the tree.
Requires Python 3.11+.
"""

import time
from pathlib import Path, PurePath

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser, Tree

from structure.diagnostics import DiagnosticSink
from structure.models import ExtractionResult, Module
from structure.resolver import TreeSitterSymbolResolver
from structure.walker import collect_information, module_path_of
from utils.logger import LoggerMixin


TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())


class TypeScriptParser(LoggerMixin):
    """
    Structure extractor for TypeScript files.

    Each instance owns its Tree-sitter parsers; use one instance per thread.
    """

    def __init__(self) -> None:
        """Initialize Tree-sitter parsers for the TypeScript and TSX grammars."""
        self._parser = Parser(TYPESCRIPT_LANGUAGE)
        self._tsx_parser = Parser(TSX_LANGUAGE)

    def parse_file(self, file_path: Path) -> ExtractionResult:
        """
        Extract the structure of a TypeScript file.

        Args:
            file_path: Path to the .ts or .tsx file

        Returns:
            ExtractionResult; an unreadable file yields an empty module and
            an error diagnostic
        """
        start_time = time.perf_counter()

        try:
            content = file_path.read_bytes()
        except OSError as e:
            self.log.error("failed_to_read_file", path=str(file_path), error=str(e))
            diagnostics = DiagnosticSink()
            diagnostics.error(f"Unable to read file: {e}")
            stem = module_path_of(file_path)
            return ExtractionResult(
                module=Module(stem.name, None, path=stem.parent.as_posix()),
                diagnostics=diagnostics.diagnostics,
            )

        result = self.parse_content(content, file_path)
        result.parse_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        self.log.debug(
            "parsed_file",
            path=str(file_path),
            elapsed_ms=result.parse_time_ms,
            elements=len(result.module.children),
            diagnostics=len(result.diagnostics),
        )
        return result

    def parse_content(
        self, content: bytes | str, file_path: PurePath | str = "module.ts"
    ) -> ExtractionResult:
        """
        Extract the structure of TypeScript source held in memory.

        Args:
            content: Source code
            file_path: Path used for the module name, directory and grammar choice

        Returns:
            ExtractionResult for the source
        """
        start_time = time.perf_counter()
        tree = self.parse_tree(content, file_path)

        diagnostics = DiagnosticSink()
        stem = module_path_of(file_path)
        resolver = TreeSitterSymbolResolver(tree.root_node, module_name=stem.as_posix())
        if tree.root_node.has_error:
            self.log.debug("syntax_errors_present", path=str(file_path))

        module = collect_information(tree.root_node, file_path, resolver, diagnostics)
        return ExtractionResult(
            module=module,
            diagnostics=diagnostics.diagnostics,
            parse_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

    def parse_tree(self, content: bytes | str, file_path: PurePath | str = "module.ts") -> Tree:
        """Parse source into a Tree-sitter tree, choosing the grammar by extension."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        parser = self._tsx_parser if PurePath(file_path).suffix == ".tsx" else self._parser
        return parser.parse(content)
