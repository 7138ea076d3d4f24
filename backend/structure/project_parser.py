"""
TSStructure Project Extraction.

Discovers the TypeScript files of a project directory and extracts the
structure of each one independently.
Requires Python 3.11+.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from structure.models import ExtractionResult
from structure.typescript_parser import TypeScriptParser
from utils.config import ExtractorSettings, get_settings
from utils.logger import LoggerMixin


@dataclass(slots=True)
class ProjectResult:
    """Result of extracting every file of a project."""

    root: Path
    results: list[ExtractionResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Check if at least one file was extracted."""
        return len(self.results) > 0

    @property
    def warning_count(self) -> int:
        """Count warnings across all files."""
        return sum(len(r.warnings) for r in self.results)

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "root": self.root.as_posix(),
            "files": [r.as_dict for r in self.results],
            "errors": self.errors,
            "elapsed_ms": self.elapsed_ms,
        }


class ProjectParser(LoggerMixin):
    """Extracts the structure of every TypeScript file below a root directory."""

    def __init__(self, root_path: Path, settings: ExtractorSettings | None = None) -> None:
        """
        Initialize the project parser.

        Args:
            root_path: Root directory of the TypeScript project
            settings: Extraction settings; application settings when omitted
        """
        self.root = root_path.resolve()
        self.settings = settings or get_settings().extractor
        self.parser = TypeScriptParser()

    def parse_project(self) -> ProjectResult:
        """
        Extract every discovered file.

        Files are named relative to the root, so module paths in the output
        do not depend on where the project is checked out.
        """
        start_time = time.perf_counter()
        result = ProjectResult(root=self.root)

        files = self.discover_files()
        self.log.info("discovered_files", count=len(files), root=str(self.root))
        if not files:
            self.log.warning("no_typescript_files_found", root=str(self.root))

        max_bytes = self.settings.max_file_size_mb * 1024 * 1024
        for file_path in files:
            relative = file_path.relative_to(self.root)
            try:
                if file_path.stat().st_size > max_bytes:
                    result.errors.append(f"{relative}: file too large")
                    self.log.warning("file_too_large", path=str(relative))
                    continue
                content = file_path.read_bytes()
            except OSError as e:
                result.errors.append(f"{relative}: {e}")
                self.log.warning("read_error", path=str(relative), error=str(e))
                continue
            result.results.append(self.parser.parse_content(content, relative))

        result.elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
        self.log.info(
            "project_extracted",
            files=len(result.results),
            errors=len(result.errors),
            warnings=result.warning_count,
            elapsed_ms=result.elapsed_ms,
        )
        return result

    def discover_files(self) -> list[Path]:
        """Find all source files, in a stable order."""
        files = []
        for file_path in self.root.rglob("*"):
            if not file_path.is_file() or file_path.suffix not in self.settings.file_extensions:
                continue
            if self.settings.skip_declaration_files and file_path.name.endswith(".d.ts"):
                continue
            if self._should_ignore(file_path):
                continue
            files.append(file_path)
        return sorted(files)

    def _should_ignore(self, path: Path) -> bool:
        """Check if a path should be ignored."""
        relative_parts = path.relative_to(self.root).parts
        return any(pattern in relative_parts for pattern in self.settings.ignore_patterns)
