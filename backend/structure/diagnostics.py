"""
TSStructure Diagnostics.

Explicit sink for non-fatal extraction problems. Each extraction owns its
own sink, so concurrent extractions never interleave their output.
Requires Python 3.11+.
"""

from tree_sitter import Node

from structure.models import Diagnostic, Severity
from utils.logger import LoggerMixin


class DiagnosticSink(LoggerMixin):
    """Collects diagnostics and mirrors them to the structured log."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self._diagnostics)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Recorded diagnostics in emission order."""
        return list(self._diagnostics)

    def warning(self, message: str, node: Node | None = None) -> Diagnostic:
        """Record a warning, optionally located at a syntax node."""
        return self._record(Severity.WARNING, message, node)

    def error(self, message: str, node: Node | None = None) -> Diagnostic:
        """Record an error that did not stop extraction."""
        return self._record(Severity.ERROR, message, node)

    def _record(self, severity: Severity, message: str, node: Node | None) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, message=message)
        if node is not None:
            diagnostic.line = node.start_point[0] + 1  # 1-indexed
            diagnostic.column = node.start_point[1]
        self._diagnostics.append(diagnostic)
        self.log.debug(
            "diagnostic_recorded",
            severity=severity.value,
            message=message,
            line=diagnostic.line,
        )
        return diagnostic
