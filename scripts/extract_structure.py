#!/usr/bin/env python3
"""
TSStructure Extraction Script.

Extracts the structural model of a TypeScript file or project and writes
it as JSON.
Requires Python 3.11+.

Usage:
    python scripts/extract_structure.py /path/to/file.ts
    python scripts/extract_structure.py /path/to/project --output model.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from structure.project_parser import ProjectParser
from structure.typescript_parser import TypeScriptParser
from utils.logger import configure_logging, get_logger


configure_logging()
logger = get_logger("extract_structure")


def extract(path: Path) -> dict[str, Any]:
    """
    Extract a single file or every file of a directory.

    Args:
        path: File or project directory

    Returns:
        Serialised extraction result
    """
    if path.is_dir():
        project = ProjectParser(path).parse_project()
        if not project.success:
            return {"error": f"No TypeScript files found under {path}"}
        return project.as_dict

    result = TypeScriptParser().parse_file(path)
    for diagnostic in result.diagnostics:
        logger.warning(
            "extraction_diagnostic",
            path=str(path),
            severity=diagnostic.severity.value,
            message=diagnostic.message,
            line=diagnostic.line,
        )
    return result.as_dict


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Extract the structural model of TypeScript sources as JSON"
    )
    parser.add_argument(
        "path",
        type=Path,
        help="TypeScript file or project directory",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    args = parser.parse_args()

    if not args.path.exists():
        print(f"Error: Path does not exist: {args.path}", file=sys.stderr)
        sys.exit(1)

    try:
        result = extract(args.path)
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        sys.exit(1)

    if "error" in result:
        print(f"Error: {result['error']}", file=sys.stderr)
        sys.exit(1)

    payload = json.dumps(result, indent=args.indent)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info("model_written", path=str(args.output))
    else:
        print(payload)


if __name__ == "__main__":
    main()
