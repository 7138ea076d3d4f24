"""
TSStructure Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from tree_sitter import Node

from structure.typescript_parser import TypeScriptParser


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield a node and all of its descendants in source order."""
    yield node
    for child in node.children:
        yield from iter_nodes(child)


@pytest.fixture
def parser() -> TypeScriptParser:
    """Create a parser instance."""
    return TypeScriptParser()


@pytest.fixture
def find_nodes(parser: TypeScriptParser) -> Callable[[str, str], list[Node]]:
    """Parse a snippet and return every node of the given type, in source order."""

    def _find(source: str, node_type: str) -> list[Node]:
        tree = parser.parse_tree(source)
        return [n for n in iter_nodes(tree.root_node) if n.type == node_type]

    return _find


@pytest.fixture
def sample_namespace_code() -> str:
    """Script file (no top-level import/export) declaring a namespace."""
    return '''namespace Shapes {
    abstract class Shape {
        static count: number;
        protected name: string;
        private tags: string[];
        callback: () => void;
        origin: Point;
        data;
        handler = { run() { return 1; } };

        abstract area(): number;

        describe(): string {
            function nested() {}
            return "shape";
        }

        get label(): string {
            return this.name;
        }

        set label(value: string) {
            this.name = value;
        }

        public static create(): void {}
    }

    class Circle extends Shape {
        area(): number { return 1; }
    }

    export class Square extends Shape implements Sized {
        area(): number { return 2; }
    }

    function helper() {}
}

class Outside extends Shapes.Square {}

class Plain {}
'''


@pytest.fixture
def sample_module_code() -> str:
    """ES module file importing its base classes."""
    return '''import { Base, Mixin as Helper } from "some-module";
import * as path from "path";
import Default from "./default";
import fs = require("fs");
import "./side-effect";

export class Local {}

export class Derived extends Base {}
export class Aliased extends Helper {}
export class Sibling extends Local {}
export class FromDefault extends Default {}
export class Broken extends Missing {}
'''


@pytest.fixture
def temp_typescript_file(tmp_path: Path, sample_namespace_code: str) -> Path:
    """Create a temporary TypeScript file for testing."""
    file_path = tmp_path / "shapes.ts"
    file_path.write_text(sample_namespace_code)
    return file_path


@pytest.fixture
def temp_project(tmp_path: Path, sample_namespace_code: str, sample_module_code: str) -> Path:
    """Create a temporary TypeScript project for testing."""
    project_dir = tmp_path / "project"
    (project_dir / "src" / "app").mkdir(parents=True)
    (project_dir / "src" / "shapes.ts").write_text(sample_namespace_code)
    (project_dir / "src" / "app" / "models.ts").write_text(sample_module_code)
    (project_dir / "src" / "view.tsx").write_text(
        "export class View { render() { return <div />; } }\n"
    )
    (project_dir / "src" / "globals.d.ts").write_text("declare class Ambient {}\n")

    vendored = project_dir / "node_modules" / "lib"
    vendored.mkdir(parents=True)
    (vendored / "index.ts").write_text("export class Vendored {}\n")

    (project_dir / "README.md").write_text("# project\n")
    return project_dir
