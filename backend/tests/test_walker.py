"""
Tests for the Structural Walker.

Requires Python 3.11+.
"""

from collections.abc import Iterator

import pytest

from structure.diagnostics import DiagnosticSink
from structure.models import (
    Class,
    Element,
    ImportedModule,
    Lifetime,
    Method,
    Module,
    Property,
    Visibility,
)
from structure.resolver import TreeSitterSymbolResolver
from structure.typescript_parser import TypeScriptParser
from structure.walker import collect_information


def iter_elements(element: Element) -> Iterator[Element]:
    yield element
    for child in element.children:
        yield from iter_elements(child)


def child(element: Element, name: str, kind: type[Element] = Element) -> Element:
    return next(c for c in element.children if c.name == name and isinstance(c, kind))


class TestModuleStructure:
    """Root module and namespace handling."""

    def test_root_module_named_after_file(self, parser: TypeScriptParser, sample_module_code: str):
        """Test the root module takes the file stem and directory."""
        module = parser.parse_content(sample_module_code, "src/app/models.ts").module

        assert isinstance(module, Module)
        assert module.name == "models"
        assert module.path == "src/app"
        assert module.parent is None

    def test_declaration_file_keeps_inner_extension(self, parser: TypeScriptParser):
        """Test only the last extension is dropped from the module name."""
        module = parser.parse_content("declare class A {}", "types/globals.d.ts").module

        assert module.name == "globals.d"
        assert module.path == "types"

    def test_namespace_becomes_module(self, parser: TypeScriptParser, sample_namespace_code: str):
        """Test namespaces nest as modules with their declarations inside."""
        module = parser.parse_content(sample_namespace_code, "shapes.ts").module

        assert [c.name for c in module.children] == ["Shapes", "Outside", "Plain"]
        shapes = module.children[0]
        assert isinstance(shapes, Module)
        assert shapes.visibility is Visibility.PRIVATE
        assert [c.name for c in shapes.children] == ["Shape", "Circle", "Square", "helper"]

    def test_dotted_namespace_nests_modules(self, parser: TypeScriptParser):
        """Test `namespace A.B` yields module B inside module A."""
        module = parser.parse_content("export namespace A.B {\n    class C {}\n}\n").module

        (a,) = module.children
        assert isinstance(a, Module) and a.name == "A"
        assert a.visibility is Visibility.PUBLIC
        (b,) = a.children
        assert isinstance(b, Module) and b.name == "B"
        assert b.visibility is Visibility.PRIVATE
        assert [c.name for c in b.children] == ["C"]
        assert b.children[0].parent is b

    def test_exported_namespace_is_public(self, parser: TypeScriptParser):
        """Test an exported namespace takes public visibility."""
        module = parser.parse_content("export namespace Api { class Client {} }").module

        api = child(module, "Api", Module)
        assert api.visibility is Visibility.PUBLIC
        assert [c.name for c in api.children] == ["Client"]

    def test_declaration_order_preserved(self, parser: TypeScriptParser):
        """Test children keep source declaration order."""
        module = parser.parse_content("class A {}\nclass B {}\nclass C {}\n").module

        assert [c.name for c in module.children] == ["A", "B", "C"]

    def test_unrecognised_nodes_are_transparent(self, parser: TypeScriptParser):
        """Test declarations under unmodelled statements attach to the current parent."""
        source = "if (ready) {\n    class Hidden {}\n}\nclass Visible {}\n"
        module = parser.parse_content(source).module

        assert [c.name for c in module.children] == ["Hidden", "Visible"]
        assert module.children[0].visibility is Visibility.PRIVATE


class TestImports:
    """Import declarations become ImportedModule edges."""

    def test_import_edges(self, parser: TypeScriptParser, sample_module_code: str):
        """Test import declarations and import-equals aliases."""
        module = parser.parse_content(sample_module_code, "src/app/models.ts").module

        imports = [c for c in module.children if isinstance(c, ImportedModule)]
        assert [i.name for i in imports] == [
            "some-module",
            "path",
            "./default",
            "fs",
            "./side-effect",
        ]
        assert all(i.children == [] for i in imports)

    def test_import_alias_uses_alias_name(self, parser: TypeScriptParser):
        """Test `import x = A.B` is modelled by its alias."""
        source = "namespace Lib { export class Base {} }\nimport Alias = Lib.Base;\n"
        module = parser.parse_content(source).module

        alias = child(module, "Alias", ImportedModule)
        assert alias.parent is module


class TestClasses:
    """Class declarations."""

    @pytest.fixture
    def shapes(self, parser: TypeScriptParser, sample_namespace_code: str) -> Module:
        module = parser.parse_content(sample_namespace_code, "shapes.ts").module
        return child(module, "Shapes", Module)

    def test_abstract_class(self, shapes: Module):
        """Test the abstract keyword sets is_abstract."""
        shape = child(shapes, "Shape", Class)

        assert shape.is_abstract is True
        assert shape.extends is None

    def test_namespace_member_defaults_private(self, shapes: Module):
        """Test unexported namespace members are private, exported ones public."""
        assert child(shapes, "Circle").visibility is Visibility.PRIVATE
        assert child(shapes, "Square").visibility is Visibility.PUBLIC
        assert child(shapes, "helper").visibility is Visibility.PRIVATE

    def test_local_base_is_namespace_qualified(self, shapes: Module):
        """Test a base declared in the same namespace resolves to its namespace path."""
        circle = child(shapes, "Circle", Class)
        square = child(shapes, "Square", Class)

        assert circle.extends.parts == ["Shapes", "Shape"]
        assert square.extends.parts == ["Shapes", "Shape"]

    def test_member_expression_base(self, parser: TypeScriptParser, sample_namespace_code: str):
        """Test `extends Shapes.Square` resolves through the namespace."""
        module = parser.parse_content(sample_namespace_code, "shapes.ts").module

        outside = child(module, "Outside", Class)
        assert outside.extends.parts == ["Shapes", "Square"]
        assert child(module, "Plain", Class).extends is None

    def test_imported_bases(self, parser: TypeScriptParser, sample_module_code: str):
        """Test bases from named imports are prefixed with the module specifier."""
        module = parser.parse_content(sample_module_code, "src/app/models.ts").module

        assert child(module, "Derived", Class).extends.parts == ["some-module", "Base"]
        assert child(module, "Aliased", Class).extends.parts == ["some-module", "Mixin"]
        assert child(module, "FromDefault", Class).extends.parts == ["Default"]

    def test_local_base_in_es_module_drops_quotes(
        self, parser: TypeScriptParser, sample_module_code: str
    ):
        """Test the quoted module name of an ES module file is unquoted."""
        module = parser.parse_content(sample_module_code, "src/app/models.ts").module

        assert child(module, "Sibling", Class).extends.parts == ["src/app/models", "Local"]

    def test_unexported_local_base_has_no_module_prefix(self, parser: TypeScriptParser):
        """Test only exported declarations of an ES module carry its name."""
        source = 'import "./side";\nclass Base {}\nclass D extends Base {}\n'
        module = parser.parse_content(source, "main.ts").module

        assert child(module, "D", Class).extends.parts == ["Base"]

    def test_unresolved_base(self, parser: TypeScriptParser, sample_module_code: str):
        """Test an unknown base yields the sentinel and exactly one warning."""
        result = parser.parse_content(sample_module_code, "src/app/models.ts")

        broken = child(result.module, "Broken", Class)
        assert broken.extends.parts == ["unknown?"]
        assert broken.extends.is_unknown
        assert len(result.warnings) == 1
        assert result.warnings[0].message == "Unable to resolve type: 'Missing'"
        assert result.warnings[0].line == 13

    def test_only_first_extends_entry_used(self, parser: TypeScriptParser):
        """Test the first listed base wins."""
        source = "class A {}\nclass B {}\nclass C extends A, B {}\n"
        module = parser.parse_content(source).module

        assert child(module, "C", Class).extends.parts == ["A"]


class TestMembers:
    """Properties, accessors and methods."""

    @pytest.fixture
    def shape(self, parser: TypeScriptParser, sample_namespace_code: str) -> Class:
        module = parser.parse_content(sample_namespace_code, "shapes.ts").module
        return child(child(module, "Shapes"), "Shape", Class)

    def test_member_order(self, shape: Class):
        """Test class members keep declaration order, accessors included."""
        assert [c.name for c in shape.children] == [
            "count",
            "name",
            "tags",
            "callback",
            "origin",
            "data",
            "handler",
            "area",
            "describe",
            "label",
            "label",
            "create",
        ]

    def test_property_fields(self, shape: Class):
        """Test property visibility, lifetime and type names."""
        count = child(shape, "count", Property)
        assert count.lifetime is Lifetime.STATIC
        assert count.visibility is Visibility.PUBLIC
        assert count.type_name == "number"

        name = child(shape, "name", Property)
        assert name.visibility is Visibility.PROTECTED
        assert name.lifetime is Lifetime.INSTANCE
        assert name.type_name == "string"

        tags = child(shape, "tags", Property)
        assert tags.visibility is Visibility.PRIVATE
        assert tags.type_name == "Array&lt;string&gt;"

        assert child(shape, "callback", Property).type_name == "function"
        assert child(shape, "origin", Property).type_name == "Point"
        assert child(shape, "data", Property).type_name == "undefined"

    def test_accessors_are_separate_properties(self, shape: Class):
        """Test a getter and setter pair yields two properties with one flag each."""
        getter, setter = [c for c in shape.children if c.name == "label"]

        assert isinstance(getter, Property) and isinstance(setter, Property)
        assert (getter.has_getter, getter.has_setter) == (True, False)
        assert (setter.has_getter, setter.has_setter) == (False, True)
        assert getter.type_name == "string"
        assert setter.type_name == "undefined"

    def test_plain_property_has_no_accessor_flags(self, shape: Class):
        """Test fields are neither getters nor setters."""
        count = child(shape, "count", Property)
        assert count.has_getter is False
        assert count.has_setter is False

    def test_methods(self, shape: Class):
        """Test method abstractness, visibility and lifetime."""
        area = child(shape, "area", Method)
        assert area.is_abstract is True
        assert area.visibility is Visibility.PUBLIC

        describe = child(shape, "describe", Method)
        assert describe.is_abstract is False
        assert describe.lifetime is Lifetime.INSTANCE

        create = child(shape, "create", Method)
        assert create.visibility is Visibility.PUBLIC
        assert create.lifetime is Lifetime.STATIC

    def test_constructor_is_transparent(self, parser: TypeScriptParser):
        """Test constructors create nothing and their bodies are still walked."""
        source = (
            "class A {\n"
            "    constructor() {\n"
            "        function inner() {}\n"
            "    }\n"
            "    run() {}\n"
            "}\n"
        )
        a = child(parser.parse_content(source).module, "A", Class)

        assert [(type(c), c.name) for c in a.children] == [(Method, "inner"), (Method, "run")]
        assert a.children[0].parent is a
        assert a.children[0].visibility is Visibility.PRIVATE

    def test_overload_signatures(self, parser: TypeScriptParser):
        """Test each overload signature is a method of its own."""
        source = "class Y {\n    bar(a: string): void;\n    bar(a: any) {}\n}\n"
        y = child(parser.parse_content(source).module, "Y", Class)

        assert [(type(c), c.name) for c in y.children] == [(Method, "bar"), (Method, "bar")]

    def test_ambient_class_members(self, parser: TypeScriptParser):
        """Test members of a declared class are modelled without bodies."""
        source = (
            "declare class X {\n"
            "    foo(): void;\n"
            "    get size(): number;\n"
            "    static make(): X;\n"
            "}\n"
        )
        x = child(parser.parse_content(source).module, "X", Class)

        assert [c.name for c in x.children] == ["foo", "size", "make"]
        assert isinstance(child(x, "foo"), Method)
        size = child(x, "size", Property)
        assert size.has_getter is True
        assert size.type_name == "number"
        assert child(x, "make", Method).lifetime is Lifetime.STATIC

    def test_function_signatures(self, parser: TypeScriptParser):
        """Test declared functions and overloads become methods."""
        source = (
            "declare function f(): void;\n"
            "function g(a: string): void;\n"
            "function g(a: any) {}\n"
        )
        module = parser.parse_content(source).module

        assert [(type(c), c.name) for c in module.children] == [
            (Method, "f"),
            (Method, "g"),
            (Method, "g"),
        ]

    def test_interface_members_not_modelled(self, parser: TypeScriptParser):
        """Test method signatures outside class bodies create nothing."""
        source = "interface I {\n    m(): void;\n    get n(): number;\n}\n"
        assert parser.parse_content(source).module.children == []

    def test_string_literal_member_names(self, parser: TypeScriptParser):
        """Test quoted member names are unquoted."""
        source = "class Q {\n    'a-b': string;\n    \"c\"() {}\n}\n"
        q = child(parser.parse_content(source).module, "Q", Class)

        assert [c.name for c in q.children] == ["a-b", "c"]
        assert child(q, "a-b", Property).type_name == "string"

    def test_abstract_method_independent_of_class(self, parser: TypeScriptParser):
        """Test a concrete method in an abstract class is not abstract."""
        source = "abstract class A {\n    abstract run(): void;\n    stop(): void {}\n}\n"
        module = parser.parse_content(source).module

        a = child(module, "A", Class)
        assert child(a, "run", Method).is_abstract is True
        assert child(a, "stop", Method).is_abstract is False

    def test_leaves_never_have_children(self, parser: TypeScriptParser, sample_namespace_code: str):
        """Test nested functions and object literal methods are not walked."""
        module = parser.parse_content(sample_namespace_code, "shapes.ts").module

        leaves = [e for e in iter_elements(module) if isinstance(e, (Property, Method))]
        assert leaves
        assert all(leaf.children == [] for leaf in leaves)
        names = {e.name for e in iter_elements(module)}
        assert "nested" not in names
        assert "run" not in names

    def test_top_level_function(self, parser: TypeScriptParser):
        """Test free functions become methods of the module."""
        module = parser.parse_content("function main() {}\nexport function run() {}\n").module

        main, run = module.children
        assert isinstance(main, Method) and main.visibility is Visibility.PRIVATE
        assert isinstance(run, Method) and run.visibility is Visibility.PUBLIC


class TestTreeInvariants:
    """Parent links and determinism."""

    def test_parent_links(self, parser: TypeScriptParser, sample_namespace_code: str):
        """Test every child points back at the element that owns it."""
        module = parser.parse_content(sample_namespace_code, "shapes.ts").module

        for element in iter_elements(module):
            for c in element.children:
                assert c.parent is element

    def test_repeated_extraction_is_identical(
        self, parser: TypeScriptParser, sample_namespace_code: str, sample_module_code: str
    ):
        """Test extraction is deterministic."""
        for source, path in ((sample_namespace_code, "shapes.ts"), (sample_module_code, "m.ts")):
            first = parser.parse_content(source, path).module
            second = parser.parse_content(source, path).module
            assert first == second
            assert first.as_dict == second.as_dict

    def test_collect_information_with_own_sink(self, parser: TypeScriptParser):
        """Test callers can pass their own diagnostics sink."""
        tree = parser.parse_tree("class A extends Nowhere {}")
        resolver = TreeSitterSymbolResolver(tree.root_node, module_name="a")
        sink = DiagnosticSink()

        module = collect_information(tree.root_node, "a.ts", resolver, sink)

        assert child(module, "A", Class).extends.is_unknown
        assert len(sink) == 1
