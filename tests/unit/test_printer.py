"""
Printer tests: Module AST -> JavaScript text.
"""

import pytest
from deferload.shared.nodes import (
    ArrowFunction, BindingIdentifier, Call, DynamicImport, ExpressionStatement,
    FunctionExpression, Identifier, Index, Member, Module, ObjectLiteral, Parameter,
    Property, StringLiteral, Block, TypeReference,
)
from tests.test_utils import parse, print_js


def roundtrip(source: str) -> str:
    return print_js(parse(source)).strip()


class TestTypeErasure:

    def test_parameter_and_return_types_removed(self):
        assert roundtrip("function f(a: number, b?: string): Promise<void> { return a; }") == \
            "function f(a, b) {\n    return a;\n}"

    def test_declarator_type_removed(self):
        assert roundtrip("const x: Array<string> = [];") == "const x = [];"

    def test_arrow_return_type_removed(self):
        assert roundtrip("const f = async (a: number): Promise<number> => a;") == \
            "const f = async a => a;"


class TestLayout:

    def test_nested_blocks_indent_four_spaces(self):
        source = "function f() { if (a) { while (b) { g(); } } }"
        assert roundtrip(source) == (
            "function f() {\n"
            "    if (a) {\n"
            "        while (b) {\n"
            "            g();\n"
            "        }\n"
            "    }\n"
            "}"
        )

    def test_else_on_its_own_line(self):
        assert roundtrip("if (a) { b(); } else { c(); }") == \
            "if (a) {\n    b();\n}\nelse {\n    c();\n}"

    def test_empty_block(self):
        assert roundtrip("function f() {}") == "function f() { }"

    def test_blank_lines_dropped(self):
        assert roundtrip("a();\n\n\nb();") == "a();\nb();"

    def test_export_default_function_has_no_semicolon(self):
        assert roundtrip("export default async function () { return true; }") == \
            "export default async function () {\n    return true;\n}"

    def test_export_default_arrow_keeps_semicolon(self):
        assert roundtrip("export default async () => { return true; };") == \
            "export default async () => {\n    return true;\n};"

    def test_import_forms(self):
        source = (
            'import w, { x, y as z } from "./a";\n'
            "import * as ns from './b';\n"
            'import "./c";\n'
        )
        assert roundtrip(source) == source.strip()

    def test_export_forms(self):
        source = 'export { a, b as c };\nexport { default as x } from "./a";\nexport * from "./b";'
        assert roundtrip(source) == source


class TestExpressions:

    def test_precedence_parentheses_kept_where_needed(self):
        assert roundtrip("x = (a + b) * c;") == "x = (a + b) * c;"
        assert roundtrip("x = a + (b * c);") == "x = a + b * c;"
        assert roundtrip("x = a - (b - c);") == "x = a - (b - c);"

    def test_await_of_binary_is_parenthesized(self):
        assert roundtrip("async function f() { return await (a || b); }") == \
            "async function f() {\n    return await (a || b);\n}"

    def test_object_literal_statement_is_parenthesized(self, printer):
        stmt = ExpressionStatement(Member(ObjectLiteral([Property("a", Identifier("a"), shorthand=True)]), "a"))
        assert printer.print_module(Module([stmt])).strip() == "({ a }.a);"

    def test_arrow_returning_object_is_parenthesized(self):
        assert roundtrip("const f = () => ({ a: 1 });") == "const f = () => ({ a: 1 });"

    def test_single_plain_parameter_has_no_parentheses(self, printer):
        arrow = ArrowFunction([Parameter(BindingIdentifier("m"))], Call(Member(Identifier("m"), "x"), []))
        stmt = ExpressionStatement(Call(Member(DynamicImport(StringLiteral("./file1")), "then"), [arrow]))
        assert printer.print_module(Module([stmt])).strip() == \
            'import("./file1").then(m => m.x());'

    def test_defaulted_parameter_keeps_parentheses(self):
        assert roundtrip("const f = (a = 1) => a;") == "const f = (a = 1) => a;"

    def test_bracket_access(self, printer):
        stmt = ExpressionStatement(Call(Index(Identifier("m"), StringLiteral("my-export")), []))
        assert printer.print_module(Module([stmt])).strip() == 'm["my-export"]();'

    def test_anonymous_function_expression(self, printer):
        fn = FunctionExpression(name=None, params=[], body=Block([]))
        stmt = ExpressionStatement(Call(fn, []))
        assert printer.print_module(Module([stmt])).strip() == "(function () { }());"

    def test_string_quotes_preserved(self):
        assert roundtrip("f('a', \"b\");") == "f('a', \"b\");"

    def test_unary_and_conditional(self):
        assert roundtrip("x = !a ? -b : typeof c;") == "x = !a ? -b : typeof c;"

    def test_spread_and_destructuring(self):
        assert roundtrip("const { a, b: [c, d], ...rest } = f(...args);") == \
            "const { a, b: [c, d], ...rest } = f(...args);"

    def test_empty_module(self, printer):
        assert printer.print_module(Module([])) == ""


def test_type_nodes_are_not_printable(printer):
    with pytest.raises(TypeError):
        printer.print_node(TypeReference("Promise"))
