"""
End-to-end tests: TypeScript modules in, JavaScript modules out.

Each test compiles a small program through CompilerDriver, with bindings
resolved against the program's own export declarations, and compares the
emitted modules with the expected text.
"""

import pytest
from tests.test_utils import assert_outputs_equal, compile_modules


FILE1_ASYNC_X = """
export async function x() { 
    return true; 
}
"""

FILE1_ASYNC_X_JS = """
export async function x() {
    return true;
}
"""


class TestSingleImports:
    """One candidate per module."""

    def test_single_async_import_removes_import(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";

async function init() {
    const y = await x();
}
init();
    """,
        }
        expected = {
            "file1.js": FILE1_ASYNC_X_JS,
            "file2.js": """
async function init() {
    const y = await import("./file1").then(m => m.x());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_alias_reads_export_name(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x as y } from "./file1";

async function init() {
    const z = await y();
}
init();
    """,
        }
        expected = {
            "file1.js": FILE1_ASYNC_X_JS,
            "file2.js": """
async function init() {
    const z = await import("./file1").then(m => m.x());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_async_const_arrow_export(self, compiler):
        code = {
            "file1.ts": """
export const x = async () => {
    return true;
};
  """,
            "file2.ts": """
import { x } from "./file1";
  
async function init() {
    const y = await x();
}
init();
      """,
        }
        expected = {
            "file1.js": """
export const x = async () => {
    return true;
};
""",
            "file2.js": """
async function init() {
    const y = await import("./file1").then(m => m.x());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_async_default_arrow_export(self, compiler):
        code = {
            "file1.ts": """
export default async () => {
    return true;
};
  """,
            "file2.ts": """
import x from "./file1";
  
async function init() {
    const y = await x();
}
init();
      """,
        }
        expected = {
            "file1.js": """
export default async () => {
    return true;
};
""",
            "file2.js": """
async function init() {
    const y = await import("./file1").then(m => m.default());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))


class TestMultipleImports:
    """Several candidates, default and named bindings mixed."""

    def test_double_async_import_removes_import(self, compiler):
        code = {
            "file1.ts": """
export async function x() { 
    return true; 
}
export async function y() { 
    return true; 
}
  """,
            "file2.ts": """
import { x, y } from "./file1";

async function init() {
    const z = await x();
    const q = await y();
}
init();
      """,
        }
        expected = {
            "file1.js": """
export async function x() {
    return true;
}
export async function y() {
    return true;
}
""",
            "file2.js": """
async function init() {
    const z = await import("./file1").then(m => m.x());
    const q = await import("./file1").then(m => m.y());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_default_and_named_imports_removed(self, compiler):
        code = {
            "file1.ts": """
export default async function () {
    return true;
}
export async function x() { 
    return true; 
}
export async function y() { 
    return true; 
}
  """,
            "file2.ts": """
import w, { x, y } from "./file1";

async function init() {
    const o = await w();
    const z = await x();
    const q = await y();
}
init();
      """,
        }
        expected = {
            "file1.js": """
export default async function () {
    return true;
}
export async function x() {
    return true;
}
export async function y() {
    return true;
}
""",
            "file2.js": """
async function init() {
    const o = await import("./file1").then(m => m.default());
    const z = await import("./file1").then(m => m.x());
    const q = await import("./file1").then(m => m.y());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_sync_import_is_kept(self, compiler):
        code = {
            "file1.ts": """
export async function x() { 
    return true; 
}
export function y() {
    return false;
}
""",
            "file2.ts": """
import { x, y } from "./file1";
async function init() {
    const z = await x();
}
init();
y();
    """,
        }
        expected = {
            "file1.js": """
export async function x() {
    return true;
}
export function y() {
    return false;
}
""",
            "file2.js": """
import { y } from "./file1";
async function init() {
    const z = await import("./file1").then(m => m.x());
}
init();
y();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))


class TestStillNeeded:
    """A non-call usage keeps the static import next to the rewritten calls."""

    def test_default_passed_as_value_keeps_import(self, compiler):
        code = {
            "file1.ts": """
export default async () => {
    return true;
};
  """,
            "file2.ts": """
import x from "./file1"; 
async function init() {
    const y = await x();
}
function z(y: any) {
    return y;
}
init();
z(x);
      """,
        }
        expected = {
            "file2.js": """
import x from "./file1";
async function init() {
    const y = await import("./file1").then(m => m.default());
}
function z(y) {
    return y;
}
init();
z(x);
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_named_passed_as_value_keeps_import(self, compiler):
        code = {
            "file1.ts": """
export async function x() { 
    return true; 
}
export function q(x: any) {
    return x;
}
""",
            "file2.ts": """
import { x, q } from "./file1";

async function init() {
    const y = await x();
}
init();
q(x);
    """,
        }
        expected = {
            "file1.js": """
export async function x() {
    return true;
}
export function q(x) {
    return x;
}
""",
            "file2.js": """
import { x, q } from "./file1";
async function init() {
    const y = await import("./file1").then(m => m.x());
}
init();
q(x);
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))


class TestShadowing:
    """Parameters and local declarations redeclaring a candidate name."""

    def test_parameter_and_local_shadows_still_remove_import(self, compiler):
        code = {
            "file1.ts": """
export default async function () {
    return true;
}
export async function x() {
    return true;
}
""",
            "file2.ts": """
import y, { x } from "./file1";
async function init() {
    const q = await y();
    const w = await x();
}
function z(y: any) {
    const x = 1;
    let i = 2;
    var o = 3;
    return { x, y };
}
init();
    """,
        }
        expected = {
            "file2.js": """
async function init() {
    const q = await import("./file1").then(m => m.default());
    const w = await import("./file1").then(m => m.x());
}
function z(y) {
    const x = 1;
    let i = 2;
    var o = 3;
    return { x, y };
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_shadowing_parameter_call_not_rewritten(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
function run(x: any) {
    return x();
}
async function init() {
    await x();
}
""",
        }
        expected = {
            "file2.js": """
function run(x) {
    return x();
}
async function init() {
    await import("./file1").then(m => m.x());
}
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_shadow_does_not_leak_to_sibling(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
function a(x: any) {
    return x;
}
function b() {
    return x;
}
""",
        }
        expected = {
            "file2.js": """
import { x } from "./file1";
function a(x) {
    return x;
}
function b() {
    return x;
}
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_parameter_default_sees_import_not_body_declaration(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
async function f(p = x()) {
    const x = 1;
    return p;
}
f();
""",
        }
        expected = {
            "file2.js": """
async function f(p = import("./file1").then(m => m.x())) {
    const x = 1;
    return p;
}
f();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_nested_function_declaration_shadows(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
function run() {
    function x() {
        return 1;
    }
    return x();
}
""",
        }
        expected = {
            "file2.js": """
function run() {
    function x() {
        return 1;
    }
    return x();
}
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))


class TestReExports:

    def test_default_reexported_under_name(self, compiler):
        code = {
            "file1.ts": """
export default async () => {
    return true;
};
    """,
            "file2.ts": """
export { default as x } from "./file1";
    """,
            "file3.ts": """
import { x } from "./file2";

async function init() {
    const y = await x();
}
init();
    """,
        }
        expected = {
            "file1.js": """
export default async () => {
    return true;
};
""",
            "file2.js": """
export { default as x } from "./file1";
""",
            "file3.js": """
async function init() {
    const y = await import("./file2").then(m => m.x());
}
init();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_export_star_forwards_named(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "index.ts": 'export * from "./file1";\n',
            "main.ts": """
import { x } from "./index";
x();
""",
        }
        expected = {
            "main.js": """
import("./index").then(m => m.x());
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_reexport_cycle_is_not_deferred(self, compiler):
        code = {
            "a.ts": 'export { x } from "./b";\n',
            "b.ts": 'export { x } from "./a";\n',
            "main.ts": """
import { x } from "./a";
x();
""",
        }
        expected = {
            "main.js": """
import { x } from "./a";
x();
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))


class TestPipelineProperties:

    def test_second_run_is_noop(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
async function init() {
    const y = await x(1, "two");
}
init();
""",
        }
        first = compile_modules(code, compiler)
        second = compile_modules(
            {"file1.js": first.outputs["file1.js"], "file2.js": first.outputs["file2.js"]},
            compiler,
        )
        assert second.outputs["file2.js"] == first.outputs["file2.js"]

    def test_arguments_keep_order(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
x(a, b + 1, ...rest);
""",
        }
        result = compile_modules(code, compiler)
        assert result.outputs["file2.js"].strip() == \
            'import("./file1").then(m => m.x(a, b + 1, ...rest));'

    def test_nested_shadowed_call_still_prunes(self, compiler):
        code = {
            "file1.ts": FILE1_ASYNC_X,
            "file2.ts": """
import { x } from "./file1";
function outer() {
    function inner(x: any) {
        return x();
    }
    return inner;
}
""",
        }
        expected = {
            "file2.js": """
function outer() {
    function inner(x) {
        return x();
    }
    return inner;
}
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))

    def test_bare_package_import_untouched(self, compiler):
        code = {
            "main.ts": """
import { get } from "axios";
get("/");
""",
        }
        expected = {
            "main.js": """
import { get } from "axios";
get("/");
""",
        }
        assert_outputs_equal(expected, compile_modules(code, compiler))


def test_parse_error_fails_compilation(session_compiler):
    result = session_compiler.compile({"bad.ts": "const y = await );\n"})
    assert not result.success
    assert result.has_errors()
    errors = result.get_errors()
    assert len(errors) == 1
    assert "error[E0001]" in errors[0]
    assert "bad.ts:1:" in errors[0]


@pytest.mark.parametrize("name,expected", [
    ("file.ts", "file.js"),
    ("view.tsx", "view.js"),
    ("plain.js", "plain.js"),
])
def test_output_names(session_compiler, name, expected):
    result = session_compiler.compile({name: "f();\n"})
    assert list(result.outputs) == [expected]
