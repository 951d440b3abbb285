"""
Pass manager tests: dependency ordering, context analysis storage, and the
three-pass deferred import pipeline driven through a table resolver.
"""

import pytest

from deferload.analysis.type_resolver import MappingTypeResolver
from deferload.passes import (
    BasePass, CallSiteRewritePass, ImportClassificationPass, ImportPruningPass, ModuleCtxt,
    PassManager, create_transformer,
)
from deferload.passes.deferred_imports import DEFAULT_PASSES
from tests.test_utils import parse, print_js


class Recorder(BasePass):
    order = []

    def run(self, module, ctx):
        Recorder.order.append(type(self).__name__)
        return module


class First(Recorder):
    requires = []


class Second(Recorder):
    requires = [First]


class Third(Recorder):
    requires = [First, Second]


class Loop(Recorder):
    pass


class Back(Recorder):
    requires = [Loop]


Loop.requires = [Back]


@pytest.fixture
def ctx():
    return ModuleCtxt(MappingTypeResolver({}), file="test.ts")


class TestPassManager:

    def setup_method(self):
        Recorder.order = []

    def test_dependency_order(self, ctx):
        manager = PassManager()
        for pass_class in (Third, Second, First):
            manager.register_pass(pass_class)
        module = parse("f();")
        assert manager.run_all(module, ctx) is module
        assert Recorder.order == ["First", "Second", "Third"]

    def test_missing_dependency(self, ctx):
        manager = PassManager()
        manager.register_pass(Second)
        with pytest.raises(RuntimeError, match="First"):
            manager.run_all(parse("f();"), ctx)

    def test_circular_dependency(self, ctx):
        manager = PassManager()
        manager.register_pass(Loop)
        manager.register_pass(Back)
        with pytest.raises(RuntimeError, match="Circular"):
            manager.run_all(parse("f();"), ctx)

    def test_default_passes_order(self):
        manager = PassManager()
        for pass_class in reversed(DEFAULT_PASSES):
            manager.register_pass(pass_class)
        assert manager._topological_sort() == [
            ImportClassificationPass, CallSiteRewritePass, ImportPruningPass,
        ]


class TestModuleCtxt:

    def test_analysis_storage(self, ctx):
        assert not ctx.has_analysis(First)
        with pytest.raises(RuntimeError, match="First"):
            ctx.get_analysis(First)
        ctx.set_analysis(First, [1])
        assert ctx.has_analysis(First)
        assert ctx.get_analysis(First) == [1]


class TestDeferredImportTransformer:

    SOURCE = 'import { x, y } from "./a";\nasync function f() { await x(); y(); }'

    def test_pipeline(self):
        transformer = create_transformer(MappingTypeResolver({"x": True, "y": False}))
        js = print_js(transformer(parse(self.SOURCE)))
        assert js.strip() == "\n".join([
            'import { y } from "./a";',
            "async function f() {",
            '    await import("./a").then(m => m.x());',
            "    y();",
            "}",
        ])

    def test_no_candidates_leaves_module_untouched(self):
        module = parse(self.SOURCE)
        transformer = create_transformer(MappingTypeResolver({}))
        assert transformer.transform_module(module) is module

    def test_retained_binding_skips_pruning(self):
        module = parse('import { x } from "./a";\nx();\nconst g = x;')
        transformer = create_transformer(MappingTypeResolver({"x": True}))
        js = print_js(transformer(module))
        assert js.startswith('import { x } from "./a";')
        assert 'import("./a").then(m => m.x());' in js
