"""
ScopeStack tests: shadow sets and the subtract-then-merge rule on frame exit.
"""

from deferload.shared.scope import ScopeKind, ScopeStack


class TestScopeStack:

    def test_shadow_sets_accumulate_downwards(self):
        stack = ScopeStack()
        with stack.frame(ScopeKind.FUNCTION, {"x"}):
            with stack.frame(ScopeKind.BLOCK, {"y"}) as inner:
                assert inner.shadowed == {"x", "y"}
                assert stack.is_shadowed("x")
            assert not stack.is_shadowed("y")
        assert not stack.is_shadowed("x")

    def test_usage_escapes_unshadowing_frames(self):
        stack = ScopeStack()
        with stack.frame(ScopeKind.FUNCTION):
            with stack.frame(ScopeKind.BLOCK):
                stack.record("x")
        assert stack.root.still_needed == {"x"}

    def test_usage_stops_at_shadowing_frame(self):
        stack = ScopeStack()
        with stack.frame(ScopeKind.FUNCTION, {"x"}):
            with stack.frame(ScopeKind.BLOCK):
                stack.record("x")
                stack.record("y")
        assert stack.root.still_needed == {"y"}

    def test_frames_popped_on_error(self):
        stack = ScopeStack()
        try:
            with stack.frame(ScopeKind.BLOCK):
                stack.record("x")
                raise ValueError("boom")
        except ValueError:
            pass
        assert stack.depth() == 1
        assert stack.current.kind is ScopeKind.MODULE
        assert stack.root.still_needed == {"x"}
