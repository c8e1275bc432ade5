"""Tests for environment frames."""

import pytest

from conftest import tok

from treelox.interpret import UNASSIGNED, Environment, LoxRuntimeError


class TestByName:
    def test_define_and_get(self):
        env = Environment()
        env.define("a", 1.0)
        assert env.get(tok("a")) == 1.0

    def test_get_walks_outward(self):
        outer = Environment()
        outer.define("a", "outer")
        inner = Environment(outer)
        assert inner.get(tok("a")) == "outer"

    def test_define_shadows(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(outer)
        inner.define("a", 2.0)
        assert inner.get(tok("a")) == 2.0
        assert outer.get(tok("a")) == 1.0

    def test_redefine_overwrites(self):
        env = Environment()
        env.define("a", 1.0)
        env.define("a", 2.0)
        assert env.get(tok("a")) == 2.0

    def test_nil_is_a_value(self):
        env = Environment()
        env.define("a", None)
        assert env.get(tok("a")) is None

    def test_get_undefined(self):
        with pytest.raises(LoxRuntimeError, match="Undefined variable 'nope'."):
            Environment().get(tok("nope", line=4))

    def test_get_unassigned(self):
        env = Environment()
        env.define("A", UNASSIGNED)
        with pytest.raises(LoxRuntimeError, match="has not been assigned a value"):
            env.get(tok("A"))

    def test_assign_in_enclosing(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(outer)
        inner.assign(tok("a"), 5.0)
        assert outer.values["a"] == 5.0
        assert "a" not in inner.values

    def test_assign_never_declares(self):
        env = Environment()
        with pytest.raises(LoxRuntimeError) as excinfo:
            env.assign(tok("a", line=9), 1.0)
        assert excinfo.value.message == "Undefined variable 'a'."
        assert excinfo.value.line == 9
        assert "a" not in env.values


class TestByDistance:
    def _chain(self):
        root = Environment()
        root.define("x", "root")
        middle = Environment(root)
        middle.define("x", "middle")
        leaf = Environment(middle)
        return root, middle, leaf

    def test_get_at(self):
        _root, _middle, leaf = self._chain()
        assert leaf.get_at(1, "x") == "middle"
        assert leaf.get_at(2, "x") == "root"

    def test_get_at_does_not_search(self):
        _root, _middle, leaf = self._chain()
        assert leaf.get_at(0, "x") is None

    def test_get_at_unassigned_is_nil(self):
        env = Environment()
        env.define("x", UNASSIGNED)
        assert env.get_at(0, "x") is None

    def test_assign_at(self):
        root, middle, leaf = self._chain()
        leaf.assign_at(2, "x", "changed")
        assert root.values["x"] == "changed"
        assert middle.values["x"] == "middle"

    def test_ancestor_and_depth(self):
        root, middle, leaf = self._chain()
        assert leaf.ancestor(0) is leaf
        assert leaf.ancestor(2) is root
        assert leaf.depth() == 2
        assert root.depth() == 0
