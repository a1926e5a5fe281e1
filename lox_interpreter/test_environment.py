import pytest

from .environment import Environment
from .errors import LoxRuntimeError
from .tokens import Token, TokenType


def name(text, line=1):
    # Environment methods take the identifier token so errors can carry a line.
    return Token(TokenType.IDENTIFIER, text, None, line)


def test_define_then_get():
    environment = Environment()
    environment.define(name("a"), 1.0)
    assert environment.get(name("a")) == 1.0
    assert "a" in environment


def test_redefinition_in_same_scope_fails():
    environment = Environment()
    environment.define(name("a"), 1.0)
    with pytest.raises(LoxRuntimeError) as info:
        environment.define(name("a", line=4), 2.0)
    assert info.value.line == 4
    assert "already defined" in info.value.message
    assert environment.get(name("a")) == 1.0


def test_shadowing_an_enclosing_binding():
    outer = Environment()
    outer.define(name("a"), "outer")
    inner = Environment(outer)
    inner.define(name("a"), "inner")

    assert inner.get(name("a")) == "inner"
    assert outer.get(name("a")) == "outer"


def test_lookup_walks_outward():
    outer = Environment()
    outer.define(name("a"), True)
    inner = Environment(Environment(outer))

    assert inner.get(name("a")) is True
    assert "a" not in inner


def test_assign_rewrites_nearest_binding():
    outer = Environment()
    outer.define(name("a"), 1.0)
    middle = Environment(outer)
    middle.define(name("a"), 2.0)
    inner = Environment(middle)

    assert inner.assign(name("a"), 3.0) == 3.0
    assert middle.get(name("a")) == 3.0
    assert outer.get(name("a")) == 1.0


def test_undefined_variable():
    environment = Environment(Environment())
    with pytest.raises(LoxRuntimeError) as info:
        environment.get(name("missing", line=7))
    assert info.value.message == "Undefined variable 'missing'."
    assert info.value.line == 7
    assert info.value.near == "missing"

    with pytest.raises(LoxRuntimeError):
        environment.assign(name("missing"), 1.0)
