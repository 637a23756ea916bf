"""Tests for pyseud2eqn.Ast rendering."""

from decimal import Decimal

import pytest

from pyseud2eqn.Ast import (Opcode, Expr, ExprSet, Config, Target, Ident, constant, ident,
                            function, unary, binary)


class TestOpcodeTokens:

    @pytest.mark.parametrize("op, token", [
        (Opcode.Add, "+"),
        (Opcode.Sub, "-"),
        (Opcode.Mul, "times"),
        (Opcode.Div, "over"),
        (Opcode.Pow, "sup"),
        (Opcode.At, "@"),
        (Opcode.Subscript, "sub"),
        (Opcode.Superscript, "sup"),
        (Opcode.Equals, "="),
        (Opcode.ApproxEquals, "~approx~"),
        (Opcode.NotEquals, "!="),
        (Opcode.GreaterThan, ">"),
        (Opcode.LesserThan, "<"),
        (Opcode.GtEquals, ">="),
        (Opcode.LtEquals, "<="),
    ])
    def test_token(self, op, token):
        assert str(op) == token

    def test_pow_and_superscript_are_distinct(self):
        assert Opcode.Pow is not Opcode.Superscript


class TestRender:

    def test_ident(self, scope):
        assert ident("alpha").render(scope) == "alpha"

    def test_constant(self, scope):
        assert constant(Decimal("1500000")).render(scope) == "1.5M"

    def test_function(self, scope):
        assert function("cos", ident("t")).render(scope) == "cos ( t )"

    def test_unary(self, scope):
        assert unary(Opcode.Sub, ident("t")).render(scope) == "-{ t }"

    def test_binary_braces_single_tokens(self, scope):
        assert binary(ident("a"), Opcode.Mul, ident("b")).render(scope) == "{ a } times { b }"

    def test_unit(self, scope):
        assert constant(Decimal(3), unit="m").render(scope) == "3 { m }"
        tree = binary(ident("v"), Opcode.Equals, Expr(Ident("c"), unit="{ m } over { s }"))
        assert tree.render(scope) == "{ v } = { c { { m } over { s } } }"

    def test_expr_set(self, scope):
        exprs = ExprSet([ident("a"), constant(Decimal(2)), ident("c")])
        assert exprs.render(scope) == "a; ~~~ 2; ~~~ c"

    def test_targets(self, scope):
        assert Target(ident("a")).render(scope) == "a"
        assert Target(ExprSet([ident("a"), ident("b")])).render(scope) == "a; ~~~ b"
        assert Target(Config("repstyle", "TenExp")).render(scope) == ""

    def test_target_exprs(self):
        single = ident("a")
        assert Target(single).exprs() == [single]
        assert Target(Config("precision", "64")).exprs() == []
