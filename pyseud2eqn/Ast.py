# Ast.py
"""""
AST node types for parsed shorthand.

An `Expr` wraps one node kind (Constant, Ident, Function, UnaryOp, BinaryOp)
plus an optional unit. The autocalc pass swaps `Expr.v` in place, so parents
never need to be rebuilt. Every node renders itself to eqn markup.
"""""

from enum import Enum

from . import NumberFormat
from .tracing import trace


# -----------------------------
# Opcodes
# -----------------------------

class Opcode(Enum):
    """Closed set of operators, each value is its display token in eqn."""
    Add = "+"
    Sub = "-"
    Mul = "times"
    Div = "over"
    Pow = "pow"
    At = "@"
    Subscript = "sub"
    Superscript = "sup"
    Equals = "="
    ApproxEquals = "~approx~"
    NotEquals = "!="
    GreaterThan = ">"
    LesserThan = "<"
    GtEquals = ">="
    LtEquals = "<="

    def __str__(self):
        # Pow and Superscript print the same, eqn has a single raise operator
        if self is Opcode.Pow:
            return "sup"
        return self.value


ASSIGNING_OPS = (Opcode.Equals, Opcode.ApproxEquals)
RELATION_OPS = (Opcode.NotEquals, Opcode.GreaterThan, Opcode.LesserThan,
                Opcode.GtEquals, Opcode.LtEquals)


# -----------------------------
# Node kinds
# -----------------------------

class Constant:
    """Numeric literal or resolved value (a Decimal)."""
    def __init__(self, value):
        self.value = value

    def render(self, scope):
        return NumberFormat.render_number(self.value, scope)

    def __repr__(self):
        return f"Constant({self.value})"


class Ident:
    def __init__(self, name):
        self.name = name

    def render(self, scope):
        return self.name

    def __repr__(self):
        return f"Ident('{self.name}')"


class Function:
    """Function call. Parsed and rendered, never evaluated."""
    def __init__(self, name, arg):
        self.name = name
        self.arg = arg

    def render(self, scope):
        return f"{self.name} ( {self.arg.render(scope)} )"

    def __repr__(self):
        return f"Function('{self.name}', {self.arg})"


class UnaryOp:
    def __init__(self, operator, operand):
        self.operator = operator
        self.operand = operand

    def render(self, scope):
        return f"{self.operator}{{ {self.operand.render(scope)} }}"

    def __repr__(self):
        return f"UnaryOp({self.operator.name}, {self.operand})"


class BinaryOp:
    """left <operator> right. Both operands are always braced on output."""
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def render(self, scope):
        return f"{{ {self.left.render(scope)} }} {self.operator} {{ {self.right.render(scope)} }}"

    def __repr__(self):
        return f"BinaryOp({self.operator.name}, left={self.left}, right={self.right})"


# -----------------------------
# Expressions and targets
# -----------------------------

class Expr:
    """A node kind plus an optional unit annotation (already rendered text)."""
    def __init__(self, v, unit=None):
        self.v = v
        self.unit = unit

    def render(self, scope):
        if self.unit is not None:
            return f"{self.v.render(scope)} {{ {self.unit} }}"
        return self.v.render(scope)

    def __repr__(self):
        if self.unit is not None:
            return f"Expr({self.v!r}, unit={self.unit!r})"
        return f"Expr({self.v!r})"


class ExprSet(list):
    """Semicolon separated expressions of one input line, in order."""

    def render(self, scope):
        trace("render exprset")
        return "; ~~~ ".join(e.render(scope) for e in self)

    def __repr__(self):
        return f"ExprSet({list.__repr__(self)})"


class Config:
    """Configuration directive (`% option value`). Renders to nothing."""
    def __init__(self, option, value):
        self.option = option
        self.value = value

    def render(self, scope):
        return ""

    def __repr__(self):
        return f"Config({self.option!r}, {self.value!r})"


class Target:
    """Top level parse result wrapping an Expr, an ExprSet or a Config."""
    def __init__(self, body):
        self.body = body

    @property
    def is_config(self):
        return isinstance(self.body, Config)

    def exprs(self):
        """Top level expressions in processing order."""
        if isinstance(self.body, ExprSet):
            return list(self.body)
        if isinstance(self.body, Expr):
            return [self.body]
        return []

    def render(self, scope):
        trace("render target")
        return self.body.render(scope)

    def __repr__(self):
        return f"Target({self.body!r})"


# Small constructors used by the parser and the tests

def constant(value, unit=None):
    return Expr(Constant(value), unit)

def ident(name, unit=None):
    return Expr(Ident(name), unit)

def function(name, arg):
    return Expr(Function(name, arg))

def unary(operator, operand):
    return Expr(UnaryOp(operator, operand))

def binary(left, operator, right):
    return Expr(BinaryOp(left, operator, right))
