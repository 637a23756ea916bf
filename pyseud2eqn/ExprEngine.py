# ExprEngine.py
"""""
Variable scope, evaluator and autocalc pass.

Pipeline
--------
1) eval: best-effort collapse of a subtree to one Decimal (None when unknown).
2) process: depth-first rewrite that replaces the autocalc placeholder with
   the value known from the other side of an equation and memorizes
   identifiers bound by '=' / '~='.
3) render (see Ast): markup for the rewritten tree.

A Scope lives for one document pass and is handed to every call explicitly.
"""""

import math
from decimal import Decimal, Context, ROUND_HALF_EVEN

from . import error as E
from .Ast import (Opcode, ASSIGNING_OPS, RELATION_OPS, Expr, Constant, Ident,
                  Function, UnaryOp, BinaryOp, Target)
from .NumberFormat import RepStyle
from .tracing import trace


def bits_to_digits(bits):
    """Decimal digits needed to hold a significand of `bits` binary digits."""
    return max(1, int(math.ceil(bits * math.log10(2))))


class Scope:
    """Identifier bindings plus the display configuration of one run."""

    def __init__(self, repstyle=RepStyle.SiSuffix, autocalc_ident="?", precision=256,
                 max_digits_after_zero=3, si_long_form=False):
        self.known = {}
        self.repstyle = repstyle
        self.autocalc_ident = autocalc_ident
        self.max_digits_after_zero = max_digits_after_zero
        self.si_long_form = si_long_form
        self.precision = precision

    @classmethod
    def from_settings(cls, settings):
        """Build a Scope from a settings dict (see config_manager)."""
        scope = cls()
        for option in OPTIONS:
            if option in settings:
                scope.configure(option, settings[option])
        return scope

    # -----------------------------
    # Configuration
    # -----------------------------

    @property
    def precision(self):
        return self._precision

    @precision.setter
    def precision(self, bits):
        self._precision = bits
        # Every trap off: 1/0 is Infinity, 0/0 is NaN, nothing raises
        self.context = Context(prec=bits_to_digits(bits), rounding=ROUND_HALF_EVEN, traps=[])

    def configure(self, option, value):
        """Apply one recognized option, raising ConfigError on bad input."""
        if option == "repstyle":
            style = RepStyle.from_name(value)
            if style is None:
                raise E.ConfigError(f"Invalid value for option repstyle: {value}", code="5001")
            self.repstyle = style
        elif option == "autocalc_ident":
            name = str(value).strip()
            if not name:
                raise E.ConfigError("Invalid value for option autocalc_ident: empty name", code="5001")
            self.autocalc_ident = name
        elif option == "precision":
            self.precision = _positive_int(option, value, minimum=2)
        elif option == "max_digits_after_zero":
            self.max_digits_after_zero = _positive_int(option, value, minimum=0)
        elif option == "si_long_form":
            self.si_long_form = _boolean(option, value)
        else:
            raise E.ConfigError(f"Unknown option: {option}", code="5000")
        trace(f"config {option} = {value}")

    def number(self, value):
        """Create a Decimal at the working precision."""
        return self.context.create_decimal(str(value))

    # -----------------------------
    # Evaluation
    # -----------------------------

    def eval(self, e):
        """Return the Decimal value of an expression, or None if it has none."""
        v = e.v
        if isinstance(v, Constant):
            return v.value

        elif isinstance(v, Ident):
            value = self.known.get(v.name)
            if value is not None:
                trace(f"load  {v.name} = {value}")
            return value

        elif isinstance(v, Function):
            # Functions are rendered only
            return None

        elif isinstance(v, UnaryOp):
            if v.operator is Opcode.Add:
                a = self.eval(v.operand)
                return None if a is None else self.context.abs(a)
            elif v.operator is Opcode.Sub:
                a = self.eval(v.operand)
                return None if a is None else self.context.minus(self.context.abs(a))
            return None

        elif isinstance(v, BinaryOp):
            op = v.operator
            if op in RELATION_OPS or op in (Opcode.At, Opcode.Subscript, Opcode.Superscript):
                return None
            if op in ASSIGNING_OPS:
                b = self.eval(v.right)
                return b if b is not None else self.eval(v.left)

            b = self.eval(v.right)
            if b is None:
                return None
            a = self.eval(v.left)
            if a is None:
                return None
            return self.apply(op, a, b)

        return None

    def apply(self, op, a, b):
        """Combine two values with an arithmetic opcode, NaN for anything else."""
        ctx = self.context
        if op is Opcode.Add:
            return ctx.add(a, b)
        elif op is Opcode.Sub:
            return ctx.subtract(a, b)
        elif op is Opcode.Mul:
            return ctx.multiply(a, b)
        elif op is Opcode.Div:
            return ctx.divide(a, b)
        elif op is Opcode.Pow:
            return ctx.power(a, b)
        trace(f"non arithmetic opcode {op.name} in arithmetic branch")
        return Decimal("NaN")

    def store(self, e, value):
        """Bind an Ident expression's name to value; no-op for other nodes."""
        if isinstance(e.v, Ident):
            self.known[e.v.name] = value
            trace(f"store {e.v.name} = {value}")

    # -----------------------------
    # Autocalc
    # -----------------------------

    def _process_inner(self, e, val, assign):
        v = e.v
        if isinstance(v, BinaryOp):
            lhv = self.eval(v.left)
            rhv = self.eval(v.right)
            if rhv is not None:
                sval = rhv
            elif lhv is not None:
                sval = lhv
            else:
                sval = val
            assign = v.operator in ASSIGNING_OPS
            self._process_inner(v.left, sval, assign)
            self._process_inner(v.right, sval, assign)

        elif isinstance(v, Ident):
            if val is not None:
                if v.name == self.autocalc_ident:
                    e.v = Constant(val)
                # A resolved placeholder is a Constant now and is not stored
                if assign:
                    self.store(e, val)

    def process(self, e):
        """Run the autocalc rewrite on one top-level expression, in place."""
        self._process_inner(e, None, False)
        return e

    def process_target(self, target):
        """Apply a directive, or rewrite each expression of a target in order."""
        if isinstance(target, Target) and target.is_config:
            self.configure(target.body.option, target.body.value)
            return target
        if isinstance(target, Target):
            exprs = target.exprs()
        elif isinstance(target, Expr):
            exprs = [target]
        else:
            exprs = list(target)
        for e in exprs:
            self.process(e)
        return target

    def __repr__(self):
        return (f"Scope(known={self.known!r}, repstyle={self.repstyle.name}, "
                f"autocalc_ident={self.autocalc_ident!r}, precision={self.precision})")


OPTIONS = ("repstyle", "autocalc_ident", "precision", "max_digits_after_zero", "si_long_form")


def _positive_int(option, value, minimum):
    try:
        number = int(str(value).strip())
    except ValueError:
        raise E.ConfigError(f"Invalid value for option {option}: {value}", code="5001")
    if number < minimum:
        raise E.ConfigError(f"Invalid value for option {option}: {value}", code="5001")
    return number


def _boolean(option, value):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    elif text in ("false", "no", "off", "0"):
        return False
    raise E.ConfigError(f"Invalid value for option {option}: {value}", code="5001")
