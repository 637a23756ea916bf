# Parser.py
"""""
Shorthand parser.

Pipeline
--------
1) Tokenizer: converts one input line into a flat list of tokens.
2) Parser: recursive descent, precedence aware, builds Ast nodes.

Precedence (loosest first): relations, + -, * / @ and juxtaposition,
unary sign, **, subscript/superscript chains with an optional :unit.
"""""

from . import error as E
from .Ast import (Opcode, Expr, Constant, Ident, ExprSet, Config, Target,
                  function, unary, binary)
from .tracing import trace

# Longest first, so '**' wins over '*' and '__' over '_'
Operations = ["**", "__", "~=", "!=", ">=", "<=", "+", "-", "*", "/", "^", "@", "_", "=", ">", "<", "≈"]

RELATIONS = {
    "=": Opcode.Equals,
    "~=": Opcode.ApproxEquals,
    "≈": Opcode.ApproxEquals,
    "!=": Opcode.NotEquals,
    ">": Opcode.GreaterThan,
    "<": Opcode.LesserThan,
    ">=": Opcode.GtEquals,
    "<=": Opcode.LtEquals,
}

SUM_OPS = {"+": Opcode.Add, "-": Opcode.Sub}
TERM_OPS = {"*": Opcode.Mul, "/": Opcode.Div, "@": Opcode.At}
POSTFIX_OPS = {"_": Opcode.Subscript, "__": Opcode.Superscript}
POWER_OPS = ("**", "^")

# ASCII only, Decimal cannot read other unicode digits
DIGITS = "0123456789"

# Tokens that can start an atom; two atoms in a row are juxtaposed
ATOM_START = ("num", "ident", "func", "(")


class Token:
    def __init__(self, kind, value, column):
        self.kind = kind
        self.value = value
        self.column = column

    def __repr__(self):
        return f"Token({self.kind}, {self.value!r}, {self.column})"


def _fail(code, detail="", column=None, equation=None):
    message = E.ERROR_MESSAGES[code] + detail
    if column is not None:
        message = f"{message} (column {column + 1})"
    raise E.ParseError(message, code=code, equation=equation, column=column)


def is_ident_start(char):
    return char.isalpha()


def is_ident_char(char):
    return char.isalnum() and char != "_"


# -----------------------------
# Tokenizer
# -----------------------------

def tokenize(problem):
    """Convert raw input into a token list (numbers, idents, functions, ops, parens)."""
    tokens = []
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Whitespace (ignored) ---
        if current_char.isspace():
            b += 1
            continue

        # --- Numbers: digits, one decimal point, optional exponent ---
        if current_char in DIGITS or (current_char == "." and b + 1 < len(problem) and problem[b + 1] in DIGITS):
            start = b
            has_point = False
            while b < len(problem) and (problem[b] in DIGITS or problem[b] == "."):
                if problem[b] == ".":
                    if has_point:
                        _fail("3004", column=b, equation=problem)
                    has_point = True
                b += 1
            if b < len(problem) and problem[b] in "eE":
                rest = problem[b + 1:b + 3]
                if rest[:1] in DIGITS or (rest[:1] in ("+", "-") and rest[1:2] in DIGITS):
                    b += 2
                    while b < len(problem) and problem[b] in DIGITS:
                        b += 1
            tokens.append(Token("num", problem[start:b], start))
            continue

        # --- Identifiers, primes, the placeholder; name( is a function call ---
        if is_ident_start(current_char) or current_char in "'?":
            start = b
            if current_char in "'?":
                while b < len(problem) and problem[b] == current_char:
                    b += 1
            else:
                while b < len(problem) and is_ident_char(problem[b]):
                    b += 1
                while b < len(problem) and problem[b] == "'":
                    b += 1
            name = problem[start:b]
            if b < len(problem) and problem[b] == "(" and current_char not in "'?":
                tokens.append(Token("func", name, start))
            else:
                tokens.append(Token("ident", name, start))
            continue

        # --- Parentheses and separators ---
        if current_char in "();:":
            tokens.append(Token(current_char, current_char, b))
            b += 1
            continue

        # --- Operators ---
        for operator in Operations:
            if problem.startswith(operator, b):
                tokens.append(Token("op", operator, b))
                b += len(operator)
                break
        else:
            _fail("3000", repr(current_char), column=b, equation=problem)

    trace(f"tokens {tokens}")
    return tokens


# -----------------------------
# Parser (recursive descent)
# -----------------------------

def _default_scope(scope):
    if scope is None:
        from .ExprEngine import Scope
        scope = Scope()
    return scope


def _negate(operand, scope):
    """Fold a sign into a bare literal, otherwise build a UnaryOp."""
    if isinstance(operand.v, Constant) and operand.unit is None:
        return Expr(Constant(scope.context.minus(operand.v.value)))
    return unary(Opcode.Sub, operand)


def _positive(operand):
    if isinstance(operand.v, Constant):
        return operand
    return unary(Opcode.Add, operand)


class _Parser:
    """One-shot parser over the token list of a single input line."""

    def __init__(self, scope, text):
        self.scope = _default_scope(scope)
        self.text = text
        self.tokens = tokenize(text)

    def peek(self):
        return self.tokens[0] if self.tokens else None

    def peek_op(self, table):
        token = self.peek()
        if token is not None and token.kind == "op" and token.value in table:
            return token
        return None

    def pop(self):
        if not self.tokens:
            _fail("3002", equation=self.text)
        return self.tokens.pop(0)

    def expect(self, kind):
        token = self.pop()
        if token.kind != kind:
            if kind == ")":
                _fail("3003", repr(token.value), column=token.column, equation=self.text)
            _fail("3001", repr(token.value), column=token.column, equation=self.text)
        return token

    def finish(self):
        if self.tokens:
            token = self.tokens[0]
            _fail("3001", repr(token.value), column=token.column, equation=self.text)

    def operand(self, operator):
        """Parse check: an operator needs something after it."""
        token = self.peek()
        if token is None or token.kind in (";", ")"):
            _fail("3007", repr(operator.value), column=operator.column, equation=self.text)

    # ---- Parsing functions in precedence order ----

    def parse_atom(self):
        """Numbers, identifiers, function calls and sub-expressions in '()'."""
        token = self.pop()

        if token.kind == "num":
            return Expr(Constant(self.scope.number(token.value)))
        elif token.kind == "ident":
            return Expr(Ident(token.value))
        elif token.kind == "func":
            self.expect("(")
            argument = self.parse_sum()
            self.expect(")")
            return function(token.value, argument)
        elif token.kind == "(":
            inner = self.parse_sum()
            self.expect(")")
            return inner
        _fail("3001", repr(token.value), column=token.column, equation=self.text)

    def parse_subatom(self):
        """Subscript/superscript operand: an atom with an optional sign."""
        sign = self.peek_op(SUM_OPS)
        if sign is not None:
            self.pop()
            self.operand(sign)
            atom = self.parse_atom()
            return _negate(atom, self.scope) if sign.value == "-" else _positive(atom)
        return self.parse_atom()

    def parse_unit(self, colon):
        token = self.peek()
        if token is None or token.kind not in ("(", "ident", "num"):
            _fail("3005", column=colon.column, equation=self.text)
        if token.kind == "(":
            self.pop()
            unit = self.parse_sum().render(self.scope)
            self.expect(")")
            return unit
        return self.pop().value

    def parse_postfix(self):
        """Chains of '_' and '__', then an optional ':unit'."""
        current = self.parse_atom()
        while self.peek_op(POSTFIX_OPS):
            operator = self.pop()
            self.operand(operator)
            current = binary(current, POSTFIX_OPS[operator.value], self.parse_subatom())
        token = self.peek()
        if token is not None and token.kind == ":":
            colon = self.pop()
            if current.unit is not None:
                _fail("3001", "':'", column=colon.column, equation=self.text)
            current.unit = self.parse_unit(colon)
        return current

    def parse_power(self):
        """Exponentiation '**' (right associative, binds tighter than the sign)."""
        base = self.parse_postfix()
        operator = self.peek_op(POWER_OPS)
        if operator is not None:
            self.pop()
            self.operand(operator)
            return binary(base, Opcode.Pow, self.parse_unary())
        return base

    def parse_unary(self):
        """Leading '+'/'-'; a sign on a literal folds into the literal."""
        sign = self.peek_op(SUM_OPS)
        if sign is not None:
            self.pop()
            self.operand(sign)
            operand = self.parse_unary()
            if sign.value == "-":
                return _negate(operand, self.scope)
            return _positive(operand)
        return self.parse_power()

    def parse_term(self):
        """Multiplication, division, '@' and juxtaposition."""
        current = self.parse_unary()
        while True:
            operator = self.peek_op(TERM_OPS)
            if operator is not None:
                self.pop()
                self.operand(operator)
                current = binary(current, TERM_OPS[operator.value], self.parse_unary())
            elif self.peek() is not None and self.peek().kind in ATOM_START:
                current = binary(current, Opcode.At, self.parse_unary())
            else:
                return current

    def parse_sum(self):
        """Addition and subtraction."""
        current = self.parse_term()
        while self.peek_op(SUM_OPS):
            operator = self.pop()
            self.operand(operator)
            current = binary(current, SUM_OPS[operator.value], self.parse_term())
        return current

    def parse_equation(self):
        """Left associative chain of relations."""
        current = self.parse_sum()
        while self.peek_op(RELATIONS):
            operator = self.pop()
            self.operand(operator)
            current = binary(current, RELATIONS[operator.value], self.parse_sum())
        return current

    def parse_exprset(self):
        """';' separated equations, a trailing ';' is allowed."""
        if not self.tokens:
            _fail("3006", equation=self.text)
        exprs = ExprSet()
        exprs.append(self.parse_equation())
        while self.peek() is not None and self.peek().kind == ";":
            self.pop()
            if self.peek() is None:
                break
            exprs.append(self.parse_equation())
        return exprs


def _run(scope, text, rule):
    parser = _Parser(scope, text)
    if not parser.tokens:
        _fail("3006", equation=text)
    result = rule(parser)
    parser.finish()
    trace(f"parsed {result!r}")
    return result


def parse_expr(scope, text):
    """Parse a single expression without relations."""
    return _run(scope, text, _Parser.parse_sum)


def parse_equation(scope, text):
    """Parse an expression or a chain of relations."""
    return _run(scope, text, _Parser.parse_equation)


def parse_exprset(scope, text):
    """Parse ';' separated equations into an ExprSet."""
    return _run(scope, text, _Parser.parse_exprset)


def parse_directive(text):
    """Parse '% option [=] value' into a Config node."""
    body = text.strip()[1:].strip()
    option, _, value = body.partition(" ")
    if "=" in option:
        option, _, rest = option.partition("=")
        value = rest + " " + value
    value = value.strip()
    if value.startswith("="):
        value = value[1:].strip()
    option = option.strip()
    if not option.isidentifier() or not value:
        _fail("3008", repr(text.strip()), equation=text)
    return Config(option, value)


def parse_target(scope, text):
    """Parse a whole input line: a directive, one expression or a set."""
    if text.strip().startswith("%"):
        return Target(parse_directive(text))
    exprs = parse_exprset(scope, text)
    if len(exprs) == 1:
        return Target(exprs[0])
    return Target(exprs)
