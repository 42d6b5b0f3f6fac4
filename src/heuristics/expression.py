"""
Expression Module - Sandboxed arithmetic formulas for custom heuristics.

Formulas are tokenized and parsed once into a small AST which is then
evaluated directly against a fixed variable set. No Python code is
generated or executed, so a formula can only reach the names below.

Grammar:
    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/' | '%') unary)*
    unary   := ('-' | '+') unary | power
    power   := atom ('^' unary)?
    atom    := NUMBER | NAME | NAME '(' [expr (',' expr)*] ')' | '(' expr ')'

'**' is accepted as an alias for '^'. A leading 'Math.' on names is
ignored so formulas written for a JavaScript-style Math object
(e.g. "Math.abs(x-goal_x)") work unchanged.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Tuple

logger = logging.getLogger(__name__)

# Free variables available to every formula
VARIABLES = ("x", "y", "goal_x", "goal_y")

# Whitelisted functions
FUNCTIONS: Dict[str, Callable[..., float]] = {
    "abs": abs,
    "min": min,
    "max": max,
    "sqrt": math.sqrt,
    "pow": math.pow,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": round,
    "exp": math.exp,
    "log": math.log,
    "hypot": math.hypot,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
}

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "PI": math.pi,
    "e": math.e,
    "E": math.e,
}

_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)"
    r"|(?P<name>[A-Za-z_][A-Za-z_0-9]*(?:\.[A-Za-z_][A-Za-z_0-9]*)?)"
    r"|(?P<op>\*\*|[-+*/%^(),])"
    r")"
)


class ExpressionError(ValueError):
    """Formula could not be tokenized or parsed."""
    pass


# --------------------------------------------------
# AST
# --------------------------------------------------

@dataclass(frozen=True)
class Number:
    value: float

    def evaluate(self, env: Mapping[str, float]) -> float:
        return self.value


@dataclass(frozen=True)
class Name:
    name: str

    def evaluate(self, env: Mapping[str, float]) -> float:
        if self.name in env:
            return env[self.name]
        return CONSTANTS[self.name]


@dataclass(frozen=True)
class Negate:
    operand: object

    def evaluate(self, env: Mapping[str, float]) -> float:
        return -self.operand.evaluate(env)


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: object
    right: object

    def evaluate(self, env: Mapping[str, float]) -> float:
        a = self.left.evaluate(env)
        b = self.right.evaluate(env)
        if self.op == "+":
            return a + b
        if self.op == "-":
            return a - b
        if self.op == "*":
            return a * b
        if self.op == "/":
            return a / b
        if self.op == "%":
            return math.fmod(a, b)
        return math.pow(a, b)


@dataclass(frozen=True)
class Call:
    func: str
    args: Tuple[object, ...]

    def evaluate(self, env: Mapping[str, float]) -> float:
        return FUNCTIONS[self.func](*(arg.evaluate(env) for arg in self.args))


# --------------------------------------------------
# Tokenizer / parser
# --------------------------------------------------

def tokenize(source: str) -> List[Tuple[str, str]]:
    """
    Split a formula into (kind, text) tokens.

    Raises:
        ExpressionError: On any character that is not part of a token
    """
    tokens = []
    pos = 0
    source = source.rstrip()
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None or match.end() == pos:
            raise ExpressionError(f"Unexpected character at {pos}: {source[pos:pos + 10]!r}")
        kind = match.lastgroup
        text = match.group(kind)
        if kind == "op" and text == "**":
            text = "^"
        if kind == "name" and text.startswith("Math."):
            text = text[len("Math."):]
        tokens.append((kind, text))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: List[Tuple[str, str]]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Tuple[str, str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return ("end", "")

    def advance(self) -> Tuple[str, str]:
        token = self.peek()
        self.pos += 1
        return token

    def expect(self, text: str) -> None:
        kind, value = self.advance()
        if kind != "op" or value != text:
            raise ExpressionError(f"Expected {text!r}, got {value or 'end of input'!r}")

    def parse(self):
        if not self.tokens:
            raise ExpressionError("Empty expression")
        node = self.expr()
        if self.peek()[0] != "end":
            raise ExpressionError(f"Unexpected token {self.peek()[1]!r}")
        return node

    def expr(self):
        node = self.term()
        while self.peek() in (("op", "+"), ("op", "-")):
            op = self.advance()[1]
            node = BinaryOp(op, node, self.term())
        return node

    def term(self):
        node = self.unary()
        while self.peek() in (("op", "*"), ("op", "/"), ("op", "%")):
            op = self.advance()[1]
            node = BinaryOp(op, node, self.unary())
        return node

    def unary(self):
        if self.peek() == ("op", "-"):
            self.advance()
            return Negate(self.unary())
        if self.peek() == ("op", "+"):
            self.advance()
            return self.unary()
        return self.power()

    def power(self):
        node = self.atom()
        if self.peek() == ("op", "^"):
            self.advance()
            node = BinaryOp("^", node, self.unary())
        return node

    def atom(self):
        kind, text = self.advance()
        if kind == "number":
            return Number(float(text))
        if kind == "name":
            if self.peek() == ("op", "("):
                if text not in FUNCTIONS:
                    raise ExpressionError(f"Unknown function {text!r}")
                self.advance()
                args = []
                if self.peek() != ("op", ")"):
                    args.append(self.expr())
                    while self.peek() == ("op", ","):
                        self.advance()
                        args.append(self.expr())
                self.expect(")")
                return Call(text, tuple(args))
            if text not in VARIABLES and text not in CONSTANTS:
                raise ExpressionError(f"Unknown name {text!r}")
            return Name(text)
        if kind == "op" and text == "(":
            node = self.expr()
            self.expect(")")
            return node
        raise ExpressionError(f"Unexpected token {text or 'end of input'!r}")


def compile_expression(source: str):
    """
    Parse a formula into an evaluable AST.

    Args:
        source: Formula text

    Returns:
        Root AST node with an evaluate(env) method

    Raises:
        ExpressionError: If the formula is malformed or uses unknown names
    """
    return _Parser(tokenize(source)).parse()


def get_custom(formula: str, goal_row: int, goal_col: int) -> Callable[[int, int], float]:
    """
    Build a heuristic from a user formula.

    Variables: x (query column), y (query row), goal_x, goal_y.
    The evaluator never raises: parse errors, runtime errors and
    non-finite or non-numeric results give 0, negative results clamp to 0.

    Args:
        formula: Arithmetic formula text
        goal_row: Goal row
        goal_col: Goal column

    Returns:
        Evaluator (row, col) -> float >= 0
    """
    try:
        tree = compile_expression(formula)
    except (ExpressionError, RecursionError) as e:
        logger.warning(f"Custom heuristic {formula!r} rejected: {e}")
        return lambda row, col: 0

    def evaluate(row: int, col: int) -> float:
        env = {"x": col, "y": row, "goal_x": goal_col, "goal_y": goal_row}
        try:
            value = tree.evaluate(env)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return 0
            # floor/ceil/round yield ints of unbounded size
            value = float(value)
        except (ArithmeticError, ValueError, TypeError, RecursionError) as e:
            logger.debug(f"Custom heuristic failed at ({row},{col}): {e}")
            return 0
        if not math.isfinite(value):
            return 0
        return max(0, value)

    return evaluate
