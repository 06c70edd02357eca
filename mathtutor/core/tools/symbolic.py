"""
Symbolic math oracle backed by SymPy.

Ground truth for grading that does not depend on the generator's arithmetic.
Every public method is total: parse errors and evaluation failures map to
``False``, the unchanged input, ``nan`` or an empty list.

Input is parsed without evaluation inside a small namespace, and the tree is
checked for powers, factorials and expansions whose result would be too large
to compute before anything is evaluated.
"""
import keyword
import math
import re
from typing import Any, List, Optional

from sympy import (
    Abs,
    Add,
    E,
    Eq,
    Expr,
    Float,
    Function,
    I,
    Integer,
    Mul,
    N,
    Number,
    Poly,
    Pow,
    Rational,
    Symbol,
    acos,
    asin,
    atan,
    cbrt,
    cos,
    cosh,
    exp,
    expand,
    factorial,
    factorial2,
    log,
    pi,
    postorder_traversal,
    sin,
    sinh,
    sqrt,
    sstr,
    tan,
    tanh,
)
from sympy import simplify as sympy_simplify
from sympy.core.relational import Equality
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from mathtutor.settings import settings
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)

MAX_EXPONENT = 1000
MAX_FACTORIAL_ARGUMENT = 1000
MAX_RESULT_DIGITS = 10000
MAX_EXPANDED_TERMS = 10000


def _bounded(function):
    def build(n, *args, **kwargs):
        if getattr(n, "is_Number", False) and abs(n) > MAX_FACTORIAL_ARGUMENT:
            raise ValueError(f"{function.__name__} argument {n} is too large")
        return function(n, *args, **kwargs)
    return build


# Names the parser may resolve; anything else becomes a Symbol or an undefined Function
PARSER_NAMESPACE = {
    "Symbol": Symbol,
    "Function": Function,
    "Integer": Integer,
    "Number": Number,
    "Float": Float,
    "Rational": Rational,
    "Add": Add,
    "Mul": Mul,
    "Pow": Pow,
    "I": I,
    "E": E,
    "pi": pi,
    "factorial": _bounded(factorial),
    "factorial2": _bounded(factorial2),
    "sqrt": sqrt,
    "cbrt": cbrt,
    "exp": exp,
    "log": log,
    "ln": log,
    "Abs": Abs,
    "abs": lambda arg: Abs(arg, evaluate=False),
    "sin": sin,
    "cos": cos,
    "tan": tan,
    "asin": asin,
    "acos": acos,
    "atan": atan,
    "sinh": sinh,
    "cosh": cosh,
    "tanh": tanh,
}

_SYMBOL_REPLACEMENTS = (
    ("π", " pi "),
    ("×", "*"),
    ("·", "*"),
    ("÷", "/"),
    ("−", "-"),
    ("²", "^2"),
    ("³", "^3"),
)

# √9, √x, √pi -> sqrt(...); a bare √( is handled by plain substitution
_SQRT_OPERAND_RE = re.compile(r"√\s*([0-9]+(?:\.[0-9]+)?|[A-Za-z][A-Za-z0-9]*)")
_SAFE_EXPRESSION_RE = re.compile(r"^[0-9A-Za-z\s+\-*/^().,=!]+$")
_ATTRIBUTE_ACCESS_RE = re.compile(r"[A-Za-z)\]]\s*\.")
_WORD_RE = re.compile(r"[A-Za-z]+")


def _magnitude(expr: Any) -> Optional[float]:
    """Absolute numeric value of a symbol-free expression, None otherwise."""
    if expr.free_symbols:
        return None
    try:
        return abs(complex(expr.evalf(15)))
    except (TypeError, ValueError):
        # zoo and other values without a complex form
        return None


def _check_magnitude(expr: Any) -> None:
    """
    Reject trees whose evaluation would produce oversized numbers.

    Nodes are visited children first, so every exponent or factorial
    argument measured here only contains subtrees that already passed.

    Raises:
        ValueError: If a power, factorial or expansion is too large
    """
    for node in postorder_traversal(expr):
        if isinstance(node, Pow):
            exponent = _magnitude(node.exp)
            if exponent is None:
                continue
            if exponent > MAX_EXPONENT:
                raise ValueError(f"Exponent {exponent:g} is too large")
            base = _magnitude(node.base)
            if base is not None and base > 1 and exponent * math.log10(base) > MAX_RESULT_DIGITS:
                raise ValueError("Power is too large to evaluate")
        elif isinstance(node, (factorial, factorial2)):
            argument = _magnitude(node.args[0])
            if argument is not None and argument > MAX_FACTORIAL_ARGUMENT:
                raise ValueError(f"Factorial argument {argument:g} is too large")
    _term_count(expr)


def _term_count(expr: Any) -> int:
    """Upper bound on the number of terms ``expand`` produces for expr."""
    if not expr.free_symbols:
        return 1

    if isinstance(expr, Add):
        count = sum(_term_count(arg) for arg in expr.args)
    elif isinstance(expr, Mul):
        count = 1
        for arg in expr.args:
            count *= _term_count(arg)
            if count > MAX_EXPANDED_TERMS:
                break
    elif isinstance(expr, Pow):
        base = _term_count(expr.base)
        exponent = _magnitude(expr.exp)
        if exponent is not None and abs(exponent - round(exponent)) < 1e-9 and round(exponent) >= 2:
            # monomials of degree n over the base's terms
            power = int(round(exponent))
            count = math.comb(base + power - 1, power)
        else:
            count = base
    else:
        for arg in expr.args:
            _term_count(arg)
        count = 1

    if count > MAX_EXPANDED_TERMS:
        raise ValueError("Expression expands to too many terms")
    return count


class SymbolicMathOracle:
    """Parses, validates, simplifies, evaluates and compares infix math expressions."""

    def __init__(
        self,
        max_expression_length: Optional[int] = None,
        tolerance: float = 1e-9,
    ):
        self.max_expression_length = max_expression_length or settings.max_expression_length
        self.tolerance = tolerance

    def _prepare(self, expr: str) -> str:
        if not isinstance(expr, str):
            raise ValueError(f"Expected an expression string, got {type(expr).__name__}")

        text = expr.strip()
        if not text:
            raise ValueError("Empty expression")
        if len(text) > self.max_expression_length:
            raise ValueError(f"Expression longer than {self.max_expression_length} characters")

        for source, target in _SYMBOL_REPLACEMENTS:
            text = text.replace(source, target)
        text = _SQRT_OPERAND_RE.sub(r"sqrt(\1)", text)
        text = text.replace("√", "sqrt").strip()

        if not _SAFE_EXPRESSION_RE.match(text) or _ATTRIBUTE_ACCESS_RE.search(text):
            raise ValueError("Expression contains characters outside the math alphabet")
        if any(keyword.iskeyword(word) for word in _WORD_RE.findall(text)):
            raise ValueError("Expression contains a Python keyword")
        return text

    @staticmethod
    def _parse_side(text: str) -> Expr:
        parsed = parse_expr(
            text,
            transformations=TRANSFORMATIONS,
            global_dict=dict(PARSER_NAMESPACE),
            evaluate=False,
        )
        # "1,000" parses as a tuple, a bare "sin" as a class
        if not isinstance(parsed, Expr):
            raise ValueError(f"Not an expression: {type(parsed).__name__}")
        _check_magnitude(parsed)
        return parsed.doit()

    def _parse(self, expr: str) -> Any:
        text = self._prepare(expr)

        if "=" in text:
            sides = text.split("=")
            if len(sides) != 2 or not sides[0].strip() or not sides[1].strip():
                raise ValueError("Only a single '=' is supported")
            return Eq(self._parse_side(sides[0]), self._parse_side(sides[1]), evaluate=False)

        return self._parse_side(text)

    @staticmethod
    def _format(value: Any) -> str:
        return sstr(value).replace("**", "^")

    def validate(self, expr: str) -> bool:
        """Return True if expr parses as an infix expression or single equation."""
        try:
            self._parse(expr)
            return True
        except Exception as e:
            logger.debug(f"Expression rejected: {expr!r} ({type(e).__name__}: {e})")
            return False

    def are_equivalent(self, expr1: str, expr2: str) -> bool:
        """
        Check algebraic equivalence by comparing expanded forms.

        Purely numeric sides are compared within the oracle tolerance so that
        ``0.5`` and ``1/2`` agree. Equations compare ``lhs - rhs`` up to a
        nonzero constant factor.
        """
        try:
            left = self._parse(expr1)
            right = self._parse(expr2)

            if isinstance(left, Equality) or isinstance(right, Equality):
                if not (isinstance(left, Equality) and isinstance(right, Equality)):
                    return False
                a = expand(left.lhs - left.rhs)
                b = expand(right.lhs - right.rhs)
                if a == b or a == expand(-b):
                    return True
                if a == 0 or b == 0:
                    return False
                # same solution set when one side is a constant multiple of the other
                ratio = sympy_simplify(a / b)
                return not ratio.free_symbols and ratio != 0 and ratio.is_finite is True

            left_expanded = expand(left)
            right_expanded = expand(right)
            if left_expanded == right_expanded:
                return True

            if (
                isinstance(left_expanded, Expr)
                and isinstance(right_expanded, Expr)
                and not left_expanded.free_symbols
                and not right_expanded.free_symbols
            ):
                difference = complex(N(left_expanded - right_expanded))
                return abs(difference) <= self.tolerance

            return False
        except Exception as e:
            logger.debug(f"Equivalence check failed for {expr1!r} vs {expr2!r}: {e}")
            return False

    def simplify(self, expr: str) -> str:
        """Return the expanded infix form of expr, or expr itself on failure."""
        try:
            parsed = self._parse(expr)
            if isinstance(parsed, Equality):
                return f"{self._format(expand(parsed.lhs))} = {self._format(expand(parsed.rhs))}"
            return self._format(expand(parsed))
        except Exception as e:
            logger.debug(f"Simplification failed for {expr!r}: {e}")
            return expr

    def evaluate(self, expr: str) -> float:
        """Evaluate expr numerically; nan when it is unparseable, symbolic or not real."""
        try:
            parsed = self._parse(expr)
            if not isinstance(parsed, Expr) or isinstance(parsed, Equality) or parsed.free_symbols:
                return math.nan

            value = complex(N(parsed))
            if abs(value.imag) > self.tolerance:
                return math.nan
            return float(value.real)
        except Exception as e:
            logger.debug(f"Evaluation failed for {expr!r}: {e}")
            return math.nan

    def solve_polynomial(self, equation: str, variable: str = "x") -> List[float]:
        """
        Real roots of a univariate polynomial equation of degree 1 to 4.

        Accepts ``lhs = rhs`` or a bare expression (taken as ``expr = 0``).
        Returns an ascending list without duplicates, or [] when the input is
        not such a polynomial.
        """
        try:
            parsed = self._parse(equation)
            symbol = Symbol(variable)
            target = parsed.lhs - parsed.rhs if isinstance(parsed, Equality) else parsed

            poly = Poly(expand(target), symbol)
            if poly.free_symbols - {symbol}:
                return []
            if not 1 <= poly.degree() <= 4:
                return []

            roots: List[float] = []
            for root in poly.nroots():
                value = complex(root)
                if abs(value.imag) > 1e-7:
                    continue
                real = float(value.real)
                if not any(abs(real - seen) <= 1e-7 for seen in roots):
                    roots.append(real)
            return sorted(roots)
        except Exception as e:
            logger.debug(f"Polynomial solve failed for {equation!r}: {e}")
            return []


__all__ = ["SymbolicMathOracle", "TRANSFORMATIONS", "PARSER_NAMESPACE"]
