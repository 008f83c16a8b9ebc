"""Parse and evaluate arithmetic expressions safely."""
import math
import operator
import re
from typing import Callable, Dict, List, Tuple


# Type aliases for operator functions
OperatorFn = Callable[[float, float], float]
UnaryFn = Callable[[float], float]


def _divide(a: float, b: float) -> float:
    """Divide with IEEE semantics: x/0 is a signed infinity, 0/0 is nan."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _remainder(a: float, b: float) -> float:
    """Remainder taking the sign of the dividend; x%0 is nan."""
    if b == 0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def _power(a: float, b: float) -> float:
    """Exponentiation with IEEE results where math.pow would raise."""
    if math.isinf(b) and abs(a) == 1:
        return math.nan
    if a == 0 and b < 0:
        return math.inf
    try:
        return math.pow(a, b)
    except OverflowError:
        odd_exponent = b.is_integer() and b % 2 == 1
        return -math.inf if a < 0 and odd_exponent else math.inf
    except ValueError:
        # Negative base with a fractional exponent
        return math.nan


# Mapping of binary operator symbols to (precedence, function)
OPERATORS: Dict[str, Tuple[int, OperatorFn]] = {
    "+": (1, operator.add),
    "-": (1, operator.sub),
    "*": (2, operator.mul),
    "/": (2, _divide),
    "%": (2, _remainder),
    "**": (4, _power),
}

RIGHT_ASSOCIATIVE = ("**",)

# Prefix operators, emitted in RPN with a "u" marker
UNARY_OPERATORS: Dict[str, Tuple[int, UnaryFn]] = {
    "u+": (3, operator.pos),
    "u-": (3, operator.neg),
}

PARENTHESES = ("(", ")")

_NUMBER_CHARS = re.compile(r"[0-9.]+")
_NUMBER_LITERAL = re.compile(r"\d+\.?\d*|\.\d+")


class InvalidExpressionError(ValueError):
    """Raised when an arithmetic expression cannot be parsed."""


class ExpressionParser:
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Safe, deterministic computation

    Algorithm:
        1. Tokenize character by character (spaces are ignored)
        2. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        3. Evaluate RPN using a stack

    Supported syntax: ``+ - * / %`` with the usual precedence, right-associative
    ``**`` binding tighter than ``* / %``, parentheses, and unary ``+``/``-``.
    ``%`` is the remainder operator.

    Examples:
        - Infix expression (standard notation): 3 + 4 * (2 - 1)
        - Corresponding Reverse Polish Notation (RPN): 3 4 2 1 - * +
    """

    @staticmethod
    def tokenize(expr: str) -> List[str]:
        """
        Split an arithmetic expression into number, operator and parenthesis tokens.

        Spaces are optional (e.g. "3+4*2" and "3 + 4 * 2" give the same tokens),
        except between signs: "2--3" is rejected while "2- -3" is a subtraction
        of a negated number. "**" with no space in between is exponentiation.

        :param str expr: Arithmetic expression as a string

        :return: List of tokens
        :rtype: List[str]
        :raises InvalidExpressionError: On unknown characters, adjacent "++"/"--" or malformed number literals
        """
        tokens: List[str] = []
        position = 0
        while position < len(expr):
            char = expr[position]
            if char.isspace():
                position += 1
                continue

            pair = expr[position:position + 2]
            if pair == "**":
                tokens.append(pair)
                position += 2
                continue
            if pair in ("++", "--"):
                # Adjacent signs read as increment/decrement, which a literal cannot take
                raise InvalidExpressionError(f"Unexpected {pair!r} at position {position}")

            if char in OPERATORS or char in PARENTHESES:
                tokens.append(char)
                position += 1
                continue

            match = _NUMBER_CHARS.match(expr, position)
            if match is None:
                raise InvalidExpressionError(f"Unexpected character {char!r} at position {position}")

            literal = match.group()
            if not _NUMBER_LITERAL.fullmatch(literal):
                raise InvalidExpressionError(f"Malformed number: {literal!r}")
            integer_part = literal.split(".")[0]
            if len(integer_part) > 1 and integer_part.startswith("0"):
                raise InvalidExpressionError(f"Number with a leading zero: {literal!r}")

            tokens.append(literal)
            position = match.end()

        return tokens

    @staticmethod
    def _is_number(token: str) -> bool:
        """
        Determine if a token represents a numeric value.

        Supports both integers and floating-point numbers.

        :param str token: Token string

        :return: True if token can be converted to float, else False
        :rtype: bool
        """
        try:
            float(token)
            return True
        except ValueError:
            return False

    @staticmethod
    def _precedence(token: str) -> int:
        if token in UNARY_OPERATORS:
            return UNARY_OPERATORS[token][0]
        return OPERATORS.get(token, (0,))[0]

    @staticmethod
    def to_rpn(tokens: List[str]) -> List[str]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        A ``+`` or ``-`` in operand position is unary and is emitted as ``u+`` or ``u-``.
        A unary operator directly in front of the base of ``**`` is rejected.

        :param List[str] tokens: List of arithmetic tokens

        :return: List of tokens in RPN order
        :rtype: List[str]
        :raises InvalidExpressionError: If the token sequence is not a valid expression
        """
        output: List[str] = []
        stack: List[str] = []
        # True while the next token must start an operand
        expect_operand = True

        for token in tokens:
            if ExpressionParser._is_number(token):
                if not expect_operand:
                    raise InvalidExpressionError(f"Missing operator before {token!r}")
                # Numbers are added directly to the output
                output.append(token)
                expect_operand = False

            elif token == "(":
                if not expect_operand:
                    raise InvalidExpressionError("Missing operator before '('")
                stack.append(token)

            elif token == ")":
                if expect_operand:
                    raise InvalidExpressionError("Missing operand before ')'")
                while stack and stack[-1] != "(":
                    output.append(stack.pop())
                if not stack:
                    raise InvalidExpressionError("Unmatched ')'")
                stack.pop()
                expect_operand = False

            elif token in OPERATORS and expect_operand:
                if token not in ("+", "-"):
                    raise InvalidExpressionError(f"Missing operand before {token!r}")
                # Prefix operators bind to what follows, nothing to pop yet
                stack.append("u" + token)

            elif token in OPERATORS:
                right_associative = token in RIGHT_ASSOCIATIVE
                if right_associative and stack and stack[-1] in UNARY_OPERATORS:
                    # The base of ** cannot carry a sign, (-2)**2 must be written with parentheses
                    raise InvalidExpressionError(f"Unary operator before {token!r} needs parentheses")
                # Operator: pop operators from stack with higher precedence (or equal, if left-associative)
                prec = OPERATORS[token][0]
                while stack and stack[-1] != "(":
                    top_prec = ExpressionParser._precedence(stack[-1])
                    if top_prec < prec or (top_prec == prec and right_associative):
                        break
                    output.append(stack.pop())
                stack.append(token)
                expect_operand = True

            else:
                raise InvalidExpressionError(f"Unknown token: {token!r}")

        if expect_operand:
            raise InvalidExpressionError("Expression cannot end with an operator")

        # Append remaining operators (stack top first)
        while stack:
            token = stack.pop()
            if token == "(":
                raise InvalidExpressionError("Unmatched '('")
            output.append(token)
        return output

    @staticmethod
    def evaluate(expr: str) -> float:
        """
        Evaluate an arithmetic expression safely.

        Division by zero follows IEEE rules and yields an infinity or nan
        instead of raising; callers decide whether such a value is acceptable.

        :param str expr: Arithmetic expression string

        :return: Computed result as float
        :rtype: float
        :raises InvalidExpressionError: If expression is invalid or malformed
        """
        # Tokenize the expression
        tokens: List[str] = ExpressionParser.tokenize(expr)

        if not tokens:
            raise InvalidExpressionError("Empty expression")

        # Convert to RPN
        rpn: List[str] = ExpressionParser.to_rpn(tokens)

        # Evaluate RPN using a stack
        stack: List[float] = []
        for token in rpn:
            if ExpressionParser._is_number(token):
                stack.append(float(token))
            elif token in UNARY_OPERATORS:
                if not stack:
                    raise InvalidExpressionError(f"Invalid expression (missing operand): {expr}")
                stack.append(UNARY_OPERATORS[token][1](stack.pop()))
            else:
                # Operator requires two operands
                if len(stack) < 2:
                    raise InvalidExpressionError(f"Invalid expression (not enough operands): {expr}")
                b: float = stack.pop()
                a: float = stack.pop()
                stack.append(OPERATORS[token][1](a, b))

        if len(stack) != 1:
            raise InvalidExpressionError(f"Invalid expression (remaining operands): {expr}")

        return stack[0]
