# Recursive-descent evaluator.
#
# Grammar, evaluated immediately with no intermediate tree:
#     expression : term (('+' | '-') term)*
#     term       : primary (('*' | '/' | '%') primary)* ['^' primary]
#     primary    : '(' expression ')'
#                | NUMBER ['^' primary]
#                | '-' ('(' expression ')' | NUMBER) ['^' primary]
#                | ASSIGN
#
# '^' recurses into primary, not term, so it is right-associative and binds a single primary.
# A '^' seen by term ends the term right away; anything after it is left for the caller.

from __future__ import annotations

import logging
import math

from varcalc.errors import (
    InternalError,
    MathError,
    UndeclaredVariableError,
    UnexpectedTokenError,
)
from varcalc.tokens import AssignMode, Token, TokenKind, TokenStream, is_alpha, is_digit
from varcalc.variables import VariableStore

logger = logging.getLogger(__name__)


def floor_mod(left: float, right: float) -> float:
    """Modulo with the sign of the divisor: 7 % -2 == -1, -7 % 2 == 1."""
    if right == 0:
        raise MathError("modulo by zero")
    if left == 0:
        return 0.0
    # Python's float % already follows the divisor's sign
    return left % right


def power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except ValueError:
        raise MathError(f"{base!r} ^ {exponent!r} is not a real number") from None
    except OverflowError:
        raise MathError(f"{base!r} ^ {exponent!r} is too large") from None


class Evaluator:
    """Evaluates expressions straight off a token stream."""

    def __init__(self, stream: TokenStream, variables: VariableStore):
        self.stream = stream
        self.variables = variables

    def expression(self) -> float:
        left = self.term()
        while True:
            token = self.stream.get()
            if token.is_op('+'):
                left += self.term()
            elif token.is_op('-'):
                left -= self.term()
            else:
                self.stream.putback(token)
                return left

    def term(self) -> float:
        left = self.primary()
        while True:
            token = self.stream.get()
            if token.is_op('*'):
                left *= self.primary()
            elif token.is_op('/'):
                divisor = self.primary()
                if divisor == 0:
                    raise MathError("divide by zero")
                left /= divisor
            elif token.is_op('%'):
                left = floor_mod(left, self.primary())
            elif token.is_op('^'):
                return power(left, self.primary())
            else:
                self.stream.putback(token)
                return left

    def primary(self) -> float:
        token = self.stream.get()
        if token.is_op('('):
            return self._closed_expression()
        if token.is_op('-'):
            return self._negated_primary()
        if token.kind is TokenKind.NUMBER:
            return self._power_lookahead(token.value)
        if token.kind is TokenKind.ASSIGN:
            return self._inline_assignment(token)
        if token.kind is TokenKind.INVALID:
            raise InternalError("invalid token reached primary()")
        self.stream.putback(token)
        raise UnexpectedTokenError(f"primary expected, got {_describe(token)}")

    def _closed_expression(self) -> float:
        value = self.expression()
        token = self.stream.get()
        if not token.is_op(')'):
            self.stream.putback(token)
            raise UnexpectedTokenError(f"')' expected, got {_describe(token)}")
        return value

    def _power_lookahead(self, base: float) -> float:
        token = self.stream.get()
        if token.is_op('^'):
            return power(base, self.primary())
        self.stream.putback(token)
        return base

    def _negated_primary(self) -> float:
        # decide on the raw character before tokenizing what follows the minus
        ch = self.stream.peek_raw_char()
        if not (ch == '(' or ch == '.' or is_digit(ch) or is_alpha(ch)):
            raise UnexpectedTokenError(f"Expected a number, a variable or '(' after '-', got {ch!r}")
        token = self.stream.get()
        if token.is_op('('):
            value = self._closed_expression()
        elif token.kind is TokenKind.NUMBER:
            value = token.value
        elif token.kind is TokenKind.ASSIGN:
            self.stream.putback(token)
            raise UndeclaredVariableError(f"Failed to negate undeclared variable {token.name}")
        else:
            self.stream.putback(token)
            raise UnexpectedTokenError(f"Tried to negate {_describe(token)}")
        return self._power_lookahead(-value)

    def _inline_assignment(self, token: Token) -> float:
        if token.mode is AssignMode.DECLARE_ZERO:
            return token.value
        value = self.expression()
        self.variables.assign(token.name, value)
        logger.debug("in-line assignment %s = %r", token.name, value)
        return value


def _describe(token: Token) -> str:
    if token.kind is TokenKind.OPERATOR:
        return repr(token.op)
    if token.kind is TokenKind.PRINT:
        return 'end of statement'
    if token.kind is TokenKind.NUMBER:
        return repr(token.value)
    if token.kind is TokenKind.ASSIGN:
        return f"variable {token.name!r}"
    return f"the {token.kind.value} command"
