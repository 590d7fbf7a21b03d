# Error hierarchy for the calculator.
#
# Everything deriving from CalculatorError is a user-input failure: it aborts the current statement only,
# and the session loop reports it and resynchronizes. InternalError signals a broken contract between the
# evaluator and the token stream and is never caught by the session loop.

from __future__ import annotations


class CalculatorError(Exception):
    """Base class for recoverable, statement-level errors."""
    pass

# --------------------------
# Lexing
# --------------------------

class LexerError(CalculatorError):
    """Raised for errors during tokenization."""
    pass

class MalformedTokenError(LexerError):
    """Raised when an input character cannot start any token."""
    pass

class UndeclaredVariableError(LexerError):
    """Raised on bare use of an identifier that was never declared."""
    pass

class UnknownCommandTargetError(LexerError):
    """Raised for an invalid display/delete argument."""
    pass

# --------------------------
# Parsing / evaluation
# --------------------------

class ParseError(CalculatorError):
    """Raised for parsing errors."""
    pass

class UnexpectedTokenError(ParseError):
    """Raised when a token cannot continue the current grammar position."""
    pass

class NestingTooDeepError(ParseError):
    """Raised when an expression nests deeper than the evaluator's recursion allows."""
    pass

class EvalError(CalculatorError):
    """Raised for errors during evaluation."""
    pass

class MathError(EvalError):
    """Division or modulo by zero, or a power outside the real domain."""
    pass

# --------------------------
# Variable store
# --------------------------

class VariableError(CalculatorError):
    pass

class DuplicateDeclarationError(VariableError):
    """Raised when declaring a variable that already exists."""
    pass

class VariableNotFoundError(VariableError, KeyError):
    """Raised when reading or deleting a variable that does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message for the error channel
        return str(self.args[0]) if self.args else ''

# --------------------------
# Internal consistency
# --------------------------

class InternalError(RuntimeError):
    """A broken invariant inside the calculator itself. Not recoverable."""
    pass

class PushbackBufferFullError(InternalError):
    """Raised by putback() when the single-token buffer is already occupied."""
    pass
