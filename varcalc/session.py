# Session loop: reads statements, dispatches commands and expressions, and recovers from errors.
#
# Each iteration discards leading print tokens, reads one token and dispatches on its kind. Any
# CalculatorError aborts the statement only: the message goes to the error channel and the stream
# is resynchronized by discarding input through the next statement boundary. InternalError and
# anything uncategorized propagate to the caller.

from __future__ import annotations

import logging
import math
import sys
from typing import Callable, Optional, TextIO

from varcalc import reserved
from varcalc.errors import CalculatorError, InternalError, NestingTooDeepError, UnexpectedTokenError
from varcalc.evaluator import Evaluator
from varcalc.tokens import PRINT_CHAR, AssignMode, CharSource, Token, TokenKind, TokenStream
from varcalc.variables import VariableStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_INTERNAL_ERROR = 2

BANNER = (
    "Enter one or more expressions to evaluate, ending each expression with ';' "
    "(Enter 'q;' or 'quit;' to quit, or 'help;' for more info)"
)

HELP_TEXT = (
    "Symbols and commands:\n"
    "  ;                     end a statement and evaluate it (a newline works too)\n"
    "  q or quit             quit the program\n"
    "  help                  display this help text\n"
    "  display sysvars       list the built-in system constants\n"
    "  display uvars         list the current user variables\n"
    "  display all           list all constants and variables\n"
    "  display operators     list the accepted operators\n"
    "  delete uvars all      delete all user variables\n"
    "  delete uvars <name>   delete the user variable <name>\n"
    "\n"
    "Operators: ( ) + - * / % ^\n"
    "  ^ is right-associative and binds tighter than unary minus (-3^2 is 9).\n"
    "  % takes the sign of the divisor (7 % -2 is -1).\n"
    "\n"
    "User variable names contain letters only and are case sensitive;\n"
    "system constants and commands are not.\n"
    "Mention a new name on its own ('x;') to create it with value 0,\n"
    "or assign it with 'x = <expression>;'.\n"
)


def format_number(value: float) -> str:
    """Integer-valued results print without a fractional part."""
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class Session:
    """Read-Eval-Print loop over a line reader."""

    def __init__(
        self,
        read_line: Callable[[], Optional[str]],
        variables: Optional[VariableStore] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        interactive: bool = False,
    ):
        self.variables = variables if variables is not None else VariableStore()
        self.source = CharSource(read_line)
        self.stream = TokenStream(self.source, self.variables)
        self.evaluator = Evaluator(self.stream, self.variables)
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.interactive = interactive

    def _print(self, text: str = '') -> None:
        print(text, file=self.out)

    def run(self) -> int:
        """Run until quit or end of input. Returns the exit status."""
        logger.info("session started (interactive=%s)", self.interactive)
        while True:
            try:
                if not self.step():
                    break
            except CalculatorError as e:
                logger.debug("statement failed: %s: %s", type(e).__name__, e)
                print(str(e), file=self.err)
                self.stream.ignore(PRINT_CHAR)
            except KeyboardInterrupt:
                self._print("^C")
                self.stream.reset()
        if self.interactive:
            self._print("Exiting.")
        logger.info("session ended")
        return EXIT_OK

    def step(self) -> bool:
        """Process one statement. Returns False when the session should end."""
        token = self.stream.get()
        while token.kind is TokenKind.PRINT:
            if self.source.exhausted:
                return False
            token = self.stream.get()
        logger.debug("dispatching %r", token)

        kind = token.kind
        if kind is TokenKind.QUIT:
            return False
        elif kind is TokenKind.HELP:
            self._print(HELP_TEXT)
        elif kind is TokenKind.DISPLAY:
            self.display(token.flag)
        elif kind is TokenKind.DELETE:
            self.delete(token)
        elif kind is TokenKind.ASSIGN:
            self.assign(token)
        elif kind is TokenKind.NUMBER or token.is_op('(') or token.is_op('-'):
            self.stream.putback(token)
            value = self.evaluate()
            self._print(f"= {format_number(value)}")
        elif kind is TokenKind.INVALID:
            raise InternalError("invalid token reached the session loop")
        else:
            raise UnexpectedTokenError(f"No statement can start with {token.op or token.kind.value!r}")
        return True

    def evaluate(self) -> float:
        try:
            return self.evaluator.expression()
        except RecursionError:
            raise NestingTooDeepError("expression nested too deeply") from None

    # ---- command handlers ----

    def assign(self, token: Token) -> None:
        name = token.name
        if token.mode is AssignMode.DECLARE_ZERO:
            self.variables.declare_zero(name)
            self._print(f"Created new user variable {name} with value 0.")
            return
        value = self.evaluate()
        previous = self.variables.assign(name, value)
        if previous is None:
            self._print(f"Created new user variable {name} with value {format_number(value)}")
        else:
            self._print(
                f"User variable {name} updated, was {format_number(previous)}, "
                f"now {name} = {format_number(value)}"
            )

    def delete(self, token: Token) -> None:
        if token.delete_all:
            self.variables.delete_all()
            self._print("Cleared all user variables.")
            return
        self.variables.delete(token.name)
        self._print(f"Successfully erased variable {token.name}")

    def display(self, flag: int) -> None:
        if flag == reserved.DISPLAY_SYSVARS:
            self._display_constants()
        elif flag == reserved.DISPLAY_UVARS:
            self._display_variables()
        elif flag == reserved.DISPLAY_ALL:
            self._print("Displaying all system constants, then all user variables...")
            self._display_constants()
            self._display_variables()
        elif flag == reserved.DISPLAY_OPERATORS:
            self._print("Displaying valid operators:")
            for op, description in reserved.OPERATORS.items():
                self._print(f"{op} : {description}")
        else:
            raise InternalError(f"invalid display flag {flag}")

    def _display_constants(self) -> None:
        self._print("Displaying system constants:")
        for name, value in reserved.SYSTEM_CONSTANTS.items():
            self._print(f"Constant name: {name} = {format_number(value)}")

    def _display_variables(self) -> None:
        if not len(self.variables):
            self._print("No user variables to display.")
            return
        self._print(f"Displaying all {len(self.variables)} user variables:")
        for name, value in self.variables:
            self._print(f"Variable name: {name} = {format_number(value)}")
