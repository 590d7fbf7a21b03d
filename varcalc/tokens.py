# Tokenizer for the statement calculator.
#
# The token stream pulls characters from a line-oriented source on demand and classifies them into
# tokens, with exactly one token of pushback. Identifiers are resolved while lexing: commands pull in
# their target word, system constants and existing variables become number tokens, and unknown names
# turn into declare/assign directives depending on the character that follows.
#
# Two tiers of lookahead exist: the one-token buffer (putback) used by the grammar, and raw-character
# pushback on the source used by the lexer itself and by peek_raw_char() for unary minus.

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from varcalc import reserved
from varcalc.errors import (
    MalformedTokenError,
    PushbackBufferFullError,
    UndeclaredVariableError,
    UnknownCommandTargetError,
    VariableNotFoundError,
)
from varcalc.variables import VariableStore

logger = logging.getLogger(__name__)

PRINT_CHAR = ';'
BOUNDARY_CHARS = (';', '\n', '')
OPERATOR_CHARS = frozenset(reserved.OPERATORS)


def is_digit(ch: str) -> bool:
    return ch != '' and ch in string.digits


def is_alpha(ch: str) -> bool:
    return ch != '' and ch in string.ascii_letters


def is_boundary(ch: str) -> bool:
    return ch in BOUNDARY_CHARS

# --------------------------
# Tokens
# --------------------------

class TokenKind(Enum):
    INVALID = 'invalid'
    NUMBER = 'number'
    OPERATOR = 'operator'
    PRINT = 'print'
    QUIT = 'quit'
    HELP = 'help'
    DISPLAY = 'display'
    DELETE = 'delete'
    ASSIGN = 'assign'


class AssignMode(Enum):
    DECLARE_ZERO = 0
    ASSIGN_FOLLOWS = 1


@dataclass(frozen=True)
class Token:
    """One lexical unit.

    `value` carries the number for NUMBER tokens, `op` the character for OPERATOR tokens, `flag` the
    display target bit (or DELETE_ALL) and `name` the variable for DELETE/ASSIGN tokens.
    """
    kind: TokenKind = TokenKind.INVALID
    value: float = 0.0
    op: str = ''
    flag: int = 0
    name: Optional[str] = None
    mode: Optional[AssignMode] = None

    def __repr__(self) -> str:
        if self.kind is TokenKind.NUMBER:
            return f"Token(number, {self.value!r})"
        if self.kind is TokenKind.OPERATOR:
            return f"Token(operator, {self.op!r})"
        if self.kind is TokenKind.ASSIGN:
            return f"Token(assign, {self.mode.name}, {self.name!r})"
        if self.kind in (TokenKind.DISPLAY, TokenKind.DELETE):
            return f"Token({self.kind.value}, {self.flag}, {self.name!r})"
        return f"Token({self.kind.value})"

    def is_op(self, ch: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.op == ch

    @property
    def delete_all(self) -> bool:
        return self.kind is TokenKind.DELETE and self.flag == reserved.DELETE_ALL

    @classmethod
    def number(cls, value: float) -> 'Token':
        return cls(TokenKind.NUMBER, value=float(value))

    @classmethod
    def operator(cls, ch: str) -> 'Token':
        return cls(TokenKind.OPERATOR, op=ch)

    @classmethod
    def print_(cls) -> 'Token':
        return cls(TokenKind.PRINT, op=PRINT_CHAR)

    @classmethod
    def display(cls, flag: int) -> 'Token':
        return cls(TokenKind.DISPLAY, flag=flag)

    @classmethod
    def delete(cls, name: Optional[str]) -> 'Token':
        if name is None:
            return cls(TokenKind.DELETE, flag=reserved.DELETE_ALL)
        return cls(TokenKind.DELETE, name=name)

    @classmethod
    def assign(cls, mode: AssignMode, name: str) -> 'Token':
        return cls(TokenKind.ASSIGN, mode=mode, name=name)

# --------------------------
# Raw character source
# --------------------------

class CharSource:
    """Character reader over a line provider, with unlimited character pushback.

    `read_line` returns the next line (normally ending in a newline) or '' / None at end of input.
    End of input is reported as '' and is sticky.
    """

    def __init__(self, read_line: Callable[[], Optional[str]]):
        self._read_line = read_line
        self._line = ''
        self._pos = 0
        self._pushed: List[str] = []
        self._eof = False

    @property
    def exhausted(self) -> bool:
        return self._eof and not self._pushed and self._pos >= len(self._line)

    def get(self) -> str:
        if self._pushed:
            return self._pushed.pop()
        while self._pos >= len(self._line):
            if self._eof:
                return ''
            line = self._read_line()
            if not line:
                self._eof = True
                return ''
            self._line, self._pos = line, 0
        ch = self._line[self._pos]
        self._pos += 1
        return ch

    def putback(self, ch: str) -> None:
        if ch:
            self._pushed.append(ch)

    def get_nonblank(self) -> str:
        """Next character that is not a blank. Newline is not a blank."""
        ch = self.get()
        while ch != '\n' and ch.isspace():
            ch = self.get()
        return ch

    def discard_line(self) -> None:
        self._pushed.clear()
        self._line, self._pos = '', 0

# --------------------------
# Token stream
# --------------------------

class TokenStream:
    """Token source with a single slot of pushback."""

    def __init__(self, source: CharSource, variables: VariableStore):
        self.source = source
        self.variables = variables
        self._buffer: Optional[Token] = None

    @property
    def full(self) -> bool:
        return self._buffer is not None

    def get(self) -> Token:
        if self._buffer is not None:
            token, self._buffer = self._buffer, None
            return token
        return self._lex()

    def putback(self, token: Token) -> None:
        if self._buffer is not None:
            raise PushbackBufferFullError(f"putback() of {token!r} into a full buffer holding {self._buffer!r}")
        self._buffer = token

    def ignore(self, sentinel: str = PRINT_CHAR) -> None:
        """Discard input up to and including `sentinel`.

        When the sentinel is the print character every statement boundary (';', newline, end of
        input) matches it.
        """
        matches_any_boundary = sentinel == PRINT_CHAR
        token, self._buffer = self._buffer, None
        logger.debug("resynchronizing to %r (buffered: %r)", sentinel, token)
        if token is not None:
            if token.op == sentinel or (matches_any_boundary and token.kind is TokenKind.PRINT):
                return
        while True:
            ch = self.source.get()
            if ch == sentinel or ch == '' or (matches_any_boundary and is_boundary(ch)):
                return

    def reset(self) -> None:
        """Forget the buffered token and the rest of the current line."""
        self._buffer = None
        self.source.discard_line()

    def peek_raw_char(self) -> str:
        """Next non-blank raw character, left unconsumed. Bypasses the token buffer."""
        ch = self.source.get_nonblank()
        self.source.putback(ch)
        return ch

    # ---- lexing ----

    def _lex(self) -> Token:
        ch = self.source.get_nonblank()
        if is_boundary(ch):
            return Token.print_()
        if ch in OPERATOR_CHARS:
            return Token.operator(ch)
        if is_digit(ch) or ch == '.':
            self.source.putback(ch)
            return Token.number(self.read_number())
        if is_alpha(ch):
            self.source.putback(ch)
            return self._lex_identifier(self.read_word())
        raise MalformedTokenError(f"Bad token {ch!r}")

    def read_number(self) -> float:
        """Consume a floating-point literal: digits, at most one '.', optional exponent."""
        chars: List[str] = []
        ch = self.source.get()
        while is_digit(ch) or (ch == '.' and '.' not in chars):
            chars.append(ch)
            ch = self.source.get()
        if ch in ('e', 'E'):
            chars.extend(self._read_exponent(ch))
        else:
            self.source.putback(ch)
        text = ''.join(chars)
        try:
            return float(text)
        except ValueError:
            raise MalformedTokenError(f"Bad numeric literal {text!r}") from None

    def _read_exponent(self, marker: str) -> List[str]:
        # only an exponent if digits follow, otherwise leave 'e' for the next token
        sign = self.source.get()
        chars = [marker]
        if sign in ('+', '-'):
            chars.append(sign)
            ch = self.source.get()
        else:
            ch = sign
        if not is_digit(ch):
            self.source.putback(ch)
            for pending in reversed(chars[1:]):
                self.source.putback(pending)
            self.source.putback(marker)
            return []
        while is_digit(ch):
            chars.append(ch)
            ch = self.source.get()
        self.source.putback(ch)
        return chars

    def read_word(self) -> str:
        """Consume a maximal run of letters (possibly empty)."""
        letters: List[str] = []
        ch = self.source.get()
        while is_alpha(ch):
            letters.append(ch)
            ch = self.source.get()
        self.source.putback(ch)
        return ''.join(letters)

    def _read_target(self) -> str:
        ch = self.source.get_nonblank()
        self.source.putback(ch)
        return self.read_word()

    def _lex_identifier(self, name: str) -> Token:
        lowered = name.lower()
        if reserved.is_command(lowered):
            return self._lex_command(lowered)
        if reserved.is_system_constant(lowered):
            return Token.number(reserved.system_constant(lowered))
        if self.variables.exists(name):
            ch = self.source.get_nonblank()
            if ch == '=':
                return Token.assign(AssignMode.ASSIGN_FOLLOWS, name)
            self.source.putback(ch)
            return Token.number(self.variables.get(name))
        # unknown name: a bare mention declares it, '=' assigns it, anything else is a use
        ch = self.source.get_nonblank()
        if is_boundary(ch):
            self.source.putback(ch)
            return Token.assign(AssignMode.DECLARE_ZERO, name)
        if ch == '=':
            return Token.assign(AssignMode.ASSIGN_FOLLOWS, name)
        self.source.putback(ch)
        raise UndeclaredVariableError(f"Tried to use an undeclared variable: {name}")

    def _lex_command(self, command: str) -> Token:
        if command in ('q', 'quit'):
            return Token(TokenKind.QUIT)
        if command == 'help':
            return Token(TokenKind.HELP)
        if command == 'display':
            target = self._read_target()
            if not reserved.is_option(target):
                raise UnknownCommandTargetError(
                    f"Bad argument for display. Options for display are: {';  '.join(reserved.OPTIONS)};"
                )
            return Token.display(reserved.option_flag(target))
        if command == 'delete':
            target = self._read_target()
            if target.lower() == 'uvars':
                # a lone 'uvars' names the variable if one exists, otherwise it is the separator word
                following = self._read_target()
                if following or not self.variables.exists(target):
                    target = following
            if target.lower() == 'all':
                return Token.delete(None)
            if not target:
                raise UnknownCommandTargetError("Bad argument for delete. Use: delete uvars all;  or  delete uvars <name>;")
            if self.variables.exists(target):
                return Token.delete(target)
            raise VariableNotFoundError(f"Cannot delete a variable that does not exist: {target}")
        raise UnknownCommandTargetError(f"Command not found: {command}")
