# Reserved-name table: system constants, command names and display/delete targets.
#
# All three tables are matched case-insensitively; callers pass the lowercased identifier.

from __future__ import annotations

import math
from typing import Dict, Tuple


SYSTEM_CONSTANTS: Dict[str, float] = {
    'e': math.e,
    'g': 9.80665,  # standard gravity, m/s^2
    'phi': (1 + math.sqrt(5)) / 2,
    'pi': math.pi,
}

COMMANDS: Tuple[str, ...] = ('help', 'q', 'quit', 'delete', 'display')

# Target keywords, flag value is 2**position
OPTIONS: Tuple[str, ...] = ('sysvars', 'uvars', 'all', 'operators')
OPTION_FLAGS: Dict[str, int] = {name: 1 << i for i, name in enumerate(OPTIONS)}

DISPLAY_SYSVARS = OPTION_FLAGS['sysvars']
DISPLAY_UVARS = OPTION_FLAGS['uvars']
DISPLAY_ALL = OPTION_FLAGS['all']
DISPLAY_OPERATORS = OPTION_FLAGS['operators']

DELETE_ALL = -1

OPERATORS: Dict[str, str] = {
    '(': 'Open parentheses',
    ')': 'Close parentheses',
    ';': 'Print',
    '=': 'Assign a user variable',
    '+': 'Add',
    '-': 'Subtract/Negative',
    '*': 'Multiply',
    '/': 'Divide',
    '%': 'Modulo',
    '^': 'Power/Raise',
}


def is_system_constant(name: str) -> bool:
    return name.lower() in SYSTEM_CONSTANTS


def system_constant(name: str) -> float:
    """Return the value of a system constant; raises KeyError for unknown names."""
    return SYSTEM_CONSTANTS[name.lower()]


def is_command(name: str) -> bool:
    return name.lower() in COMMANDS


def is_option(name: str) -> bool:
    return name.lower() in OPTION_FLAGS


def option_flag(name: str) -> int:
    """Bit flag for a display/delete target; raises KeyError for unknown names."""
    return OPTION_FLAGS[name.lower()]


def reserved_words() -> Tuple[str, ...]:
    """All reserved words, for completion."""
    return tuple(SYSTEM_CONSTANTS) + COMMANDS + OPTIONS
