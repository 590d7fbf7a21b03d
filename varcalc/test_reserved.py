import itertools
import math

import pytest

from varcalc import reserved


def case_permutations(word):
    return {''.join(chars) for chars in itertools.product(*[(c.lower(), c.upper()) for c in word])}


@pytest.mark.parametrize("name", list(reserved.SYSTEM_CONSTANTS))
def test_constants_resolve_for_every_case_permutation(name):
    values = {reserved.system_constant(p) for p in case_permutations(name)}
    assert values == {reserved.SYSTEM_CONSTANTS[name]}


@pytest.mark.parametrize("name", reserved.COMMANDS)
def test_commands_match_for_every_case_permutation(name):
    assert all(reserved.is_command(p) for p in case_permutations(name))


def test_constant_values():
    assert reserved.system_constant('pi') == math.pi
    assert reserved.system_constant('e') == math.e
    assert math.isclose(reserved.system_constant('phi'), 1.6180339887, rel_tol=1e-10)
    assert reserved.system_constant('g') == 9.80665


def test_option_flags_follow_table_position():
    assert [reserved.option_flag(name) for name in reserved.OPTIONS] == [1, 2, 4, 8]
    assert reserved.option_flag('Operators') == reserved.DISPLAY_OPERATORS


def test_unknown_option_fails():
    assert not reserved.is_option('everything')
    with pytest.raises(KeyError):
        reserved.option_flag('everything')


def test_tables_are_disjoint():
    constants = set(reserved.SYSTEM_CONSTANTS)
    commands = set(reserved.COMMANDS)
    options = set(reserved.OPTIONS)
    assert not constants & commands
    assert not constants & options
    assert not commands & options


def test_operator_table_has_ten_operators():
    assert ''.join(reserved.OPERATORS) == "();=+-*/%^"
    assert reserved.OPERATORS['^'] == 'Power/Raise'


def test_reserved_words_for_completion():
    words = reserved.reserved_words()
    assert 'display' in words and 'uvars' in words and 'phi' in words
