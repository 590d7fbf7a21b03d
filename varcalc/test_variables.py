import pytest

from varcalc.errors import DuplicateDeclarationError, VariableNotFoundError
from varcalc.variables import VariableStore


def test_declare_zero_creates_variable():
    store = VariableStore()
    store.declare_zero('x')
    assert store.exists('x')
    assert store.get('x') == 0.0


def test_declare_zero_on_existing_name_fails():
    store = VariableStore()
    store.assign('x', 5)
    with pytest.raises(DuplicateDeclarationError):
        store.declare_zero('x')
    assert store.get('x') == 5


def test_assign_returns_previous_value():
    store = VariableStore()
    assert store.assign('x', 1) is None
    assert store.assign('x', 2.5) == 1
    assert store.get('x') == 2.5


def test_names_are_case_sensitive():
    store = VariableStore()
    store.assign('x', 1)
    store.assign('X', 2)
    assert store.get('x') == 1
    assert store.get('X') == 2
    assert len(store) == 2


def test_get_missing_variable_fails():
    with pytest.raises(VariableNotFoundError) as e:
        VariableStore().get('nope')
    assert str(e.value) == "Tried to access non-existent user variable nope"


def test_delete_and_delete_all():
    store = VariableStore()
    store.assign('a', 1)
    store.assign('b', 2)
    store.delete('a')
    assert not store.exists('a')
    with pytest.raises(VariableNotFoundError):
        store.delete('a')
    assert store.delete_all() == 1
    assert len(store) == 0


def test_iteration_keeps_creation_order_across_reassignment():
    store = VariableStore()
    store.assign('b', 1)
    store.assign('a', 2)
    store.assign('b', 3)
    assert list(store) == [('b', 3.0), ('a', 2.0)]
    assert store.names() == ['b', 'a']
