import pickle
from typing import Any

import pytest

from databags import IncompatibleConversionError, Symbol, TypedMapping


def test_specializations_are_cached():
    assert TypedMapping[str, float] is TypedMapping[str, float]
    assert TypedMapping[Any, Any] is TypedMapping
    assert TypedMapping[str].value_type is Any
    assert TypedMapping[str, float].key_type is str


def test_construction_converts_entries():
    data = TypedMapping[str, float](dx=1)
    assert data == {'dx': 1.0}
    assert type(data['dx']) is float
    assert repr(data) == "TypedMapping[str, float]({'dx': 1.0})"

    data = TypedMapping[Symbol, Any]([('a', 1)])
    assert all(type(key) is Symbol for key in data)


def test_rejected_writes_leave_mapping_untouched():
    data = TypedMapping[str, int](a=1)
    with pytest.raises(IncompatibleConversionError):
        data['b'] = 'x'
    with pytest.raises(IncompatibleConversionError):
        data.update({'b': 2, 'c': 'x'})
    with pytest.raises(TypeError):
        data[1] = 1
    assert data == {'a': 1}


def test_setdefault_and_fromkeys():
    data = TypedMapping[Symbol, Any]()
    assert data.setdefault('a', 1) == 1
    assert data.setdefault('a', 2) == 1
    assert type(next(iter(data))) is Symbol

    data = TypedMapping[str, int].fromkeys(['a', 'b'], 0)
    assert data == {'a': 0, 'b': 0}
    assert type(data) is TypedMapping[str, int]


def test_union_operators_keep_type():
    data = TypedMapping[str, float](a=1)
    merged = data | {'b': 2}
    assert type(merged) is TypedMapping[str, float]
    assert merged == {'a': 1.0, 'b': 2.0}
    assert data == {'a': 1.0}

    merged = {'b': 2, 'a': 3} | data
    assert type(merged) is TypedMapping[str, float]
    assert merged == {'a': 1.0, 'b': 2.0}

    data |= {'c': 3}
    assert type(data['c']) is float


def test_copy_and_empty():
    data = TypedMapping[str, float](a=1)
    other = data.copy()
    other['b'] = 2
    assert type(other) is type(data)
    assert 'b' not in data

    empty = data.empty()
    assert len(empty) == 0 and type(empty) is type(data)
    assert type(data.empty(Symbol)) is TypedMapping[Symbol, float]
    assert type(data.empty(value_type=int)) is TypedMapping[str, int]


def test_pickle():
    data = TypedMapping[str, float](a=1)
    restored = pickle.loads(pickle.dumps(data))
    assert restored == data
    assert type(restored) is TypedMapping[str, float]
