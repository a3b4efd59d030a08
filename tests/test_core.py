import copy
import operator
import pickle
from typing import Any

import pytest

from databags import AbstractDataBag, Container, NotFoundError, Ownership, Symbol, newtype

Record = newtype('Record')


@pytest.fixture(params=[Container, Record], ids=['Container', 'Record'])
def bag_type(request: pytest.FixtureRequest) -> type[AbstractDataBag]:
    return request.param


def test_basic_get_set_item_and_attribute(bag_type: type[AbstractDataBag]):
    bag = bag_type()
    bag['x'] = 1
    assert bag['x'] == 1
    assert bag.x == 1

    bag.y = 2
    assert bag['y'] == 2
    assert bag.y == 2
    assert all(type(key) is Symbol for key in bag)


def test_len_and_iter_and_contains(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2)
    assert len(bag) == 2
    assert set(iter(bag)) == {'a', 'b'}
    assert 'a' in bag
    assert Symbol('a') in bag
    assert 'c' not in bag


def test_views_are_live(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2)
    keys, values, items = bag.keys(), bag.values(), bag.items()
    assert set(keys) == {'a', 'b'}
    assert set(values) == {1, 2}
    assert set(items) == {('a', 1), ('b', 2)}

    bag.c = 3
    assert 'c' in keys
    assert 3 in values
    assert ('c', 3) in items
    # Views can be iterated again.
    assert len(list(keys)) == len(list(keys)) == 3


def test_get_and_defaults(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2)
    assert bag.get('c', 0) == 0
    assert bag.get('c') is None
    assert bag.get('a', 0) == 1
    assert 'c' not in bag

    assert bag.setdefault('c', 0) == 0
    assert 'c' in bag
    assert bag['c'] == 0
    assert bag.setdefault('c', 5) == 0


def test_missing_key_raises_not_found(bag_type: type[AbstractDataBag]):
    bag = bag_type()
    with pytest.raises(NotFoundError):
        _ = bag['nope']
    with pytest.raises(KeyError):
        _ = bag['nope']
    with pytest.raises(NotFoundError):
        _ = bag.nope

    assert not hasattr(bag, 'nope')
    assert getattr(bag, 'nope', 42) == 42


def test_removal(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2, c=3)
    assert bag.delete('a') is bag
    assert 'a' not in bag
    with pytest.raises(NotFoundError):
        bag.delete('a')

    assert bag.delete('b').delete('c') is bag
    assert len(bag) == 0

    bag = bag_type(a=1, b=2)
    del bag['a']
    del bag.b
    assert len(bag) == 0
    with pytest.raises(NotFoundError):
        del bag['a']
    with pytest.raises(NotFoundError):
        del bag.a


def test_pop(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2)
    assert bag.pop('a') == 1
    assert 'a' not in bag
    assert bag.pop('a', 99) == 99
    assert bag.pop('b', 99) == 2
    with pytest.raises(NotFoundError):
        bag.pop('b')

    bag.x = 10
    key, value = bag.popitem()
    assert (key, value) == ('x', 10)
    assert len(bag) == 0


def test_clear(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2)
    assert bag.clear() is bag
    assert len(bag) == 0


def test_merge_into_last_source_wins(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=0)
    result = bag.merge_into({'a': 1, 'b': 1}, bag_type(b=2, c=2), [('c', 3), ('d', 3)])
    assert result is bag
    assert dict(bag) == {'a': 1, 'b': 2, 'c': 3, 'd': 3}

    bag.update(e=4)
    assert bag.e == 4


def test_merge_is_not_mutating(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=1)
    merged = bag.merge({'b': 2, 'c': 3})
    assert type(merged) is type(bag)
    assert dict(merged) == {'a': 1, 'b': 2, 'c': 3}
    assert dict(bag) == {'a': 1, 'b': 1}

    merged = bag | {'c': 4}
    assert merged.c == 4 and 'c' not in bag

    merged = {'a': 5, 'z': 0} | bag
    assert type(merged) is type(bag)
    assert dict(merged) == {'a': 1, 'b': 1, 'z': 0}

    bag |= {'c': 5}
    assert bag.c == 5


def test_merge_with_combine(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=2)
    merged = bag.merge({'a': 10, 'c': 5}, {'a': 100}, combine=operator.add)
    assert dict(merged) == {'a': 111, 'b': 2, 'c': 5}


def test_empty_and_copy(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b=[1, 2])
    empty = bag.empty()
    assert len(empty) == 0 and len(bag) == 2
    assert type(empty) is type(bag)

    other = bag.copy()
    assert other == bag and other is not bag
    assert type(other) is type(bag)
    assert other.ownership is Ownership.OWNED
    other.c = 3
    assert 'c' not in bag
    assert other.b is bag.b

    shallow = copy.copy(bag)
    shallow.d = 4
    assert 'd' not in bag

    deep = copy.deepcopy(bag)
    deep.b.append(3)
    assert bag.b == [1, 2]


def test_convert_to_own_type_is_identity(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1)
    assert type(bag).convert(bag) is bag

    converted = type(bag).convert({'b': 2})
    assert type(converted) is type(bag)
    assert converted.b == 2


def test_attribute_and_key_access_are_interchangeable(bag_type: type[AbstractDataBag]):
    bag = bag_type()
    bag.units = 'km'
    bag['dx'] = 0.2
    assert bag.units == bag['units'] == bag[Symbol('units')]
    assert bag.dx == bag['dx']
    bag.Δx = 0.3
    assert bag['Δx'] == 0.3
    assert 'units' in dir(bag) and 'Δx' in dir(bag)
    assert 'keys' in dir(bag)


def test_methods_shadow_entries(bag_type: type[AbstractDataBag]):
    bag = bag_type()
    bag['keys'] = 1
    assert callable(bag.keys)
    assert bag['keys'] == 1


def test_equality_with_mappings(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1)
    assert bag == {'a': 1}
    assert bag == bag_type(a=1)
    assert bag != {'a': 2}
    with pytest.raises(TypeError):
        hash(bag)


def test_get_key(bag_type: type[AbstractDataBag]):
    bag = bag_type(units='km')
    key = bag.get_key('units', None)
    assert type(key) is Symbol
    assert bag.get_key('foo', 3.14) == 3.14


def test_pickle(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1, b='x')
    restored = pickle.loads(pickle.dumps(bag))
    assert restored == bag
    assert type(restored) is type(bag)


def test_repr(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1)
    assert repr(bag) == f"{type(bag).__name__}({{Symbol('a'): 1}})"


def test_key_and_value_types_are_static(bag_type: type[AbstractDataBag]):
    bag = bag_type(a=1)
    assert type(bag).key_type is Symbol
    assert type(bag).value_type is Any
    assert bag.key_type is Symbol
