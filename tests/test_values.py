import math

from flexlang.builtin_function import BuiltinFunction
from flexlang.types import ArrayVal, is_truthy, to_string, type_name, values_equal


def test_truthiness():
    assert not is_truthy(None)
    assert not is_truthy(False)
    assert not is_truthy(0.0)
    assert not is_truthy('')
    assert not is_truthy(ArrayVal())
    assert is_truthy(-1.0)
    assert is_truthy('0')
    assert is_truthy(ArrayVal([None]))
    assert is_truthy(BuiltinFunction('f', 0, lambda interp, args: None))


def test_equality_rules():
    assert values_equal(None, None)
    assert not values_equal(None, False)
    assert not values_equal(0.0, False)
    assert values_equal(True, True)
    assert values_equal(1.0, 1)
    assert not values_equal('1', 1.0)
    a = ArrayVal([1.0])
    assert values_equal(a, a)
    assert not values_equal(a, ArrayVal([1.0]))


def test_number_formatting():
    assert to_string(7.0) == '7'
    assert to_string(-0.5) == '-0.5'
    assert to_string(0.1 + 0.2) == '0.30000000000000004'
    assert to_string(math.nan) == 'NaN'
    assert to_string(math.inf) == 'Infinity'
    assert to_string(-math.inf) == '-Infinity'


def test_stringify_compound_values():
    assert to_string(None) == 'null'
    assert to_string(False) == 'false'
    assert to_string(ArrayVal([1.0, 'a', None, ArrayVal([True])])) == '[1, a, null, [true]]'
    assert to_string(BuiltinFunction('abs', 1, None)) == '<native fn: abs>'


def test_type_names():
    assert type_name(None) == 'null'
    assert type_name(True) == 'boolean'
    assert type_name(2.0) == 'number'
    assert type_name('s') == 'string'
    assert type_name(ArrayVal()) == 'array'
