import pytest

from flexlang.environment import Environment
from flexlang.errors import FlexRuntimeError


def test_define_shadows_outer_binding():
    outer = Environment()
    outer.define('x', 1.0)
    inner = Environment(parent=outer)
    inner.define('x', 2.0)
    assert inner.get('x') == 2.0
    assert outer.get('x') == 1.0


def test_assign_updates_nearest_binding():
    outer = Environment()
    outer.define('x', 1.0)
    inner = Environment(parent=outer)
    inner.assign('x', 5.0)
    assert outer.get('x') == 5.0
    assert 'x' not in inner.values


def test_get_and_assign_raise_for_unknown_names():
    env = Environment(parent=Environment())
    with pytest.raises(FlexRuntimeError) as info:
        env.get('missing')
    assert info.value.message == "Undefined variable 'missing'."
    with pytest.raises(FlexRuntimeError):
        env.assign('missing', 1.0)


def test_exists_walks_the_chain():
    root = Environment()
    root.define('g', None)
    leaf = Environment(parent=Environment(parent=root))
    assert leaf.exists('g')
    assert not leaf.exists('h')


def test_snapshot_is_a_copy_of_own_frame():
    env = Environment(parent=Environment())
    env.define('a', 1.0)
    snap = env.snapshot()
    snap['a'] = 2.0
    assert env.get('a') == 1.0
