import math

import pytest

from fractal.errors import InvalidInput
from terrain.keys import ChunkKey, difference, grid_key, intersect, quantize_key


def _maps():
    current = {ChunkKey(x, 0, 10): f"old{x}" for x in range(-2, 3)}
    desired = {ChunkKey(x, 0, 10): f"new{x}" for x in range(-1, 4)}
    return current, desired


def test_intersect_keeps_current_values():
    current, desired = _maps()
    out = intersect(current, desired)
    assert set(out) == {ChunkKey(x, 0, 10) for x in range(-1, 3)}
    assert all(v.startswith("old") for v in out.values())


def test_difference():
    current, desired = _maps()
    assert set(difference(desired, current)) == {ChunkKey(3, 0, 10)}
    assert set(difference(current, desired)) == {ChunkKey(-2, 0, 10)}
    assert difference(current, current) == {}


def test_inputs_not_mutated_and_results_are_new():
    current, desired = _maps()
    c_copy, d_copy = dict(current), dict(desired)
    a = intersect(current, desired)
    b = difference(current, desired)
    assert current == c_copy
    assert desired == d_copy
    assert a is not current
    assert b is not current


def test_order_independent():
    current, desired = _maps()
    reversed_current = dict(reversed(list(current.items())))
    reversed_desired = dict(reversed(list(desired.items())))
    assert intersect(current, desired) == intersect(reversed_current, reversed_desired)
    assert difference(current, desired) == difference(reversed_current, reversed_desired)


@pytest.mark.parametrize(
    "current_keys, desired_keys",
    [
        (set(), {(0, 0)}),
        ({(0, 0)}, set()),
        ({(0, 0), (1, 1), (2, 2)}, {(1, 1), (3, 3)}),
        ({(x, y) for x in range(4) for y in range(4)}, {(x, y) for x in range(2, 6) for y in range(-1, 3)}),
    ],
)
def test_reconciliation_properties(current_keys, desired_keys):
    current = {ChunkKey(x, y, 1): "c" for x, y in current_keys}
    desired = {ChunkKey(x, y, 1): "d" for x, y in desired_keys}
    kept = intersect(current, desired)
    created = difference(desired, current)
    disposed = difference(current, desired)
    assert set(kept) | set(created) == set(desired)
    assert not set(kept) & set(created)
    assert not set(disposed) & set(desired)


def test_quantize_key_rounds_half_up():
    assert quantize_key(63.5, -0.5, 64.0) == ChunkKey(64, 0, 64)
    assert quantize_key(-63.5, 127.49, 128.0) == ChunkKey(-63, 127, 128)
    assert quantize_key(-0.0, 0.0, 64.0) == ChunkKey(0, 0, 64)


def test_quantize_key_absorbs_float_drift():
    a = quantize_key(0.1 + 0.2, 96.00000000001, 64.0)
    b = quantize_key(0.3, 95.99999999999, 64.0000000001)
    assert a == b
    assert hash(a) == hash(b)


def test_quantize_key_rejects_non_finite():
    with pytest.raises(InvalidInput):
        quantize_key(math.nan, 0.0, 1.0)


def test_grid_key_is_integer_tuple():
    key = grid_key(3, -2, 10)
    assert key == (3, -2, 10)
    assert key.x == 3 and key.y == -2 and key.size == 10
