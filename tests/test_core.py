import numpy as np

from fractal.core import fade, lerp, make_permutation
from fractal.rng import PseudoRandomSource


def test_fade_endpoints():
    t = np.array([0.0, 1.0], dtype=np.float64)
    out = fade(t)
    assert out[0] == 0.0
    assert out[1] == 1.0


def test_lerp_basic():
    a = np.array([0.0, 10.0])
    b = np.array([10.0, 20.0])
    t = np.array([0.0, 0.5])
    out = lerp(a, b, t)
    assert np.allclose(out, np.array([0.0, 15.0]))


def test_permutation_is_doubled_shuffle():
    perm = make_permutation(PseudoRandomSource(5))
    assert perm.shape == (512,)
    assert np.array_equal(perm[:256], perm[256:])
    assert sorted(perm[:256].tolist()) == list(range(256))
    assert not np.array_equal(perm[:256], np.arange(256))


def test_permutation_deterministic_for_seed():
    a = make_permutation(PseudoRandomSource(9))
    b = make_permutation(PseudoRandomSource(9))
    c = make_permutation(PseudoRandomSource(10))
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_permutation_consumes_255_draws():
    src = PseudoRandomSource(3)
    make_permutation(src)
    ref = PseudoRandomSource(3)
    for _ in range(255):
        ref.next()
    assert src.state == ref.state


def test_permutation_golden_prefix():
    perm = make_permutation(PseudoRandomSource(1))
    assert perm[:8].tolist() == [160, 1, 135, 251, 248, 75, 159, 186]

    perm = make_permutation(PseudoRandomSource(42))
    assert perm[:8].tolist() == [153, 115, 218, 172, 48, 137, 74, 162]
