import numpy as np

from fractal.rng import PseudoRandomSource
from fractal.simplex import Simplex2D, Simplex3D


def test_simplex2d_deterministic_for_seed():
    s1 = Simplex2D(PseudoRandomSource(123))
    s2 = Simplex2D(PseudoRandomSource(123))
    x = np.array([0.1, 1.25, 10.5])
    y = np.array([0.2, 2.75, 9.0])
    assert np.allclose(s1.noise(x, y), s2.noise(x, y))


def test_simplex2d_changes_with_seed():
    s1 = Simplex2D(PseudoRandomSource(1))
    s2 = Simplex2D(PseudoRandomSource(2))
    x = np.array([0.1, 1.25, 10.5, -3.3])
    y = np.array([0.2, 2.75, 9.0, 4.4])
    assert not np.allclose(s1.noise(x, y), s2.noise(x, y))


def test_simplex2d_zero_at_origin_for_any_seed():
    for seed in (1, 2, 99, 123456):
        s = Simplex2D(PseudoRandomSource(seed))
        assert float(s.noise(0.0, 0.0)) == 0.0


def test_simplex2d_shape_finite_and_range():
    s = Simplex2D(PseudoRandomSource(0))
    xg, yg = np.meshgrid(np.linspace(-8, 8, 96), np.linspace(-8, 8, 64))
    z = s.noise(xg, yg)
    assert z.shape == xg.shape
    assert np.isfinite(z).all()
    assert float(np.max(np.abs(z))) <= 1.05
    assert float(np.std(z)) > 0.05


def test_simplex2d_continuity_small_step():
    s = Simplex2D(PseudoRandomSource(0))
    xg, yg = np.meshgrid(np.linspace(0, 5, 64), np.linspace(0, 5, 64))
    d = 1e-4
    z0 = s.noise(xg, yg)
    z1 = s.noise(xg + d, yg)
    assert float(np.max(np.abs(z1 - z0))) < 0.01


def test_simplex3d_deterministic_and_seed_sensitive():
    x = np.array([0.1, 1.25, 10.5])
    y = np.array([0.2, 2.75, 9.0])
    z = np.array([0.3, 0.5, 1.0])
    a = Simplex3D(PseudoRandomSource(123)).noise(x, y, z)
    b = Simplex3D(PseudoRandomSource(123)).noise(x, y, z)
    c = Simplex3D(PseudoRandomSource(124)).noise(x, y, z)
    assert np.allclose(a, b)
    assert not np.allclose(a, c)


def test_simplex3d_zero_at_origin():
    s = Simplex3D(PseudoRandomSource(1))
    assert float(s.noise(0.0, 0.0, 0.0)) == 0.0


def test_simplex3d_shape_finite_and_range():
    s = Simplex3D(PseudoRandomSource(0))
    xg, yg, zg = np.meshgrid(
        np.linspace(0.0, 4.0, 16),
        np.linspace(0.0, 4.0, 12),
        np.linspace(0.0, 4.0, 8),
        indexing="xy",
    )
    out = s.noise(xg, yg, zg)
    assert out.shape == xg.shape
    assert np.isfinite(out).all()
    assert float(np.max(np.abs(out))) <= 1.05


def test_simplex3d_continuous_across_all_tetrahedra():
    s = Simplex3D(PseudoRandomSource(0))
    rng = np.random.default_rng(0)
    pts = rng.uniform(-4.0, 4.0, size=(3, 4000))
    d = 1e-5
    z0 = s.noise(pts[0], pts[1], pts[2])
    for axis in range(3):
        moved = pts.copy()
        moved[axis] += d
        z1 = s.noise(moved[0], moved[1], moved[2])
        assert float(np.max(np.abs(z1 - z0))) < 1e-3


def test_simplex2d_golden_values():
    x = np.array([0.3, 12.5, 100.1])
    y = np.array([0.7, -7.25, 33.3])

    out = Simplex2D(PseudoRandomSource(1)).noise(x, y)
    expected = np.array([0.18120443692466773, 0.59043068177041369, 0.31059861571656744])
    assert np.allclose(out, expected, rtol=1e-10, atol=1e-12)

    out = Simplex2D(PseudoRandomSource(42)).noise(x, y)
    expected = np.array([0.31737689820821052, 0.36630257033713493, -0.31059000969417455])
    assert np.allclose(out, expected, rtol=1e-10, atol=1e-12)


def test_simplex3d_golden_values():
    x = np.array([0.3, -4.2])
    y = np.array([0.7, 5.5])
    z = np.array([1.1, 9.9])

    out = Simplex3D(PseudoRandomSource(1)).noise(x, y, z)
    expected = np.array([0.2023073706666671, -0.040319423868312818])
    assert np.allclose(out, expected, rtol=1e-10, atol=1e-12)

    out = Simplex3D(PseudoRandomSource(42)).noise(x, y, z)
    expected = np.array([0.081354538666666129, 0.16799201646090525])
    assert np.allclose(out, expected, rtol=1e-10, atol=1e-12)
