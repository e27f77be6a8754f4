import pytest
import numpy as np
from gridtrace.core.matrix import Matrix


class TestMatrix:
    def test_initialization(self):
        assert Matrix() == Matrix(np.identity(3))

        list_data = [[1, 2, 3], [4, 5, 6], [0, 0, 1]]
        m2 = Matrix(list_data)
        assert np.array_equal(m2.m, np.array(list_data))

        m3 = Matrix(m2)
        assert m3 == m2
        assert m3 is not m2
        assert m3.m is not m2.m

        with pytest.raises(ValueError):
            Matrix([[1, 2], [3, 4]])

    def test_equality(self):
        assert Matrix.translation(10, 20) == Matrix.translation(10, 20)
        assert Matrix.translation(10, 20) != Matrix.translation(10, 21)
        assert Matrix() != "not a matrix"

    def test_representation(self):
        m = Matrix.translation(10, -20.5)
        assert eval(repr(m)) == m

    def test_translation(self):
        m = Matrix.translation(5, -3)
        assert m.transform_point((1, 1)) == pytest.approx((6, -2))
        assert m.for_cairo()[4:] == pytest.approx((5, -3))

    def test_scale(self):
        m = Matrix.scale(2, 3)
        assert m.transform_point((1, 1)) == pytest.approx((2, 3))
        assert m.transform_point((0, 0)) == pytest.approx((0, 0))

    def test_composition_order(self):
        # Scale first, then translate.
        m = Matrix.translation(100, 0) @ Matrix.scale(2, 2)
        assert m.transform_point((1, 1)) == pytest.approx((102, 2))

    def test_invert(self):
        m = Matrix.translation(7, 9) @ Matrix.scale(1.5, 1.5)
        p = (3.0, -4.0)
        assert m.invert().transform_point(m.transform_point(p)) == (
            pytest.approx(p)
        )
        assert m @ m.invert() == Matrix()

    def test_invert_singular(self):
        with pytest.raises(np.linalg.LinAlgError):
            Matrix.scale(0, 1).invert()

    def test_for_cairo(self):
        m = Matrix.translation(4, 5) @ Matrix.scale(2, 3)
        assert m.for_cairo() == pytest.approx((2, 0, 0, 3, 4, 5))
