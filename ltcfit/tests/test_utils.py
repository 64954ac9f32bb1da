import numpy as np
import pytest
from ltcfit.utilities.utils import (
    normalize_vector,
    bucket_fraction,
    view_direction,
    roughness_alpha
)

def test_normalize_vector():
    assert np.allclose(normalize_vector(np.array([3.0, 0.0, 4.0])), [0.6, 0.0, 0.8])
    # zero vectors are returned unchanged
    assert np.array_equal(normalize_vector(np.zeros(3)), np.zeros(3))

def test_bucket_fraction():
    assert bucket_fraction(0, 5) == 0.0
    assert bucket_fraction(4, 5) == 1.0
    assert bucket_fraction(2, 5) == 0.5
    assert bucket_fraction(0, 1) == 1.0

def test_view_direction_covers_normal_to_near_grazing():
    V, theta = view_direction(3, 4)
    assert np.allclose(V, [0.0, 0.0, 1.0])
    assert theta == 0.0

    V, theta = view_direction(0, 4)
    assert theta == 1.57
    assert V[1] == 0.0
    assert V[2] > 0.0
    assert np.linalg.norm(V) == pytest.approx(1.0)

def test_roughness_alpha_is_squared_and_floored():
    assert roughness_alpha(3, 4, 1e-4) == 1.0
    assert roughness_alpha(2, 5, 1e-4) == 0.25
    assert roughness_alpha(0, 4, 1e-4) == 1e-4

if __name__ == '__main__':
    pytest.main([__file__])
