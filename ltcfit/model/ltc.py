# ltcfit/model/ltc.py

"""
Linearly Transformed Cosine (LTC) lobe.

A clamped cosine distribution around +Z is mapped through a 3x3 matrix

    M = [X Y Z] * | m11  0   m13 |
                  |  0  m22   0  |
                  |  0   0    1  |

where (X, Y, Z) is an orthonormal frame orienting the lobe and (m11, m22, m13) are
the three free parameters driven by the fit. The lobe also carries an amplitude, the
total reflected energy it stands for.
"""

import numpy as np
from numba import jit
from ltcfit.utilities.utils import normalize_vector

@jit(nopython=True)
def ltc_sample(M, u1, u2):
    """Draw cosine-weighted directions from (u1, u2), transform them by M and normalize."""
    n = u1.shape[0]
    L = np.empty((n, 3))
    for k in range(n):
        theta = np.arccos(np.sqrt(u1[k]))
        phi = 2.0 * np.pi * u2[k]
        x = np.sin(theta) * np.cos(phi)
        y = np.sin(theta) * np.sin(phi)
        z = np.cos(theta)
        lx = M[0, 0] * x + M[0, 1] * y + M[0, 2] * z
        ly = M[1, 0] * x + M[1, 1] * y + M[1, 2] * z
        lz = M[2, 0] * x + M[2, 1] * y + M[2, 2] * z
        length = np.sqrt(lx * lx + ly * ly + lz * lz)
        L[k, 0] = lx / length
        L[k, 1] = ly / length
        L[k, 2] = lz / length
    return L

@jit(nopython=True)
def ltc_density(M, inv_M, det_M, L):
    """
    Density of the transformed distribution at each direction of L.

    Each direction is mapped back by inv_M to the cosine domain, where the clamped
    cosine density is evaluated and divided by the Jacobian of the transform.
    """
    n = L.shape[0]
    density = np.zeros(n)
    if det_M == 0.0:
        return density
    for k in range(n):
        ox = inv_M[0, 0] * L[k, 0] + inv_M[0, 1] * L[k, 1] + inv_M[0, 2] * L[k, 2]
        oy = inv_M[1, 0] * L[k, 0] + inv_M[1, 1] * L[k, 1] + inv_M[1, 2] * L[k, 2]
        oz = inv_M[2, 0] * L[k, 0] + inv_M[2, 1] * L[k, 1] + inv_M[2, 2] * L[k, 2]
        o_len = np.sqrt(ox * ox + oy * oy + oz * oz)
        if o_len == 0.0:
            continue
        ox /= o_len
        oy /= o_len
        oz /= o_len

        # length of the direction mapped forward again
        lx = M[0, 0] * ox + M[0, 1] * oy + M[0, 2] * oz
        ly = M[1, 0] * ox + M[1, 1] * oy + M[1, 2] * oz
        lz = M[2, 0] * ox + M[2, 1] * oy + M[2, 2] * oz
        l = np.sqrt(lx * lx + ly * ly + lz * lz)

        jacobian = det_M / (l * l * l)
        d = max(0.0, oz) / np.pi
        density[k] = d / jacobian
    return density

class LTC:
    def __init__(self, m11=1.0, m22=1.0, m13=0.0, amplitude=1.0):
        self.amplitude = amplitude

        # parametric representation
        self.m11 = m11
        self.m22 = m22
        self.m13 = m13
        self.X = np.array([1.0, 0.0, 0.0])
        self.Y = np.array([0.0, 1.0, 0.0])
        self.Z = np.array([0.0, 0.0, 1.0])

        self.update()

    @classmethod
    def from_matrix(cls, M, amplitude=1.0):
        """Lobe evaluated directly from a stored matrix, e.g. a table cell. The parametric fields are not recovered."""
        ltc = cls(amplitude=amplitude)
        ltc.M = np.array(M, dtype=np.float64)
        ltc.inv_M = np.linalg.inv(ltc.M)
        ltc.det_M = abs(np.linalg.det(ltc.M))
        return ltc

    @property
    def params(self):
        return np.array([self.m11, self.m22, self.m13])

    def set_params(self, params):
        self.m11, self.m22, self.m13 = (float(p) for p in params)

    def set_frame(self, X, Y, Z):
        self.X = np.asarray(X, dtype=np.float64)
        self.Y = np.asarray(Y, dtype=np.float64)
        self.Z = np.asarray(Z, dtype=np.float64)

    def reset_frame(self):
        self.set_frame([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0])

    def frame_from_direction(self, L):
        """Orient the lobe around L, which is expected to lie in the XZ plane."""
        L = normalize_vector(np.asarray(L, dtype=np.float64))
        if not np.any(L):
            self.reset_frame()
            return
        self.set_frame([L[2], 0.0, -L[0]], [0.0, 1.0, 0.0], L)

    def update(self):
        """Recompute the matrix, its inverse and its determinant from the parameters. Call after any change."""
        frame = np.column_stack((self.X, self.Y, self.Z))
        shape = np.array([
            [self.m11, 0.0, self.m13],
            [0.0, self.m22, 0.0],
            [0.0, 0.0, 1.0]
        ])
        self.M = frame @ shape
        self.inv_M = np.linalg.inv(self.M)
        self.det_M = abs(np.linalg.det(self.M))

    def sample(self, u1, u2):
        u1 = np.atleast_1d(np.asarray(u1, dtype=np.float64))
        u2 = np.atleast_1d(np.asarray(u2, dtype=np.float64))
        return ltc_sample(self.M, u1, u2)

    def eval(self, L):
        """Normalized density of the lobe at the directions L."""
        L = np.atleast_2d(np.asarray(L, dtype=np.float64))
        return ltc_density(self.M, self.inv_M, self.det_M, L)

    def eval_unnormalized(self, L):
        return self.amplitude * self.eval(L)

    def __repr__(self):
        return (f"LTC(m11={self.m11:.6g}, m22={self.m22:.6g}, m13={self.m13:.6g}, "
                f"amplitude={self.amplitude:.6g})")
