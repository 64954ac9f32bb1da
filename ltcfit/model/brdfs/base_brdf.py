# Base class for reflectance models

import numpy as np
from numba import jit

@jit(nopython=True)
def half_vector(V, L):
    """Normalized half vector of V and L. The flag is False when V + L vanishes."""
    hx = V[0] + L[0]
    hy = V[1] + L[1]
    hz = V[2] + L[2]
    h_len = np.sqrt(hx * hx + hy * hy + hz * hz)
    if h_len == 0.0:
        return 0.0, 0.0, 0.0, False
    return hx / h_len, hy / h_len, hz / h_len, True

@jit(nopython=True)
def reflect_about_normals(V, normals):
    """Mirror V about each microfacet normal: L = -V + 2 (N.V) N."""
    n = normals.shape[0]
    L = np.empty((n, 3))
    for k in range(n):
        d = normals[k, 0] * V[0] + normals[k, 1] * V[1] + normals[k, 2] * V[2]
        L[k, 0] = -V[0] + 2.0 * d * normals[k, 0]
        L[k, 1] = -V[1] + 2.0 * d * normals[k, 1]
        L[k, 2] = -V[2] + 2.0 * d * normals[k, 2]
    return L

@jit(nopython=True)
def cosine_sample(u1, u2):
    """Cosine-weighted directions around +Z: radius sqrt(u1), azimuth 2 pi u2."""
    n = u1.shape[0]
    L = np.empty((n, 3))
    for k in range(n):
        r = np.sqrt(u1[k])
        phi = 2.0 * np.pi * u2[k]
        L[k, 0] = r * np.cos(phi)
        L[k, 1] = r * np.sin(phi)
        L[k, 2] = np.sqrt(max(0.0, 1.0 - r * r))
    return L

class Brdf:
    """
    A reflectance model seen only through two operations:

    sample(V, alpha, u1, u2) -> L, array of shape (n, 3)
    eval(V, L, alpha) -> (values, pdf), arrays of shape (n,)

    values is the BRDF multiplied by the cosine of the light direction, pdf is the
    density of the model's own sampling strategy. Inputs may be scalars or arrays.
    """

    def __init__(self, name):
        self.name = name

    def sample(self, V, alpha, u1, u2):
        u1 = np.atleast_1d(np.asarray(u1, dtype=np.float64))
        u2 = np.atleast_1d(np.asarray(u2, dtype=np.float64))
        return self._sample(np.asarray(V, dtype=np.float64), float(alpha), u1, u2)

    def eval(self, V, L, alpha):
        L = np.atleast_2d(np.asarray(L, dtype=np.float64))
        return self._eval(np.asarray(V, dtype=np.float64), L, float(alpha))

    def _sample(self, V, alpha, u1, u2):
        raise NotImplementedError("Subclasses must implement _sample")

    def _eval(self, V, L, alpha):
        raise NotImplementedError("Subclasses must implement _eval")

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"
