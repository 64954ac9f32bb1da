import numpy as np
from numba import jit
from .base_brdf import Brdf, cosine_sample

@jit(nopython=True)
def lambertian_eval(V, L, alpha):
    n = L.shape[0]
    values = np.zeros(n)
    pdf = np.zeros(n)
    for k in range(n):
        if L[k, 2] > 0.0:
            values[k] = L[k, 2] / np.pi
            pdf[k] = L[k, 2] / np.pi
    return values, pdf

class BrdfLambertian(Brdf):
    """Ideal diffuse reflector. Independent of view and roughness, exactly a clamped cosine lobe."""

    def __init__(self):
        super().__init__("lambertian")

    def _sample(self, V, alpha, u1, u2):
        return cosine_sample(u1, u2)

    def _eval(self, V, L, alpha):
        return lambertian_eval(V, L, alpha)
