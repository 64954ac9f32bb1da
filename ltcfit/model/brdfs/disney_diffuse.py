import numpy as np
from numba import jit
from .base_brdf import Brdf, cosine_sample, half_vector

@jit(nopython=True)
def disney_diffuse_eval(V, L, alpha):
    n = L.shape[0]
    values = np.zeros(n)
    pdf = np.zeros(n)

    if V[2] <= 0.0:
        return values, pdf

    perceptual_roughness = np.sqrt(alpha)
    n_dot_v = V[2]

    for k in range(n):
        n_dot_l = L[k, 2]
        if n_dot_l <= 0.0:
            continue
        hx, hy, hz, valid = half_vector(V, L[k])
        if not valid:
            continue
        l_dot_h = L[k, 0] * hx + L[k, 1] * hy + L[k, 2] * hz

        fd90 = 0.5 + 2.0 * l_dot_h * l_dot_h * perceptual_roughness
        light_scatter = 1.0 + (fd90 - 1.0) * (1.0 - n_dot_l)**5
        view_scatter = 1.0 + (fd90 - 1.0) * (1.0 - n_dot_v)**5

        pdf[k] = n_dot_l / np.pi
        values[k] = light_scatter * view_scatter * n_dot_l / np.pi

    return values, pdf

class BrdfDisneyDiffuse(Brdf):
    def __init__(self):
        super().__init__("disney_diffuse")

    def _sample(self, V, alpha, u1, u2):
        return cosine_sample(u1, u2)

    def _eval(self, V, L, alpha):
        return disney_diffuse_eval(V, L, alpha)
