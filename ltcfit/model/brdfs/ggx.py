import numpy as np
from numba import jit
from .base_brdf import Brdf, half_vector, reflect_about_normals

@jit(nopython=True)
def ggx_lambda(cos_theta, alpha):
    """Smith Lambda function of the GGX distribution."""
    if cos_theta >= 1.0:
        return 0.0
    a = 1.0 / alpha / np.tan(np.arccos(cos_theta))
    return 0.5 * (-1.0 + np.sqrt(1.0 + 1.0 / a / a))

@jit(nopython=True)
def ggx_eval(V, L, alpha):
    n = L.shape[0]
    values = np.zeros(n)
    pdf = np.zeros(n)

    if V[2] <= 0.0:
        return values, pdf

    # masking
    lambda_v = ggx_lambda(V[2], alpha)

    for k in range(n):
        hx, hy, hz, valid = half_vector(V, L[k])
        if not valid or hz <= 0.0:
            continue
        v_dot_h = V[0] * hx + V[1] * hy + V[2] * hz
        if v_dot_h == 0.0:
            continue

        # shadowing
        if L[k, 2] <= 0.0:
            g2 = 0.0
        else:
            g2 = 1.0 / (1.0 + lambda_v + ggx_lambda(L[k, 2], alpha))

        # D
        slope_x = hx / hz
        slope_y = hy / hz
        d = 1.0 / (1.0 + (slope_x * slope_x + slope_y * slope_y) / alpha / alpha)
        d = d * d
        d = d / (np.pi * alpha * alpha * hz * hz * hz * hz)

        pdf[k] = abs(d * hz / 4.0 / v_dot_h)
        values[k] = d * g2 / 4.0 / V[2]

    return values, pdf

@jit(nopython=True)
def ggx_sample_normals(alpha, u1, u2):
    n = u1.shape[0]
    normals = np.empty((n, 3))
    for k in range(n):
        phi = 2.0 * np.pi * u1[k]
        r = alpha * np.sqrt(u2[k] / (1.0 - u2[k]))
        length = np.sqrt(r * r + 1.0)
        normals[k, 0] = r * np.cos(phi) / length
        normals[k, 1] = r * np.sin(phi) / length
        normals[k, 2] = 1.0 / length
    return normals

class BrdfGGX(Brdf):
    def __init__(self):
        super().__init__("ggx")

    def _sample(self, V, alpha, u1, u2):
        return reflect_about_normals(V, ggx_sample_normals(alpha, u1, u2))

    def _eval(self, V, L, alpha):
        return ggx_eval(V, L, alpha)
