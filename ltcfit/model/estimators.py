# ltcfit/model/estimators.py

'''
Monte-Carlo estimators over a fixed stratified sample grid.

All three estimators use the centres of an n_sample x n_sample grid in [0, 1)^2
rather than random numbers, so every result is deterministic for a given BRDF,
view direction and roughness.
'''

import numpy as np
from numba import jit
from ltcfit.utilities.utils import normalize_vector

def stratified_samples(n_sample):
    """
    Centres of the stratified grid as two flat arrays (u1, u2). u1 runs along the
    inner index, u2 along the outer one.
    """
    centres = (np.arange(n_sample) + 0.5) / float(n_sample)
    u2, u1 = np.meshgrid(centres, centres, indexing='ij')
    return u1.ravel(), u2.ravel()

@jit(nopython=True)
def importance_weights(values, pdf):
    """values / pdf, with zero wherever the density is not strictly positive."""
    weights = np.zeros(values.shape[0])
    for k in range(values.shape[0]):
        if pdf[k] > 0.0:
            weights[k] = values[k] / pdf[k]
    return weights

@jit(nopython=True)
def mis_error_sum(eval_brdf, pdf_brdf, pdf_ltc, amplitude):
    """
    Sum of |brdf - ltc|^3 weighted by the balance heuristic 1 / (pdf_ltc + pdf_brdf).
    Directions where both densities vanish contribute nothing.
    """
    total = 0.0
    for k in range(eval_brdf.shape[0]):
        denominator = pdf_ltc[k] + pdf_brdf[k]
        if denominator <= 0.0:
            continue
        difference = abs(eval_brdf[k] - amplitude * pdf_ltc[k])
        total += difference * difference * difference / denominator
    return total

def compute_norm(brdf, V, alpha, n_sample):
    """Albedo of the BRDF for view V: the mean of values / pdf over BRDF samples."""
    u1, u2 = stratified_samples(n_sample)
    L = brdf.sample(V, alpha, u1, u2)
    values, pdf = brdf.eval(V, L, alpha)
    return float(np.mean(importance_weights(values, pdf)))

def compute_average_dir(brdf, V, alpha, n_sample):
    """
    Energy-weighted average of the sampled directions, projected into the incidence
    plane (the y component of an isotropic BRDF averages to zero) and normalized.
    """
    u1, u2 = stratified_samples(n_sample)
    L = brdf.sample(V, alpha, u1, u2)
    values, pdf = brdf.eval(V, L, alpha)
    weights = importance_weights(values, pdf)

    average_dir = np.sum(weights[:, np.newaxis] * L, axis=0)
    average_dir[1] = 0.0

    return normalize_vector(average_dir)

def compute_error(ltc, brdf, V, alpha, n_sample):
    """
    Error between the LTC and the BRDF using Multiple Importance Sampling.

    Every stratified pair is used twice, once through the LTC's sampling and once
    through the BRDF's. Both sums are divided by n_sample^2.
    """
    u1, u2 = stratified_samples(n_sample)

    # importance sample LTC
    L = ltc.sample(u1, u2)
    eval_brdf, pdf_brdf = brdf.eval(V, L, alpha)
    pdf_ltc = ltc.eval(L)
    error = mis_error_sum(eval_brdf, pdf_brdf, pdf_ltc, ltc.amplitude)

    # importance sample BRDF
    L = brdf.sample(V, alpha, u1, u2)
    eval_brdf, pdf_brdf = brdf.eval(V, L, alpha)
    pdf_ltc = ltc.eval(L)
    error += mis_error_sum(eval_brdf, pdf_brdf, pdf_ltc, ltc.amplitude)

    return error / float(n_sample * n_sample)
