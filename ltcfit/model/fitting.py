# ltcfit/model/fitting.py

'''
Fits one LTC lobe per (roughness, view angle) cell of the table.

Cells are visited with the roughness index a running from N-1 down to 0 and, for each
a, the view index t running from N-1 (normal incidence) down to 0 (grazing). Each fit
is warm-started from an earlier one:

    t == N-1, a == N-1 : isotropic, m11 = m22 = 1
    t == N-1, a <  N-1 : isotropic, seeded from the fit of (a+1, N-1)
    t <  N-1           : all three parameters, seeded from the fit of (a, t+1),
                         lobe oriented along the BRDF's average direction

The warm start is handed to each cell explicitly through WarmStart, so the only data
dependency between roughness columns is the first cell of each column. That makes it
possible to fit that column edge serially and then fan the rest of the columns out.
'''

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from joblib import Parallel, delayed

from ltcfit.model.ltc import LTC
from ltcfit.model.estimators import compute_norm, compute_average_dir, compute_error
from ltcfit.model.nelder_mead import nelder_mead
from ltcfit.utilities.config import FitSettings
from ltcfit.utilities.utils import (
    conditional_print,
    conditional_tqdm,
    view_direction,
    roughness_alpha
)

# Matrix entries (row, column) that are zero by construction of the lobe
STRUCTURAL_ZEROS = ((0, 1), (1, 0), (1, 2), (2, 1))

@dataclass
class WarmStart:
    previous_params: Optional[np.ndarray] = None
    rougher_edge_params: Optional[np.ndarray] = None

@dataclass
class CellFit:
    a: int
    t: int
    params: np.ndarray
    matrix: np.ndarray
    amplitude: float
    error: float
    isotropic: bool

class LTCTable:
    """Fitted matrices and amplitudes, indexed [t, a] so that the flat index is a + t*N."""

    def __init__(self, n, brdf_name=""):
        self.n = n
        self.brdf_name = brdf_name
        self.matrices = np.zeros((n, n, 3, 3))
        self.amplitudes = np.zeros((n, n))
        self.errors = np.zeros((n, n))

    def store(self, cell_fit):
        matrix = np.array(cell_fit.matrix, dtype=np.float64)
        # kill useless coefs in matrix
        for row, column in STRUCTURAL_ZEROS:
            matrix[row, column] = 0.0
        self.matrices[cell_fit.t, cell_fit.a] = matrix
        self.amplitudes[cell_fit.t, cell_fit.a] = cell_fit.amplitude
        self.errors[cell_fit.t, cell_fit.a] = cell_fit.error

    def matrix(self, a, t):
        return self.matrices[t, a]

    def amplitude(self, a, t):
        return self.amplitudes[t, a]

    def flat_matrices(self):
        return self.matrices.reshape(self.n * self.n, 3, 3)

    def flat_amplitudes(self):
        return self.amplitudes.reshape(self.n * self.n)

    def __repr__(self):
        return f"LTCTable(n={self.n}, brdf_name={self.brdf_name!r})"

class FitObjective:
    """Error of the LTC against the BRDF for one cell, as a function of (m11, m22, m13)."""

    def __init__(self, ltc, brdf, view, alpha, isotropic, settings):
        self.ltc = ltc
        self.brdf = brdf
        self.view = view
        self.alpha = alpha
        self.isotropic = isotropic
        self.settings = settings

    def apply(self, params):
        m11 = max(params[0], self.settings.min_alpha)
        m22 = max(params[1], self.settings.min_alpha)
        m13 = params[2]

        if self.isotropic:
            self.ltc.set_params((m11, m11, 0.0))
        else:
            self.ltc.set_params((m11, m22, m13))
        self.ltc.update()

    def __call__(self, params):
        self.apply(params)
        return compute_error(self.ltc, self.brdf, self.view, self.alpha, self.settings.n_sample)

def initial_guess(a, t, n, warm_start, average_dir, min_alpha):
    """
    First guess for the fit of cell (a, t).

    Returns:
        tuple: (params, axis, isotropic). axis is None when the lobe keeps the identity
        frame, otherwise the direction the lobe is oriented around.
    """
    if t == n - 1:
        # the lobe is rotationally symmetric and aligned with Z = (0 0 1)
        if a == n - 1 or warm_start.rougher_edge_params is None:
            m11 = m22 = 1.0
        else:
            # init with roughness of previous fit
            m11 = max(warm_start.rougher_edge_params[0], min_alpha)
            m22 = max(warm_start.rougher_edge_params[1], min_alpha)
        return np.array([m11, m22, 0.0]), None, True

    # otherwise use previous configuration as first guess
    if warm_start.previous_params is None:
        raise ValueError(f"Cell (a={a}, t={t}) needs the fit of (a={a}, t={t + 1}) as a warm start")
    return np.array(warm_start.previous_params, dtype=np.float64), average_dir, False

def fit_cell(brdf, a, t, n, warm_start, settings=None):
    """Fit the LTC of cell (a, t) and return it as a CellFit."""
    if settings is None:
        settings = FitSettings()

    view, _ = view_direction(t, n)
    alpha = roughness_alpha(a, n, settings.min_alpha)

    ltc = LTC()
    ltc.amplitude = compute_norm(brdf, view, alpha, settings.n_sample)
    average_dir = compute_average_dir(brdf, view, alpha, settings.n_sample)

    # 1. first guess for the fit
    params, axis, isotropic = initial_guess(a, t, n, warm_start, average_dir, settings.min_alpha)
    ltc.set_params(params)
    if axis is None:
        ltc.reset_frame()
    else:
        ltc.frame_from_direction(axis)
    ltc.update()

    # 2. fit (explore parameter space and refine first guess)
    objective = FitObjective(ltc, brdf, view, alpha, isotropic, settings)
    result, error = nelder_mead(objective, ltc.params, settings.epsilon,
                                settings.tolerance, settings.max_iterations)

    # Update LTC with best fitting values
    objective.apply(result)

    return CellFit(
        a=a,
        t=t,
        params=ltc.params,
        matrix=ltc.M.copy(),
        amplitude=ltc.amplitude,
        error=error,
        isotropic=isotropic
    )

def fit_edge_cell(brdf, a, n, settings, rougher_edge_params=None):
    """Fit the normal-incidence cell (a, N-1) that starts a roughness column."""
    return fit_cell(brdf, a, n - 1, n, WarmStart(rougher_edge_params=rougher_edge_params), settings)

def fit_column_interior(brdf, a, n, settings, edge_fit) -> List[CellFit]:
    """Fit cells t = N-2 ... 0 of column a, each warm-started from the one before it."""
    fits = []
    previous = edge_fit
    for t in range(n - 2, -1, -1):
        previous = fit_cell(brdf, a, t, n, WarmStart(previous_params=previous.params), settings)
        fits.append(previous)
    return fits

def fit_table(brdf, n, settings=None, silent_mode=False, n_jobs=1):
    """
    Fit the full N x N table for brdf.

    With n_jobs > 1 the column edges are fitted serially first and the column interiors
    are then distributed over joblib workers. The result is identical to the serial run.
    """
    if n < 1:
        raise ValueError(f"Table size must be >= 1, got {n}")
    if settings is None:
        settings = FitSettings()

    table = LTCTable(n, brdf.name)
    roughness_indices = range(n - 1, -1, -1)

    conditional_print(silent_mode, f"Fitting {n}x{n} LTC table for BRDF '{brdf.name}' "
                                   f"({settings.n_sample}x{settings.n_sample} samples per estimate)")

    if n_jobs == 1:
        rougher_edge_params = None
        for a in conditional_tqdm(roughness_indices, silent_mode, total=n, desc='Roughness columns'):
            edge_fit = fit_edge_cell(brdf, a, n, settings, rougher_edge_params)
            table.store(edge_fit)
            for cell_fit in fit_column_interior(brdf, a, n, settings, edge_fit):
                table.store(cell_fit)
            rougher_edge_params = edge_fit.params
        return table

    edge_fits = {}
    rougher_edge_params = None
    for a in conditional_tqdm(roughness_indices, silent_mode, total=n, desc='Column edges'):
        edge_fits[a] = fit_edge_cell(brdf, a, n, settings, rougher_edge_params)
        table.store(edge_fits[a])
        rougher_edge_params = edge_fits[a].params

    conditional_print(silent_mode, f"Fitting column interiors on {n_jobs} workers...")
    columns = Parallel(n_jobs=n_jobs)(
        delayed(fit_column_interior)(brdf, a, n, settings, edge_fits[a])
        for a in roughness_indices
    )
    for column in columns:
        for cell_fit in column:
            table.store(cell_fit)

    return table

def summarize_table(table):
    """Summary statistics of a fitted table."""
    edge = table.matrices[table.n - 1]
    return {
        "mean_error": float(np.mean(table.errors)),
        "max_error": float(np.max(table.errors)),
        "worst_cell": tuple(int(i) for i in np.unravel_index(np.argmax(table.errors), table.errors.shape))[::-1],
        "mean_amplitude": float(np.mean(table.amplitudes)),
        "edge_isotropic": bool(np.all(edge[:, 0, 0] == edge[:, 1, 1]) and np.all(edge[:, 0, 2] == 0.0)),
    }
