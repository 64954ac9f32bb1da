# utils.py

import numpy as np
from numba import jit
from tqdm import tqdm

def conditional_print(silent_mode, message):
    if not silent_mode:
        print(message)

def conditional_tqdm(iterable, silent_mode, **kwargs):
    if silent_mode:
        return iterable
    else:
        return tqdm(iterable, **kwargs)

@jit(nopython=True)
def normalize_vector(v):
    """Normalize a vector."""
    norm = np.sqrt(np.sum(v**2))
    return v / norm if norm != 0 else v

def bucket_fraction(index, n):
    '''Position of a table bucket in [0, 1]. A single-bucket table sits at 1.'''
    if n <= 1:
        return 1.0
    return index / float(n - 1)

def view_direction(t, n):
    """
    View direction for the view-angle bucket t, parameterised by cos(theta).
    Theta is clamped just below pi/2 to stay away from the grazing singularity.
    """
    ct = bucket_fraction(t, n)
    theta = min(1.57, np.arccos(ct))
    return np.array([np.sin(theta), 0.0, np.cos(theta)]), theta

def roughness_alpha(a, n, min_alpha):
    """Fitting roughness alpha = roughness^2 for the roughness bucket a, floored at min_alpha."""
    roughness = bucket_fraction(a, n)
    return max(roughness * roughness, min_alpha)
