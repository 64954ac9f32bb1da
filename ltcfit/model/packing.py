# ltcfit/model/packing.py

import numpy as np

def pack_matrices(matrices, amplitudes):
    """
    Rewrite each fitted matrix as the terms of its determinant-rescaled inverse.

    The fitted matrices only have five non-zero entries, so the adjugate is

        a 0 d            c*e      0      -c*d
        0 c 0    ==>      0    a*e - b*d    0
        b 0 e           -c*b      0       a*c

    Args:
        matrices (np.ndarray): (n, 3, 3) row-major matrices
        amplitudes (np.ndarray): (n,) lobe amplitudes

    Returns:
        tuple: tex1 (n, 4) and tex2 (n, 2) texture channels
    """
    matrices = np.asarray(matrices, dtype=np.float64)
    amplitudes = np.asarray(amplitudes, dtype=np.float64)

    a = matrices[:, 0, 0]
    d = matrices[:, 0, 2]
    c = matrices[:, 1, 1]
    b = matrices[:, 2, 0]
    e = matrices[:, 2, 2]

    tex1 = np.empty((len(matrices), 4))
    tex2 = np.empty((len(matrices), 2))

    # store the variable terms
    tex1[:, 0] = c * e
    tex1[:, 1] = -b * c
    tex1[:, 2] = a * e - b * d
    tex1[:, 3] = -c * d
    tex2[:, 0] = a * c
    tex2[:, 1] = amplitudes

    return tex1, tex2

def pack_table(table):
    """Pack an LTCTable into (tex1, tex2), both in the flat a + t*N cell order."""
    return pack_matrices(table.flat_matrices(), table.flat_amplitudes())

def unpack_inverse(tex1_row, tex2_row):
    """Rebuild the rescaled inverse matrix of one cell from its packed texture rows."""
    t0, t1, t2, t3 = tex1_row
    t4 = tex2_row[0]
    return np.array([
        [t0, 0.0, t3],
        [0.0, t2, 0.0],
        [t1, 0.0, t4]
    ])
