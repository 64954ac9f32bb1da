# ltcfit/model/nelder_mead.py

import numpy as np

# standard coefficients from Nelder-Mead
REFLECT = 1.0
EXPAND = 2.0
CONTRACT = 0.5
SHRINK = 0.5

def simplex_extent(simplex, best):
    """Largest coordinate distance of any vertex from the best vertex."""
    return float(np.max(np.abs(simplex - simplex[best])))

def nelder_mead(objective, start, delta, tolerance, max_iterations):
    """
    Derivative-free downhill simplex minimisation of objective over len(start) parameters.

    Args:
        objective (callable): Maps a parameter vector of shape (D,) to a float
        start (array-like): Starting point, shape (D,)
        delta (float): Offset applied to each coordinate of start to build the initial simplex
        tolerance (float): Stop once every vertex is within this distance of the best one
        max_iterations (int): Iteration cap. Reaching it is not an error

    Returns:
        tuple: (best point of shape (D,), objective value at that point)
    """
    start = np.asarray(start, dtype=np.float64)
    if start.ndim != 1 or start.size == 0:
        raise ValueError(f"start must be a non-empty 1-D vector, got shape {start.shape}")

    dim = start.size
    n_points = dim + 1

    # initialise simplex
    simplex = np.tile(start, (n_points, 1))
    for i in range(1, n_points):
        simplex[i, i - 1] += delta

    # evaluate function at each point on simplex
    values = np.array([objective(simplex[i]) for i in range(n_points)], dtype=np.float64)

    centroid = np.empty(dim)

    for _ in range(max_iterations):
        # find lowest, highest and next highest
        order = np.argsort(values, kind='stable')
        lo = order[0]
        hi = order[-1]
        nh = order[-2]

        if simplex_extent(simplex, lo) < tolerance:
            break

        # centroid of every vertex but the worst
        centroid[:] = (np.sum(simplex, axis=0) - simplex[hi]) / dim
        worst = simplex[hi].copy()

        # reflection
        reflected = centroid + REFLECT * (centroid - worst)
        f_reflected = objective(reflected)
        if f_reflected < values[nh]:
            if f_reflected < values[lo]:
                # expansion
                expanded = centroid + EXPAND * (centroid - worst)
                f_expanded = objective(expanded)
                if f_expanded < f_reflected:
                    simplex[hi] = expanded
                    values[hi] = f_expanded
                    continue

            simplex[hi] = reflected
            values[hi] = f_reflected
            continue

        # contraction
        contracted = centroid - CONTRACT * (centroid - worst)
        f_contracted = objective(contracted)
        if f_contracted < values[hi]:
            simplex[hi] = contracted
            values[hi] = f_contracted
            continue

        # shrink every vertex towards the best one
        for k in range(n_points):
            if k == lo:
                continue
            simplex[k] = simplex[lo] + SHRINK * (simplex[k] - simplex[lo])
            values[k] = objective(simplex[k])

    best = int(np.argmin(values))
    return simplex[best].copy(), float(values[best])
