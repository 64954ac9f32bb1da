# ltcfit/utilities/plotting/plotting.py

import numpy as np
import matplotlib.pyplot as plt
from ltcfit.model.ltc import LTC
from ltcfit.utilities.utils import conditional_print, view_direction, roughness_alpha

def hemisphere_directions(resolution):
    """
    Directions at the centres of a latitude/longitude grid over the upper hemisphere.

    Returns:
        np.ndarray: (resolution, 2*resolution, 3) unit vectors, rows by polar angle
    """
    theta = (np.arange(resolution) + 0.5) / resolution * 0.5 * np.pi
    phi = (np.arange(2 * resolution) + 0.5) / (2 * resolution) * 2.0 * np.pi
    theta_grid, phi_grid = np.meshgrid(theta, phi, indexing='ij')
    return np.stack((
        np.sin(theta_grid) * np.cos(phi_grid),
        np.sin(theta_grid) * np.sin(phi_grid),
        np.cos(theta_grid)
    ), axis=-1)

def evaluate_cell(brdf, table, a, t, resolution=64, min_alpha=1e-4):
    """BRDF values and fitted LTC values (amplitude x density) of cell (a, t) on the hemisphere grid."""
    view, _ = view_direction(t, table.n)
    alpha = roughness_alpha(a, table.n, min_alpha)

    directions = hemisphere_directions(resolution)
    L = directions.reshape(-1, 3)

    brdf_values, _ = brdf.eval(view, L, alpha)

    ltc = LTC.from_matrix(table.matrix(a, t), table.amplitude(a, t))
    ltc_values = ltc.eval_unnormalized(L)

    shape = directions.shape[:2]
    return brdf_values.reshape(shape), ltc_values.reshape(shape)

def plot_cell_comparison(brdf, table, a, t, filepath, resolution=64, min_alpha=1e-4):
    """Save side-by-side hemisphere maps of the BRDF, the fitted LTC and their difference."""
    brdf_values, ltc_values = evaluate_cell(brdf, table, a, t, resolution, min_alpha)
    vmax = max(np.max(brdf_values), np.max(ltc_values), 1e-12)
    extent = (0.0, 360.0, 90.0, 0.0)

    fig, (ax1, ax2, ax3) = plt.subplots(1, 3, figsize=(18, 4))

    im1 = ax1.imshow(brdf_values, extent=extent, vmin=0.0, vmax=vmax, cmap='inferno', aspect='auto')
    ax1.set_title(f"{brdf.name} (a = {a}, t = {t})")
    fig.colorbar(im1, ax=ax1)

    im2 = ax2.imshow(ltc_values, extent=extent, vmin=0.0, vmax=vmax, cmap='inferno', aspect='auto')
    ax2.set_title(f"LTC fit (error = {table.errors[t, a]:.3g})")
    fig.colorbar(im2, ax=ax2)

    difference = ltc_values - brdf_values
    limit = max(np.max(np.abs(difference)), 1e-12)
    im3 = ax3.imshow(difference, extent=extent, vmin=-limit, vmax=limit, cmap='coolwarm', aspect='auto')
    ax3.set_title("LTC - BRDF")
    fig.colorbar(im3, ax=ax3)

    for ax in (ax1, ax2, ax3):
        ax.set_xlabel('Azimuth (degrees)')
        ax.set_ylabel('Polar angle (degrees)')

    plt.tight_layout()
    plt.savefig(filepath, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return filepath

def make_spherical_plots(brdf, table, cells, locations, min_alpha=1e-4, silent_mode=False):
    """Write one comparison plot per (a, t) cell into the plots output directory."""
    locations.ensure_directories_exist()
    written = []
    for a, t in cells:
        if not (0 <= a < table.n and 0 <= t < table.n):
            conditional_print(silent_mode, f"Skipping plot for cell (a={a}, t={t}): outside the {table.n}x{table.n} table")
            continue
        filepath = locations.get_plot_path(f"{table.brdf_name}_a{a}_t{t}.png")
        plot_cell_comparison(brdf, table, a, t, filepath, min_alpha=min_alpha)
        conditional_print(silent_mode, f"Plot saved as: {filepath}")
        written.append(filepath)
    return written
