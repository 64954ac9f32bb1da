"""
Validate a fitted LTC table.
Reports per-cell fit error statistics, the amplitude range, and checks that the
normal-incidence column is exactly isotropic.
"""

import argparse
import numpy as np
from pathlib import Path
import sys

# Add the project root to the Python path
current_dir = Path(__file__).resolve().parent
sys.path.append(str(current_dir.parent))

from ltcfit.model.export import load_table_npz
from ltcfit.model.packing import pack_table, unpack_inverse
from ltcfit.utilities.locations import Locations

def validate_table(table):
    n = table.n

    print(f"\nTable: {n}x{n} cells, BRDF '{table.brdf_name}'")
    print(f"Fit error: mean = {np.mean(table.errors):.6g}, max = {np.max(table.errors):.6g}")
    print(f"Amplitude: min = {np.min(table.amplitudes):.6f}, max = {np.max(table.amplitudes):.6f}")

    print("\nWorst cells:")
    worst = np.argsort(table.errors, axis=None)[::-1][:5]
    for flat_index in worst:
        t, a = np.unravel_index(flat_index, table.errors.shape)
        print(f"  a = {a:3d}, t = {t:3d}: error = {table.errors[t, a]:.6g}")

    edge = table.matrices[n - 1]
    isotropic = np.all(edge[:, 0, 0] == edge[:, 1, 1]) and np.all(edge[:, 0, 2] == 0.0)
    print(f"\nNormal-incidence column isotropic: {isotropic}")

    # Packed inverse times the matrix must be a multiple of the identity
    tex1, tex2 = pack_table(table)
    flat = table.flat_matrices()
    max_deviation = 0.0
    for i in range(len(flat)):
        product = unpack_inverse(tex1[i], tex2[i]) @ flat[i]
        scale = product[1, 1]
        max_deviation = max(max_deviation, np.max(np.abs(product - scale * np.eye(3))))
    print(f"Packed inverse deviation from scaled identity: {max_deviation:.3g}")

    return isotropic

def main():
    parser = argparse.ArgumentParser(description='Validate a fitted LTC table')
    parser.add_argument('table', nargs='?', default=None,
                        help='Path to an .npz table (defaults to data/output/ltc_tables/ltc_ggx.npz)')
    args = parser.parse_args()

    path = args.table
    if path is None:
        path = Locations().get_table_path('ltc_ggx', 'npz')

    table = load_table_npz(path)
    validate_table(table)

if __name__ == "__main__":
    main()
