'''
Fits a table of Linearly Transformed Cosine (LTC) lobes to a parametric BRDF. For every
(roughness, view angle) cell of an N x N grid the LTC that best reproduces the BRDF is found
with a Nelder-Mead search over a Monte-Carlo error estimate, warm-started from the
neighbouring cell. The table is packed into the texture layout used by real-time area-light
shading and exported in the configured formats.

Settings are read from data/config/config.yaml (or private/data/config/config.yaml), or from
the file passed with --config.
'''

import sys
import time
import argparse

from ltcfit.model.brdfs import BrdfFactory
from ltcfit.model.fitting import fit_table, summarize_table
from ltcfit.model.packing import pack_table
from ltcfit.model.export import export_table
from ltcfit.utilities.config import Config
from ltcfit.utilities.utils import conditional_print
from ltcfit.utilities.plotting.plotting import make_spherical_plots

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Fit a Linearly Transformed Cosine table to a BRDF')
    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--brdf',
        type=str,
        choices=BrdfFactory.available(),
        help='BRDF to fit (overrides the configuration file)'
    )
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)

    full_run_start_time = time.time()

    config = Config(config_path=args.config)
    if args.brdf is not None:
        config.brdf = args.brdf

    brdf = BrdfFactory.create(config.brdf)
    settings = config.fit_settings()
    n_jobs = config.validate_jobs()

    table = fit_table(brdf, config.table_size, settings, silent_mode=config.silent_mode, n_jobs=n_jobs)

    # pack tables (texture representation)
    tex1, tex2 = pack_table(table)

    output_name = f"{config.output_name}_{brdf.name}"
    export_table(table, tex1, tex2, config.locations, output_name, config.output_formats,
                 silent_mode=config.silent_mode)

    if config.make_plots:
        make_spherical_plots(brdf, table, config.plotted_cells, config.locations,
                             min_alpha=settings.min_alpha, silent_mode=config.silent_mode)

    summary = summarize_table(table)
    conditional_print(config.silent_mode, f"\nMean fit error: {summary['mean_error']:.6g}")
    conditional_print(config.silent_mode, f"Max fit error: {summary['max_error']:.6g} at (a, t) = {summary['worst_cell']}")
    conditional_print(config.silent_mode, f"Mean amplitude: {summary['mean_amplitude']:.6f}")
    conditional_print(config.silent_mode, f"Normal-incidence column isotropic: {summary['edge_isotropic']}")
    conditional_print(config.silent_mode, f"Full run time: {time.time() - full_run_start_time:.2f} seconds")

    return 0

if __name__ == "__main__":
    sys.exit(main())
