'''
This file contains the Config class which is used to load and store the fitting settings from the config.yaml file.
'''

import yaml
import warnings
from dataclasses import dataclass
from multiprocessing import cpu_count
from ltcfit.utilities.locations import Locations
import os

DEFAULT_OUTPUT_FORMATS = ["npz", "hdf5", "matlab", "c", "js", "dds"]

@dataclass(frozen=True)
class FitSettings:
    """Numerical settings shared by every cell fit of one table."""
    n_sample: int = 32
    min_alpha: float = 1e-4
    epsilon: float = 0.05
    tolerance: float = 1e-5
    max_iterations: int = 100

class Config:
    def __init__(self, config_path=None):
        # Initialize Locations
        self.locations = Locations()

        # Use provided config path or search in standard locations
        if config_path is None:
            # Look in private first, then public
            private_config = self.locations.get_config_path(private=True)
            public_config = self.locations.get_config_path()

            if os.path.exists(private_config):
                config_path = private_config
            elif os.path.exists(public_config):
                config_path = public_config
            else:
                raise FileNotFoundError("No configuration file found in standard locations")
        elif not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} was not found.")

        # Load configuration
        with open(config_path, 'r') as file:
            self.config_data = yaml.safe_load(file) or {}

        # Load settings from the YAML file
        self.load_settings()

    def load_settings(self):
        # General settings
        self.silent_mode = self.config_data.get('silent_mode', False)
        self.brdf = self.config_data.get('brdf', 'ggx')

        # Table layout
        self.table_size = int(self.config_data.get('table_size', 64))
        self.n_sample = int(self.config_data.get('n_sample', 32))
        self.min_alpha = float(self.config_data.get('min_alpha', 1e-4))

        # Optimizer settings
        self.epsilon = float(self.config_data.get('epsilon', 0.05))
        self.tolerance = float(self.config_data.get('tolerance', 1e-5))
        self.max_iterations = int(self.config_data.get('max_iterations', 100))

        # Performance settings
        self.n_jobs = self.config_data.get('n_jobs', 1)

        # Output settings
        self.output_name = self.config_data.get('output_name', 'ltc')
        self.output_formats = list(self.config_data.get('output_formats', DEFAULT_OUTPUT_FORMATS))

        # Plotting settings
        self.make_plots = self.config_data.get('make_plots', False)
        self.plotted_cells = [tuple(cell) for cell in self.config_data.get('plotted_cells', [])]

        if self.table_size < 1:
            raise ValueError(f"table_size must be >= 1, got {self.table_size}")
        if self.n_sample < 1:
            raise ValueError(f"n_sample must be >= 1, got {self.n_sample}")
        if self.min_alpha <= 0:
            raise ValueError(f"min_alpha must be positive, got {self.min_alpha}")

    def fit_settings(self):
        return FitSettings(
            n_sample=self.n_sample,
            min_alpha=self.min_alpha,
            epsilon=self.epsilon,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations
        )

    def validate_jobs(self):
        """
        Validate the number of jobs requested and issue warnings if necessary.
        Returns the actual number of jobs to use.
        """
        available_cores = cpu_count()

        if self.n_jobs == -1:
            warnings.warn(
                "Using all available cores (-1). This should be used with caution on shared "
                "computing facilities as it may impact other users. Consider setting a specific "
                f"number of cores instead. Will use {available_cores} cores.",
                UserWarning
            )
            return available_cores

        if self.n_jobs > available_cores:
            warnings.warn(
                f"Requested {self.n_jobs} cores but only {available_cores} are available. "
                f"Reducing to {available_cores} cores.",
                UserWarning
            )
            return available_cores

        if self.n_jobs < 1:
            warnings.warn(
                f"Invalid number of jobs ({self.n_jobs}). Must be >= 1. Setting to 1.",
                UserWarning
            )
            return 1

        return self.n_jobs
