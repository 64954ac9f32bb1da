import os

class Locations:
    def __init__(self):
        self.project_root = self._find_project_root()

        # Base directories
        self.data = os.path.join(self.project_root, "data")
        self.private = os.path.join(self.project_root, "private")

        # Public and private configuration directories
        self.config = os.path.join(self.data, "config")
        self.private_config = os.path.join(self.private, "data", "config")

        # Public data subdirectories
        self.outputs = os.path.join(self.data, "output")

        # Output directories
        self.ltc_tables = os.path.join(self.outputs, "ltc_tables")
        self.plots = os.path.join(self.outputs, "plots")

    def _find_project_root(self):
        """Find the project root directory by looking for .git folder or fallback to parent of the ltcfit package or current working directory"""
        current = os.path.abspath(os.path.dirname(__file__))
        while True:
            # If .git folder exists, this is the project root.
            if os.path.exists(os.path.join(current, '.git')):
                return current
            # If we're at the package directory, project root is its parent.
            if os.path.basename(current) == "ltcfit":
                return os.path.dirname(current)
            parent = os.path.dirname(current)
            # If we've reached the filesystem root or cannot move up further, fallback to cwd.
            if parent == current:
                return os.getcwd()
            current = parent

    def get_config_path(self, private=False):
        directory = self.private_config if private else self.config
        return os.path.join(directory, "config.yaml")

    def get_table_path(self, name, extension):
        return os.path.join(self.ltc_tables, f"{name}.{extension}")

    def get_plot_path(self, filename):
        return os.path.join(self.plots, filename)

    def ensure_directories_exist(self):
        """
        Ensure that all necessary directories exist.
        """
        dirs = [self.config, self.outputs, self.ltc_tables, self.plots]
        for directory in dirs:
            os.makedirs(directory, exist_ok=True)
