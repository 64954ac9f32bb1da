import os
import tempfile
import warnings
import yaml
import pytest
from ltcfit.utilities.config import Config, FitSettings
from ltcfit.utilities.locations import Locations

def write_temp_config(config_data):
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        return f.name

def test_fit_settings_loaded_from_file():
    """Test that table and optimizer parameters are loaded correctly."""
    test_config_data = {
        'brdf': 'beckmann',
        'table_size': 16,
        'n_sample': 8,
        'min_alpha': 0.001,
        'epsilon': 0.1,
        'tolerance': 1e-4,
        'max_iterations': 50,
        'output_formats': ['npz', 'c'],
        'plotted_cells': [[1, 2], [3, 4]]
    }
    temp_config_path = write_temp_config(test_config_data)

    try:
        config = Config(temp_config_path)

        assert config.brdf == 'beckmann'
        assert config.table_size == 16
        assert config.output_formats == ['npz', 'c']
        assert config.plotted_cells == [(1, 2), (3, 4)]

        settings = config.fit_settings()
        assert settings == FitSettings(n_sample=8, min_alpha=0.001, epsilon=0.1,
                                       tolerance=1e-4, max_iterations=50)
    finally:
        os.unlink(temp_config_path)

def test_defaults_for_missing_keys():
    """An empty config file falls back to the reference fitting settings."""
    temp_config_path = write_temp_config({})

    try:
        config = Config(temp_config_path)

        assert config.silent_mode is False
        assert config.brdf == 'ggx'
        assert config.table_size == 64
        assert config.n_sample == 32
        assert config.min_alpha == 1e-4
        assert config.epsilon == 0.05
        assert config.tolerance == 1e-5
        assert config.max_iterations == 100
        assert config.n_jobs == 1
        assert config.make_plots is False
    finally:
        os.unlink(temp_config_path)

@pytest.fixture
def tmp_locations(tmp_path, monkeypatch):
    locations = Locations()
    locations.private = str(tmp_path / "private")
    locations.config = str(tmp_path / "data" / "config")
    locations.private_config = str(tmp_path / "private" / "data" / "config")
    monkeypatch.setattr("ltcfit.utilities.config.Locations", lambda: locations)
    return locations

def write_config_at(path, config_data):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        yaml.dump(config_data, f)

def test_default_config_lookup(tmp_locations):
    """Without a path the public config is used, and a private config takes precedence over it."""
    write_config_at(tmp_locations.get_config_path(), {'table_size': 8})
    assert Config().table_size == 8

    write_config_at(tmp_locations.get_config_path(private=True), {'table_size': 4})
    assert Config().table_size == 4

def test_no_config_in_standard_locations(tmp_locations):
    with pytest.raises(FileNotFoundError):
        Config()

def test_config_paths():
    locations = Locations()
    assert locations.get_config_path() == os.path.join(locations.data, "config", "config.yaml")
    assert locations.get_config_path(private=True) == os.path.join(locations.private, "data", "config", "config.yaml")

def test_missing_config_file_raises():
    with pytest.raises(FileNotFoundError):
        Config("/nonexistent/path/config.yaml")

@pytest.mark.parametrize("key, value", [
    ('table_size', 0),
    ('n_sample', 0),
    ('min_alpha', 0.0),
])
def test_invalid_values_raise(key, value):
    temp_config_path = write_temp_config({key: value})
    try:
        with pytest.raises(ValueError):
            Config(temp_config_path)
    finally:
        os.unlink(temp_config_path)

def test_validate_jobs():
    """Job counts are clamped to what the machine provides, with a warning."""
    temp_config_path = write_temp_config({'n_jobs': 0})
    try:
        config = Config(temp_config_path)

        with pytest.warns(UserWarning):
            assert config.validate_jobs() == 1

        config.n_jobs = 10**6
        with pytest.warns(UserWarning):
            assert config.validate_jobs() < 10**6

        config.n_jobs = 1
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert config.validate_jobs() == 1
    finally:
        os.unlink(temp_config_path)

if __name__ == '__main__':
    pytest.main([__file__])
