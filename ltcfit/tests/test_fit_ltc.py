import os
import tempfile
import yaml
import numpy as np
import pytest
import fit_ltc
from ltcfit.model.export import load_table_npz
from ltcfit.utilities.locations import Locations

def write_temp_config(config_data):
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        return f.name

@pytest.fixture
def tmp_locations(tmp_path, monkeypatch):
    locations = Locations()
    locations.config = str(tmp_path / "config")
    locations.outputs = str(tmp_path / "output")
    locations.ltc_tables = str(tmp_path / "output" / "ltc_tables")
    locations.plots = str(tmp_path / "output" / "plots")
    monkeypatch.setattr("ltcfit.utilities.config.Locations", lambda: locations)
    return locations

def test_parse_args():
    args = fit_ltc.parse_args(['--config', 'my.yaml', '--brdf', 'beckmann'])
    assert args.config == 'my.yaml'
    assert args.brdf == 'beckmann'

def test_parse_args_rejects_unknown_brdf():
    with pytest.raises(SystemExit):
        fit_ltc.parse_args(['--brdf', 'phong'])

def test_main_fits_and_exports(tmp_locations):
    """A small end-to-end run writes the requested table files."""
    temp_config_path = write_temp_config({
        'silent_mode': True,
        'brdf': 'ggx',
        'table_size': 2,
        'n_sample': 4,
        'output_name': 'test',
        'output_formats': ['npz', 'js'],
    })

    try:
        assert fit_ltc.main(['--config', temp_config_path, '--brdf', 'lambertian']) == 0
    finally:
        os.unlink(temp_config_path)

    table = load_table_npz(tmp_locations.get_table_path('test_lambertian', 'npz'))
    assert table.brdf_name == 'lambertian'
    assert table.matrices.shape == (2, 2, 3, 3)
    assert np.all(np.isfinite(table.matrices))
    assert os.path.exists(tmp_locations.get_table_path('test_lambertian', 'js'))

if __name__ == '__main__':
    pytest.main([__file__])
