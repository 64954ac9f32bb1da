import numpy as np
import h5py
import pytest
from ltcfit.model.fitting import LTCTable
from ltcfit.model.packing import pack_table
from ltcfit.model.export import (
    EXPORT_FORMATS,
    save_table_npz,
    load_table_npz,
    save_table_hdf5,
    write_tab_matlab,
    write_tab_c,
    write_tab_js,
    dds_header,
    write_dds,
    export_table
)
from ltcfit.utilities.locations import Locations

@pytest.fixture
def table():
    n = 2
    table = LTCTable(n, "ggx")
    for t in range(n):
        for a in range(n):
            m = 0.1 * (a + 1)
            table.matrices[t, a] = [[m, 0.0, 0.05 * t], [0.0, m + 0.1, 0.0], [0.02 * a, 0.0, 1.0]]
            table.amplitudes[t, a] = 0.5 + 0.1 * (a + n * t)
            table.errors[t, a] = 0.01 * (a + n * t)
    return table

@pytest.fixture
def locations(tmp_path):
    locations = Locations()
    locations.config = str(tmp_path / "config")
    locations.outputs = str(tmp_path / "output")
    locations.ltc_tables = str(tmp_path / "output" / "ltc_tables")
    locations.plots = str(tmp_path / "output" / "plots")
    return locations

def test_npz_round_trip(table, tmp_path):
    path = str(tmp_path / "table.npz")
    save_table_npz(table, path)
    loaded = load_table_npz(path)

    assert loaded.n == 2
    assert loaded.brdf_name == "ggx"
    assert np.array_equal(loaded.matrices, table.matrices)
    assert np.array_equal(loaded.amplitudes, table.amplitudes)
    assert np.array_equal(loaded.errors, table.errors)

def test_load_missing_table(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_table_npz(str(tmp_path / "missing.npz"))

def test_load_malformed_table(tmp_path):
    path = str(tmp_path / "bad.npz")
    np.savez(path, something=np.zeros(3))
    with pytest.raises(RuntimeError, match="Failed to load LTC table"):
        load_table_npz(path)

def test_hdf5_contents(table, tmp_path):
    tex1, tex2 = pack_table(table)
    path = str(tmp_path / "table.h5")
    save_table_hdf5(table, tex1, tex2, path)

    with h5py.File(path, 'r') as hf:
        assert hf.attrs['brdf'] == "ggx"
        assert hf.attrs['size'] == 2
        assert np.array_equal(hf['table/matrices'][:], table.matrices)
        assert np.array_equal(hf['packed/tex1'][:], tex1)
        assert np.array_equal(hf['packed/tex2'][:], tex2)

def test_matlab_text(table, tmp_path):
    path = tmp_path / "table.mat"
    write_tab_matlab(table.flat_matrices(), table.flat_amplitudes(), table.n, str(path))
    text = path.read_text()

    assert "# name: tabAmplitude" in text
    for row in range(3):
        for column in range(3):
            assert f"# name: tab{column}{row}\n" in text
    assert text.count("# rows: 2") == 10

def test_c_header(table, tmp_path):
    path = tmp_path / "table.inc"
    write_tab_c(table.flat_matrices(), table.flat_amplitudes(), table.n, str(path))
    text = path.read_text()

    assert "static const int size = 2;" in text
    assert "static const mat33 tabM[size*size]" in text
    assert "static const float tabAmplitude[size*size]" in text
    # one line per cell in each array
    assert text.count("},\n") == 4
    assert "0.5f," in text

def test_js_arrays(table, tmp_path):
    tex1, tex2 = pack_table(table)
    path = tmp_path / "table.js"
    write_tab_js(tex1, tex2, str(path))
    lines = [line for line in path.read_text().splitlines() if line]

    assert lines[0].startswith("var g_ltc_1 = [")
    assert lines[1].startswith("var g_ltc_2 = [")
    for line in lines:
        values = line[line.index("[") + 1:line.index("]")].split(", ")
        assert len(values) == 4 * 4

def test_dds_header_layout():
    header = dds_header(8, 8, 2, 16)
    assert len(header) == 4 + 124 + 20
    assert header[:4] == b"DDS "
    words = np.frombuffer(header[4:], dtype='<u4')
    assert words[0] == 124
    assert words[2] == 8 and words[3] == 8
    assert header[4 + 20 * 4:4 + 21 * 4] == b"DX10"
    # DX10 extension: format, 2D texture
    assert words[31] == 2
    assert words[32] == 3

@pytest.mark.parametrize("channels", [2, 4])
def test_dds_file_size(tmp_path, channels):
    n = 3
    path = tmp_path / "tex.dds"
    write_dds(np.ones((n * n, channels)), n, str(path))
    assert path.stat().st_size == 4 + 124 + 20 + n * n * channels * 4

def test_dds_rejects_three_channels(tmp_path):
    with pytest.raises(ValueError):
        write_dds(np.ones((4, 3)), 2, str(tmp_path / "tex.dds"))

def test_export_table_writes_every_format(table, locations):
    tex1, tex2 = pack_table(table)
    written = export_table(table, tex1, tex2, locations, "ltc_ggx", list(EXPORT_FORMATS), silent_mode=True)

    names = sorted(p.split("/")[-1] for p in written)
    assert names == sorted([
        "ltc_ggx.npz", "ltc_ggx.h5", "ltc_ggx.mat", "ltc_ggx.inc",
        "ltc_ggx.js", "ltc_ggx_1.dds", "ltc_ggx_2.dds"
    ])
    loaded = load_table_npz(locations.get_table_path("ltc_ggx", "npz"))
    assert np.array_equal(loaded.matrices, table.matrices)

def test_export_table_unknown_format(table, locations, tmp_path):
    tex1, tex2 = pack_table(table)
    with pytest.raises(ValueError, match="Unknown export format"):
        export_table(table, tex1, tex2, locations, "ltc_ggx", ["npz", "exr"], silent_mode=True)
    # nothing is written before the formats are validated
    assert not (tmp_path / "output").exists()

if __name__ == '__main__':
    pytest.main([__file__])
