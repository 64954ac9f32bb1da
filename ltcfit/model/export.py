# ltcfit/model/export.py

"""
Writers for fitted LTC tables.

Every writer takes arrays in the flat a + t*N cell order: matrices (N^2, 3, 3),
amplitudes (N^2,), and the packed textures tex1 (N^2, 4) and tex2 (N^2, 2).
"""

import os
import numpy as np
import h5py

from ltcfit.model.fitting import LTCTable
from ltcfit.utilities.utils import conditional_print

DDS_MAGIC = b"DDS "
DXGI_FORMAT_R32G32B32A32_FLOAT = 2
DXGI_FORMAT_R32G32_FLOAT = 16
D3D10_RESOURCE_DIMENSION_TEXTURE2D = 3

EXPORT_FORMATS = ("npz", "hdf5", "matlab", "c", "js", "dds")

def save_table_npz(table, path, tex1=None, tex2=None):
    arrays = {
        'matrices': table.matrices,
        'amplitudes': table.amplitudes,
        'errors': table.errors,
        'brdf': np.array(table.brdf_name)
    }
    if tex1 is not None:
        arrays['tex1'] = tex1
    if tex2 is not None:
        arrays['tex2'] = tex2
    np.savez_compressed(path, **arrays)

def load_table_npz(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"LTC table not found at {path}")

    try:
        with np.load(path) as data:
            matrices = data['matrices']
            table = LTCTable(matrices.shape[0], str(data['brdf']))
            table.matrices = matrices.astype(np.float64)
            table.amplitudes = data['amplitudes'].astype(np.float64)
            table.errors = data['errors'].astype(np.float64)
    except Exception as e:
        raise RuntimeError(f"Failed to load LTC table: {str(e)}")

    return table

def save_table_hdf5(table, tex1, tex2, path):
    with h5py.File(path, 'w') as hf:
        table_group = hf.create_group('table')
        table_group.create_dataset('matrices', data=table.matrices)
        table_group.create_dataset('amplitudes', data=table.amplitudes)
        table_group.create_dataset('errors', data=table.errors)
        packed_group = hf.create_group('packed')
        packed_group.create_dataset('tex1', data=tex1)
        packed_group.create_dataset('tex2', data=tex2)
        hf.attrs['brdf'] = table.brdf_name
        hf.attrs['size'] = table.n

def _octave_matrix(file, name, values):
    n = values.shape[0]
    file.write(f"# name: {name}\n")
    file.write("# type: matrix\n")
    file.write(f"# rows: {n}\n")
    file.write(f"# columns: {values.shape[1]}\n")
    for row in values:
        file.write(" " + " ".join(f"{v:.9g}" for v in row) + "\n")
    file.write("\n")

def write_tab_matlab(matrices, amplitudes, n, path):
    """Octave/MATLAB text file: tabAmplitude and one tabCR matrix per (column, row) entry, rows indexed by t."""
    with open(path, 'w') as file:
        _octave_matrix(file, "tabAmplitude", amplitudes.reshape(n, n))
        for row in range(3):
            for column in range(3):
                _octave_matrix(file, f"tab{column}{row}", matrices[:, row, column].reshape(n, n))

def write_tab_c(matrices, amplitudes, n, path):
    """C header embedding the fitted matrices (row-major) and amplitudes."""
    with open(path, 'w') as file:
        file.write(f"static const int size = {n};\n\n")
        file.write("static const mat33 tabM[size*size] =\n{\n")
        for m in matrices:
            entries = ", ".join(f"{v:.9g}f" for v in m.ravel())
            file.write(f"    {{{entries}}},\n")
        file.write("};\n\n")
        file.write("static const float tabAmplitude[size*size] =\n{\n")
        for value in amplitudes:
            file.write(f"    {value:.9g}f,\n")
        file.write("};\n")

def write_tab_js(tex1, tex2, path):
    """JavaScript arrays g_ltc_1 (4 floats per cell) and g_ltc_2 (4 floats per cell, last two zero)."""
    tex2_rgba = np.zeros((len(tex2), 4))
    tex2_rgba[:, :2] = tex2
    with open(path, 'w') as file:
        for name, data in (("g_ltc_1", tex1), ("g_ltc_2", tex2_rgba)):
            values = ", ".join(f"{v:.9g}" for v in data.ravel())
            file.write(f"var {name} = [{values}];\n\n")

def dds_header(width, height, dxgi_format, bytes_per_pixel):
    """DDS header with the DX10 extension for an uncompressed 2D float texture."""
    DDSD_CAPS, DDSD_HEIGHT, DDSD_WIDTH, DDSD_PITCH, DDSD_PIXELFORMAT = 0x1, 0x2, 0x4, 0x8, 0x1000
    DDPF_FOURCC = 0x4
    DDSCAPS_TEXTURE = 0x1000

    header = np.zeros(31, dtype='<u4')
    header[0] = 124
    header[1] = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PITCH | DDSD_PIXELFORMAT
    header[2] = height
    header[3] = width
    header[4] = width * bytes_per_pixel
    # pixel format block starts at word 18
    header[18] = 32
    header[19] = DDPF_FOURCC
    header[20] = np.frombuffer(b"DX10", dtype='<u4')[0]
    header[26] = DDSCAPS_TEXTURE

    dx10 = np.array([dxgi_format, D3D10_RESOURCE_DIMENSION_TEXTURE2D, 0, 1, 0], dtype='<u4')
    return DDS_MAGIC + header.tobytes() + dx10.tobytes()

def write_dds(data, n, path):
    """Write an n x n float32 texture with 2 or 4 channels per texel."""
    data = np.ascontiguousarray(data, dtype='<f4')
    channels = data.shape[1]
    if channels == 4:
        dxgi_format = DXGI_FORMAT_R32G32B32A32_FLOAT
    elif channels == 2:
        dxgi_format = DXGI_FORMAT_R32G32_FLOAT
    else:
        raise ValueError(f"DDS export supports 2 or 4 channels, got {channels}")

    with open(path, 'wb') as file:
        file.write(dds_header(n, n, dxgi_format, 4 * channels))
        file.write(data.tobytes())

def export_table(table, tex1, tex2, locations, name, formats, silent_mode=False):
    """
    Write the table in each requested format into the ltc_tables output directory.

    Returns:
        list: Paths of the files written
    """
    unknown = [fmt for fmt in formats if fmt not in EXPORT_FORMATS]
    if unknown:
        raise ValueError(f"Unknown export format(s): {unknown}. Available formats: {list(EXPORT_FORMATS)}")

    locations.ensure_directories_exist()
    matrices = table.flat_matrices()
    amplitudes = table.flat_amplitudes()
    n = table.n
    written = []

    for fmt in formats:
        if fmt == 'npz':
            path = locations.get_table_path(name, 'npz')
            save_table_npz(table, path, tex1, tex2)
            written.append(path)
        elif fmt == 'hdf5':
            path = locations.get_table_path(name, 'h5')
            save_table_hdf5(table, tex1, tex2, path)
            written.append(path)
        elif fmt == 'matlab':
            path = locations.get_table_path(name, 'mat')
            write_tab_matlab(matrices, amplitudes, n, path)
            written.append(path)
        elif fmt == 'c':
            path = locations.get_table_path(name, 'inc')
            write_tab_c(matrices, amplitudes, n, path)
            written.append(path)
        elif fmt == 'js':
            path = locations.get_table_path(name, 'js')
            write_tab_js(tex1, tex2, path)
            written.append(path)
        elif fmt == 'dds':
            path_1 = locations.get_table_path(f"{name}_1", 'dds')
            path_2 = locations.get_table_path(f"{name}_2", 'dds')
            write_dds(tex1, n, path_1)
            write_dds(tex2, n, path_2)
            written.extend([path_1, path_2])

    for path in written:
        conditional_print(silent_mode, f"Saved {path}")

    return written
