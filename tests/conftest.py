"""Shared fixtures: synthetic DCD byte streams."""

import io
import struct

import numpy as np
import pytest

CHARMM_VERSION = 24


def build_dcd(
    positions,
    *,
    word_width=4,
    byte_order="little",
    charmm=True,
    step_size=0.5,
    istart=0,
    nsavc=1,
    nstep=None,
    title_lines=("* SYNTHETIC TRAJECTORY", "* DATE: 10/19/26"),
    free_indexes=None,
    w=None,
    unit_cells=None,
    declared_lines=None,
    header_trailer=84,
    title_size_trailer=None,
    title_integrity=4,
    atom_count_trailer=4,
    free_count_trailer=None,
    free_index_base=1,
    bad_coord_trailer=None,
    bad_coord_leading=None,
    bad_unit_cell_trailer=None,
):
    """
    Encode a DCD file.

    Args:
        positions: Coordinates, shape (nset, n_atoms, 3).
        free_indexes: 0-based free atoms. Frames after the first then store
            only these atoms; all other atoms are fixed.
        w: Fourth channel, shape (nset, n_atoms).
        unit_cells: Unit-cell values, shape (nset, 6).
        bad_coord_trailer / bad_coord_leading: (frame, channel) of one
            coordinate block whose trailing / leading marker is corrupted.

    Remaining keyword arguments override individual fields to produce
    corrupt files.
    """
    positions = np.asarray(positions, dtype=np.float32)
    nset, n_atoms, _ = positions.shape
    p = ">" if byte_order == "big" else "<"
    wf = "i" if word_width == 4 else "q"

    def word(value):
        return struct.pack(p + wf, value)

    num_fixed = 0 if free_indexes is None else n_atoms - len(free_indexes)

    # Header
    icntrl = bytearray(struct.pack(p + "20I", *([0] * 20)))
    struct.pack_into(p + "4I", icntrl, 0, nset, istart, nsavc, nstep or nset * nsavc)
    struct.pack_into(p + "I", icntrl, 32, num_fixed)
    if charmm:
        struct.pack_into(p + "f", icntrl, 36, step_size)
        struct.pack_into(p + "I", icntrl, 40, 1 if unit_cells is not None else 0)
        struct.pack_into(p + "I", icntrl, 44, 1 if w is not None else 0)
        struct.pack_into(p + "I", icntrl, 76, CHARMM_VERSION)
    else:
        struct.pack_into(p + "d", icntrl, 36, step_size)
    out = [word(84), b"CORD", bytes(icntrl), word(header_trailer)]

    # Title
    text = b"".join(line.encode("ascii").ljust(80) for line in title_lines)
    size = 4 + len(text)
    if declared_lines is None:
        declared_lines = len(title_lines)
    if title_size_trailer is None:
        title_size_trailer = size
    out += [word(size), word(declared_lines), text, word(title_size_trailer)]
    out.append(word(title_integrity))

    # Atoms
    out += [word(n_atoms), word(atom_count_trailer)]
    if free_indexes is not None:
        count = len(free_indexes) * word_width
        if free_count_trailer is None:
            free_count_trailer = count
        out.append(word(count))
        out += [word(int(i) + free_index_base) for i in free_indexes]
        out.append(word(free_count_trailer))

    # Frames
    for i in range(nset):
        if unit_cells is not None:
            trailer = 48 + (1 if bad_unit_cell_trailer == i else 0)
            out += [word(48), struct.pack(p + "6d", *unit_cells[i]), word(trailer)]

        for c, channel in enumerate("xyz"):
            if i == 0 or free_indexes is None:
                values = positions[i, :, c]
            else:
                values = positions[i, free_indexes, c]
            out.append(_block(word, p, values, i, channel, bad_coord_leading, bad_coord_trailer))
        if w is not None:
            values = np.asarray(w[i], dtype=np.float32)
            out.append(_block(word, p, values, i, "w", bad_coord_leading, bad_coord_trailer))

    return b"".join(out)


def _block(word, p, values, frame, channel, bad_leading, bad_trailer):
    size = 4 * len(values)
    leading = size + (4 if bad_leading == (frame, channel) else 0)
    trailing = size + (1 if bad_trailer == (frame, channel) else 0)
    return word(leading) + struct.pack(f"{p}{len(values)}f", *values) + word(trailing)


def random_positions(nset, n_atoms, seed=42):
    """Deterministic float32 coordinates, shape (nset, n_atoms, 3)."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-20.0, 20.0, (nset, n_atoms, 3)).astype(np.float32)


@pytest.fixture
def make_dcd():
    """Return a function encoding a DCD file as a BytesIO stream."""

    def _make(positions, **kwargs):
        return io.BytesIO(build_dcd(positions, **kwargs))

    return _make


@pytest.fixture
def make_dcd_bytes():
    """Return a function encoding a DCD file as bytes."""
    return build_dcd


@pytest.fixture
def positions():
    """Five frames of eight atoms."""
    return random_positions(5, 8)


@pytest.fixture
def make_positions():
    """Return a function creating deterministic coordinates."""
    return random_positions
