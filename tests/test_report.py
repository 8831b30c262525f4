"""Tests for text output, the command-line tool and plotting."""

import io
import logging

import numpy as np
import pytest

from dcdcore import decode
from dcdcore.cli import build_parser, main
from dcdcore.report import TrajectoryPrinter, format_summary


@pytest.fixture
def trajectory(make_dcd, make_positions):
    """A small fixed-atom trajectory with unit cells."""
    cells = np.tile([30.0, 90.0, 30.0, 90.0, 90.0, 30.0], (3, 1))
    stream = make_dcd(
        make_positions(3, 4),
        free_indexes=[0, 2],
        unit_cells=cells,
        istart=100,
        nsavc=10,
        step_size=0.002,
    )
    return decode(stream)


@pytest.fixture
def dcd_path(tmp_path, make_dcd_bytes, make_positions):
    """A small file on disk."""
    filepath = tmp_path / "small.dcd"
    filepath.write_bytes(make_dcd_bytes(make_positions(2, 3)))
    return filepath


class TestSummary:
    """Tests for format_summary."""

    def test_lines(self, trajectory):
        """Test metadata lines."""
        lines = format_summary(trajectory).splitlines()

        assert lines[0] == "CHARMM 32-bit Trajectory File Little Endian"
        assert lines[1] == "* SYNTHETIC TRAJECTORY"
        assert "Nset: 3" in lines
        assert "Istart: 100" in lines
        assert "Nsavc: 10" in lines
        assert "Nstep: 30" in lines
        assert "Step size: 0.002 picoseconds" in lines
        assert "Number of atoms per frame: 4" in lines
        assert "Fixed atoms: 2" in lines
        assert "Unit cell: present" in lines

    def test_xplor_big_endian(self, make_dcd, make_positions):
        """Test the format line of a 64-bit big-endian X-PLOR file."""
        stream = make_dcd(
            make_positions(1, 2), charmm=False, word_width=8, byte_order="big"
        )
        summary = format_summary(decode(stream))
        assert summary.startswith("X-PLOR 64-bit Trajectory File Big Endian")
        assert "Fixed atoms" not in summary

    def test_warning_count(self, make_dcd, make_positions):
        """Test that warnings are counted."""
        stream = make_dcd(make_positions(2, 2), bad_coord_trailer=(1, "y"))
        assert "Warnings: 1" in format_summary(decode(stream, sink=lambda w: None))


class TestTrajectoryPrinter:
    """Tests for TrajectoryPrinter."""

    def test_summary_only(self, trajectory):
        """Test printing without coordinates."""
        out = io.StringIO()
        TrajectoryPrinter(file=out).print(trajectory, frames=False)
        assert "Frame" not in out.getvalue()
        assert out.getvalue().endswith("Unit cell: present\n")

    def test_frames(self, trajectory):
        """Test per-atom coordinate lines."""
        out = io.StringIO()
        TrajectoryPrinter(file=out, precision=3).print(trajectory)
        lines = out.getvalue().splitlines()

        assert "Frame 0 coordinates" in lines
        assert "Frame 2 coordinates" in lines
        start = lines.index("Frame 1 coordinates")
        x, y, z = trajectory.frames.frame(1)[3]
        assert lines[start + 4] == f"(3)\t{x:.3f}\t{y:.3f}\t{z:.3f}"

    def test_separator(self, trajectory):
        """Test a custom separator."""
        out = io.StringIO()
        printer = TrajectoryPrinter(file=out, separator=",")
        printer.print_frame(trajectory, 0)
        assert out.getvalue().splitlines()[1].startswith("(0),")


class TestCLI:
    """Tests for the dcdcore-info command."""

    def test_parser_defaults(self):
        """Test default options."""
        args = build_parser().parse_args(["run.dcd"])
        assert args.file == "run.dcd"
        assert not args.frames
        assert not args.strict
        assert args.max_title_lines == 1000
        assert args.log_level == "WARNING"

    def test_summary(self, dcd_path, capsys):
        """Test a successful run."""
        assert main([str(dcd_path)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("CHARMM 32-bit Trajectory File Little Endian")
        assert "Frame 0" not in out

    def test_frames(self, dcd_path, capsys):
        """Test printing coordinates."""
        assert main([str(dcd_path), "--frames"]) == 0
        out = capsys.readouterr().out
        assert "Frame 1 coordinates" in out

    def test_missing_file(self, tmp_path, caplog):
        """Test exit status for a missing file."""
        with caplog.at_level(logging.ERROR):
            assert main([str(tmp_path / "missing.dcd")]) == 1
        assert "File not found" in caplog.text

    def test_invalid_file(self, tmp_path):
        """Test exit status for a file that is not a DCD."""
        filepath = tmp_path / "bad.dcd"
        filepath.write_bytes(b"\x00" * 64)
        assert main([str(filepath)]) == 1

    def test_strict(self, tmp_path, make_dcd_bytes, make_positions):
        """Test that --strict turns warnings into a failure."""
        filepath = tmp_path / "warn.dcd"
        filepath.write_bytes(
            make_dcd_bytes(make_positions(2, 2), bad_coord_trailer=(0, "x"))
        )
        assert main([str(filepath)]) == 0
        assert main([str(filepath), "--strict"]) == 1

    def test_invalid_option(self, dcd_path):
        """Test exit status for an invalid option value."""
        assert main([str(dcd_path), "--max-title-lines", "-1"]) == 2


class TestPlotting:
    """Tests for plotting helpers."""

    def test_coordinates(self, trajectory):
        """Test coordinate plot creation."""
        pytest.importorskip("matplotlib")
        from dcdcore import plotting

        plotting.coordinates(trajectory, atoms=[0, 1], show=False)
        plotting.close()

    def test_unit_cell(self, trajectory, tmp_path):
        """Test unit-cell plot creation and saving."""
        pytest.importorskip("matplotlib")
        from dcdcore import plotting

        plotting.unit_cell(trajectory, show=False)
        plotting.save(tmp_path / "cell.png")
        plotting.close()
        assert (tmp_path / "cell.png").exists()

    def test_unit_cell_missing(self, make_dcd, make_positions):
        """Test that plotting absent unit cells fails."""
        pytest.importorskip("matplotlib")
        from dcdcore import plotting

        trajectory = decode(make_dcd(make_positions(2, 2)))
        with pytest.raises(ValueError):
            plotting.unit_cell(trajectory, show=False)
