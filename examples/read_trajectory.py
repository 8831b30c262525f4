#!/usr/bin/env python
"""
Read a DCD trajectory and look at what is inside.

Usage:
    python examples/read_trajectory.py path/to/run.dcd [--plot]
"""

import sys

from dcdcore import DCDReader, WarningCollector, plotting, read_dcd
from dcdcore.report import format_summary


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return 1
    path = sys.argv[1]

    print("=" * 60)
    print("DCD Trajectory")
    print("=" * 60)

    # 1. Decode everything in one call, keeping any warnings
    collector = WarningCollector()
    trajectory = read_dcd(path, sink=collector)
    print(format_summary(trajectory))
    for warning in collector.warnings:
        print(f"   warning: {warning}")

    # 2. Whole-trajectory arrays
    print("\nCoordinates:")
    print("-" * 40)
    positions = trajectory.frames.positions
    print(f"   shape: {positions.shape}")
    if trajectory.n_frames:
        print(f"   first atom, first frame: {positions[0, 0]}")
        times = trajectory.times
        print(f"   time span: {times[0]:g} .. {times[-1]:g}")

    # 3. Frame-by-frame access
    print("\nFrames:")
    print("-" * 40)
    with DCDReader(path) as reader:
        for frame in reader:
            center = frame["positions"].mean(axis=0)
            print(f"   frame {frame['index']:4d}  t={frame['time']:10.4f}  "
                  f"center={center}")
            if "unit_cell" in frame:
                print(f"              cell lengths={frame['unit_cell'].lengths}")

    if "--plot" in sys.argv[2:]:
        plotting.coordinates(trajectory, atoms=[0])
        if trajectory.frames.unit_cells:
            plotting.unit_cell(trajectory)

    return 0


if __name__ == "__main__":
    sys.exit(main())
