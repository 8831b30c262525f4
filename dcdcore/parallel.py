"""Decoding of many independent DCD files across processes."""

from __future__ import annotations

import multiprocessing as mp
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path

from .config import DecoderConfig
from .io.formats.dcd import read_dcd
from .model import DCDTrajectory


def read_many(
    paths: Sequence[str | Path],
    n_workers: int | None = None,
    config: DecoderConfig | None = None,
) -> list[DCDTrajectory]:
    """
    Decode several files, one session per file.

    Sessions share nothing; each worker process owns its file and its
    decoded model. Warnings are logged by the workers and also returned in
    each trajectory's ``warnings``.

    Args:
        paths: Files to decode.
        n_workers: Number of worker processes. Defaults to CPU count;
            1 decodes serially in this process.
        config: Decoder options shared by every session.

    Returns:
        Trajectories in the order of ``paths``.

    Raises:
        DCDFormatError: The first fatal error met, in input order.
    """
    if len(paths) == 0:
        return []

    func = partial(read_dcd, config=config)
    n_workers = min(n_workers or mp.cpu_count(), len(paths))
    if n_workers == 1:
        return [func(path) for path in paths]

    with ProcessPoolExecutor(max_workers=n_workers) as executor:
        results = list(executor.map(func, paths))

    return results
