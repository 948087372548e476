"""
Scratch-buffer management for the pseudo-time step.

The caller owns one flat real buffer. Second-order reconstruction
(limiter bounds) and implicit residual smoothing (unsmoothed residual and
neighbour sum) each borrow two (NCONV, nnodes) windows of it for the
duration of one sub-step.

The windows are filled with NaN whenever they are handed out: consumers
must write every entry they later read.
"""

from contextlib import contextmanager
from typing import Iterator, Tuple

import numpy as np
import numpy.typing as npt
from loguru import logger

from ..constants import NCONV, get_work_size
from ..exceptions import InsufficientWorkspaceError, WorkspaceBusyError

NDArrayFloat = npt.NDArray[np.floating]


class Workspace:
    """
    Partition a flat real buffer into two node-indexed scratch views.

    Parameters
    ----------
    work : ndarray
        Flat real scratch buffer supplied by the caller.
    nnodes : int
        Total number of mesh nodes.
    """

    def __init__(self, work: NDArrayFloat, nnodes: int) -> None:
        self.work = work
        self.nnodes = nnodes
        self.mp = NCONV * nnodes
        self._busy = False

    @property
    def required(self) -> int:
        return get_work_size(self.nnodes)

    def check(self) -> None:
        """Raise InsufficientWorkspaceError if the buffer is too small."""
        available = int(np.size(self.work))
        if available < self.required:
            logger.error(
                f"Insufficient work space in solver: {available} < {self.required} "
                f"(2 x {NCONV} x {self.nnodes})"
            )
            raise InsufficientWorkspaceError("real", self.required, available)

    @contextmanager
    def views(self) -> Iterator[Tuple[NDArrayFloat, NDArrayFloat]]:
        """
        Borrow the two scratch windows, shape (NCONV, nnodes) each.

        Only one pair may be live at a time; the windows are views into the
        caller's buffer and stop being valid when the block exits.
        """
        if self._busy:
            raise WorkspaceBusyError("scratch views are already in use")
        # Guards direct use; run_step has already checked once per step
        self.check()

        flat = self.work.reshape(-1)
        dum1 = flat[:self.mp].reshape(NCONV, self.nnodes)
        dum2 = flat[self.mp:2 * self.mp].reshape(NCONV, self.nnodes)
        dum1.fill(np.nan)
        dum2.fill(np.nan)

        self._busy = True
        try:
            yield dum1, dum2
        finally:
            self._busy = False


def allocate_work(nnodes: int) -> Tuple[np.ndarray, NDArrayFloat]:
    """Allocate integer and real work buffers of the minimum size."""
    return np.zeros(nnodes, dtype=np.int64), np.zeros(get_work_size(nnodes))
