"""
Tests for the loguru setup and the solver's log output.
"""

import io

import numpy as np
import pytest

from fvrk.exceptions import InsufficientWorkspaceError
from fvrk.numerics.workspace import allocate_work
from fvrk.solvers.rk_solver import ReconstructionOrder, RungeKuttaSolver, SolverConfig
from fvrk.solvers.stages import upwind_3stage
from fvrk.utils.logging import setup_logging

from stubs import make_collaborators


@pytest.fixture
def log_buffer():
    buf = io.StringIO()
    yield buf
    setup_logging()


def test_level_filters_messages(log_buffer):
    logger = setup_logging(level="WARNING", show_time=False, sink=log_buffer)
    logger.info("hidden")
    logger.warning("shown")

    out = log_buffer.getvalue()
    assert "shown" in out
    assert "hidden" not in out
    assert out.startswith("WARNING")


def test_solver_banner_and_stage_messages(log_buffer, four_node_flow, call_log):
    setup_logging(level="DEBUG", show_time=False, sink=log_buffer)
    config = SolverConfig(stages=upwind_3stage(1), order=ReconstructionOrder.FIRST)
    solver = RungeKuttaSolver(four_node_flow, config, make_collaborators(call_log))

    iwork, work = allocate_work(4)
    solver.run_step(iwork, work)

    out = log_buffer.getvalue()
    assert "Runge-Kutta solver initialized" in out
    assert "Nodes: 4 (3 active)" in out
    assert "Stage 3/3" in out


def test_workspace_error_logged(log_buffer, four_node_flow, call_log):
    setup_logging(level="INFO", show_time=False, sink=log_buffer)
    config = SolverConfig(stages=upwind_3stage(1), order=ReconstructionOrder.FIRST)
    solver = RungeKuttaSolver(four_node_flow, config, make_collaborators(call_log))

    with pytest.raises(InsufficientWorkspaceError):
        solver.run_step(np.zeros(4, dtype=np.int64), np.zeros(8))

    assert "Insufficient work space" in log_buffer.getvalue()
