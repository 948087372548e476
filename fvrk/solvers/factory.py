"""
Solver Factory Module.

Wires the reference collaborators (perfect gas, edge time step, boundary
residual corrector, implicit residual smoothing) around a user-supplied
spatial scheme and boundary-condition treatment.
"""

from dataclasses import asdict
from typing import Optional

from ..config.schema import SimulationConfig
from ..grid.mesh import MeshData
from ..numerics.boundary_residuals import BoundaryResidualCorrector
from ..numerics.smoothing import ImplicitResidualSmoother
from ..utils.logging import setup_logging
from .collaborators import BoundaryConditions, Collaborators, SpatialScheme
from .flow_field import FlowField
from .rk_solver import RungeKuttaSolver
from .time_stepping import EdgeTimeStep


def create_collaborators(mesh: MeshData, config: SimulationConfig,
                         scheme: SpatialScheme,
                         bcs: BoundaryConditions) -> Collaborators:
    """Build the collaborator bundle for ``mesh`` from ``config``."""
    num = config.numerics
    viscous = num.equations.upper() == "N"

    corrector = BoundaryResidualCorrector(mesh, viscous=viscous)
    smoother = None
    if num.epsirs > 0.0:
        smoother = ImplicitResidualSmoother(
            mesh, epsilon=num.epsirs, n_iter=num.nitirs, periodic=corrector.periodic
        )

    return Collaborators(
        time_step=EdgeTimeStep(mesh, config.to_time_step_config()),
        scheme=scheme,
        gas=config.to_gas(),
        corrector=corrector,
        bcs=bcs,
        smoother=smoother,
    )


def create_solver(
    mesh: MeshData,
    scheme: SpatialScheme,
    bcs: BoundaryConditions,
    config: Optional[SimulationConfig] = None,
    flow: Optional[FlowField] = None,
    configure_logging: bool = True,
) -> RungeKuttaSolver:
    """
    Create a RungeKuttaSolver with consistent settings.

    Parameters
    ----------
    mesh : MeshData
        Node-based mesh.
    scheme : SpatialScheme
        Flux, dissipation, gradient and limiter kernels.
    bcs : BoundaryConditions
        Boundary-state enforcement.
    config : SimulationConfig, optional
        Defaults to SimulationConfig().
    flow : FlowField, optional
        Initial state; allocated (zero) if not given. Its dependent
        variables are recomputed from cv before the solver is returned.
    configure_logging : bool
        Apply config.logging to loguru.

    Returns
    -------
    RungeKuttaSolver
    """
    if config is None:
        config = SimulationConfig()
    if configure_logging:
        setup_logging(level=config.logging.level, show_time=config.logging.show_time)

    solver_config = config.to_solver_config()
    if flow is None:
        flow = FlowField.allocate(mesh, viscous=solver_config.viscous)

    collaborators = create_collaborators(mesh, config, scheme, bcs)
    if flow.cv[0].min() > 0.0:
        collaborators.gas.dependent_vars_all(flow)

    return RungeKuttaSolver(flow, solver_config, collaborators)


def run_simulation(
    mesh: MeshData,
    scheme: SpatialScheme,
    bcs: BoundaryConditions,
    config: Optional[SimulationConfig] = None,
    flow: Optional[FlowField] = None,
    configure_logging: bool = True,
) -> RungeKuttaSolver:
    """
    Build a solver and iterate it with the settings of ``config.iteration``.

    Returns the solver; ``solver.converged`` and ``solver.residual_history``
    describe the run.
    """
    if config is None:
        config = SimulationConfig()
    solver = create_solver(mesh, scheme, bcs, config=config, flow=flow,
                           configure_logging=configure_logging)
    solver.iterate(**asdict(config.iteration))
    return solver
