"""
Configuration schema for the Runge-Kutta finite-volume solver.

Dataclass-based configuration that can be loaded from YAML or constructed programmatically.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional


@dataclass
class GasConfig:
    """Perfect gas properties."""

    gamma: float = 1.4         # Ratio of specific heats
    cp: float = 1004.5         # Specific heat at constant pressure [J/(kg K)]
    prandtl: float = 0.72      # Laminar Prandtl number
    refvisc: float = 1.716e-5  # Sutherland reference viscosity [kg/(m s)]
    reftemp: float = 273.15    # Sutherland reference temperature [K]


@dataclass
class NumericsConfig:
    """Spatial scheme and pseudo-time stepping switches."""

    equations: str = "E"       # "E" (Euler) or "N" (Navier-Stokes)
    order: int = 2             # 1 = first-order upwind, 2 = limited second order
    precondition: bool = False # Low-Mach preconditioning
    precoeff: float = 1.0      # Preconditioning cut-off K in Ur^2 >= K * q_inf^2
    q_inf: float = 1.0         # Freestream speed magnitude (preconditioning reference)
    cfl: float = 2.0           # CFL number
    epsirs: float = 0.0        # Implicit residual smoothing coefficient (0 = off)
    nitirs: int = 2            # Jacobi sweeps of the smoothing
    visc_factor: float = 1.0   # Weight of the viscous spectral radius in the time step
    use_global_dt: bool = False


@dataclass
class StageConfig:
    """Runge-Kutta stage coefficients.

    Either a named preset ("single", "upwind3", "upwind5", "hybrid5") or
    explicit ark / betrk / ldiss lists (which take precedence).
    """

    preset: Optional[str] = "upwind3"
    ark: Optional[List[float]] = None
    betrk: Optional[List[float]] = None
    ldiss: Optional[List[int]] = None


@dataclass
class IterationConfig:
    """Outer iteration settings."""

    max_iter: int = 1000
    tol: float = 1e-6          # Relative density-change drop
    print_freq: int = 10


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    show_time: bool = True


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""

    gas: GasConfig = field(default_factory=GasConfig)
    numerics: NumericsConfig = field(default_factory=NumericsConfig)
    stages: StageConfig = field(default_factory=StageConfig)
    iteration: IterationConfig = field(default_factory=IterationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_stage_table(self):
        """Build the StageTable described by the stages section."""
        from fvrk.solvers.stages import StageTable, stage_preset

        st = self.stages
        if st.ark is not None:
            nrk = len(st.ark)
            betrk = st.betrk if st.betrk is not None else [1.0] * nrk
            ldiss = st.ldiss if st.ldiss is not None else [1] * nrk
            return StageTable.from_lists(st.ark, betrk, ldiss)
        return stage_preset(st.preset or "upwind3", self.numerics.order)

    def to_solver_config(self):
        """Convert to the immutable SolverConfig consumed by RungeKuttaSolver."""
        from fvrk.exceptions import ConfigurationError
        from fvrk.solvers.rk_solver import SolverConfig, EquationSet, ReconstructionOrder

        num = self.numerics
        try:
            equations = EquationSet(num.equations.upper())
        except ValueError:
            raise ConfigurationError(
                f"Unknown equation set '{num.equations}' (expected 'E' or 'N')"
            ) from None
        try:
            order = ReconstructionOrder(int(num.order))
        except ValueError:
            raise ConfigurationError(f"Unsupported order {num.order} (expected 1 or 2)") from None

        return SolverConfig(
            stages=self.to_stage_table(),
            equations=equations,
            order=order,
            precondition=bool(num.precondition),
            cfl=num.cfl,
            epsirs=num.epsirs,
        )

    def to_time_step_config(self):
        """Convert to the TimeStepConfig of the edge-based estimator."""
        from fvrk.solvers.time_stepping import TimeStepConfig

        num = self.numerics
        return TimeStepConfig(
            viscous=num.equations.upper() == "N",
            preconditioned=bool(num.precondition),
            prandtl=self.gas.prandtl,
            visc_factor=num.visc_factor,
            precoeff=num.precoeff,
            q2_inf=num.q_inf ** 2,
            use_global_dt=num.use_global_dt,
        )

    def to_gas(self):
        """Build the PerfectGas model."""
        from fvrk.physics.perfect_gas import PerfectGas

        return PerfectGas(
            gamma=self.gas.gamma,
            cp=self.gas.cp,
            prandtl=self.gas.prandtl,
            refvisc=self.gas.refvisc,
            reftemp=self.gas.reftemp,
            precoeff=self.numerics.precoeff,
            q2_inf=self.numerics.q_inf ** 2,
        )

    def to_dict(self) -> dict:
        """Convert to nested dictionary."""
        return asdict(self)


# Preset configurations
def euler_upwind_preset() -> NumericsConfig:
    """Second-order upwind Euler with residual smoothing."""
    return NumericsConfig(equations="E", order=2, cfl=3.0, epsirs=0.5, nitirs=2)


def low_mach_preset() -> NumericsConfig:
    """Preconditioned Euler for low Mach numbers."""
    return NumericsConfig(equations="E", order=2, precondition=True, precoeff=1.0, cfl=2.0)


def navier_stokes_preset() -> NumericsConfig:
    """Second-order Navier-Stokes with residual smoothing."""
    return NumericsConfig(equations="N", order=2, cfl=2.5, epsirs=0.5, nitirs=2)
