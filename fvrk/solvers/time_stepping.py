"""
Local time stepping on node-based meshes.

Δt_i = Ω_i / (Λ^c_i + C_v * Λ^v_i)

with the convective and viscous spectral radii accumulated over the edges
of the median-dual control volume:

    Λ^c_i = Σ_j (|V_ij · S_ij| + c_ij |S_ij|)
    Λ^v_i = Σ_j max(4/(3ρ), γ/ρ) (μ/Pr) |S_ij|² / Ω_i

The CFL number is NOT included; the Runge-Kutta update applies it.
With low-Mach preconditioning the acoustic speed is replaced by the
eigenvalues of the preconditioned system.

Reference: Blazek, "Computational Fluid Dynamics", Section 6.1.4.
"""

import numpy as np
import numpy.typing as npt
from dataclasses import dataclass
from typing import Optional

from ..constants import C_IDX, GAMMA_IDX, MU_IDX, NDV_VISCOUS
from ..grid.mesh import MeshData

NDArrayFloat = npt.NDArray[np.floating]


@dataclass
class TimeStepConfig:
    """Configuration for time stepping."""
    viscous: bool = False
    preconditioned: bool = False
    prandtl: float = 0.72
    visc_factor: float = 1.0       # C_v, weight of the viscous spectral radius
    precoeff: float = 1.0          # Preconditioning cut-off K
    q2_inf: float = 1.0            # Squared freestream speed
    use_global_dt: bool = False
    min_lambda: float = 1e-12


def preconditioned_wave_speed(vn: NDArrayFloat, c: NDArrayFloat,
                              ur2: NDArrayFloat) -> NDArrayFloat:
    """Largest eigenvalue of the preconditioned system for unit normal speed vn."""
    a = ur2 / (c * c)
    vabs = np.abs(vn)
    return 0.5 * (vabs * (1.0 + a) + np.sqrt(vn * vn * (1.0 - a) ** 2 + 4.0 * ur2))


def compute_spectral_radii(cv: NDArrayFloat, dv: NDArrayFloat, mesh: MeshData,
                           cfg: TimeStepConfig) -> NDArrayFloat:
    """Convective (+ viscous) spectral radius per node, shape (nnodes,)."""
    i = mesh.edges[:, 0]
    j = mesh.edges[:, 1]
    sx = mesh.sij[:, 0]
    sy = mesh.sij[:, 1]
    ds = np.sqrt(sx * sx + sy * sy)

    rho = cv[0]
    u = cv[1] / rho
    v = cv[2] / rho

    # Edge-averaged state
    ue = 0.5 * (u[i] + u[j])
    ve = 0.5 * (v[i] + v[j])
    ce = 0.5 * (dv[C_IDX, i] + dv[C_IDX, j])
    vn = (ue * sx + ve * sy) / np.maximum(ds, cfg.min_lambda)

    if cfg.preconditioned:
        q2 = ue * ue + ve * ve
        ur2 = np.minimum(ce * ce, np.maximum(q2, cfg.precoeff * cfg.q2_inf))
        lam_e = preconditioned_wave_speed(vn, ce, ur2) * ds
    else:
        lam_e = (np.abs(vn) + ce) * ds

    lam = np.zeros(mesh.nnodes)
    np.add.at(lam, i, lam_e)
    np.add.at(lam, j, lam_e)

    if cfg.viscous and dv.shape[0] >= NDV_VISCOUS:
        gam = dv[GAMMA_IDX]
        fmue = np.maximum(4.0 / (3.0 * rho), gam / rho) * dv[MU_IDX] / cfg.prandtl
        fe = 0.5 * (fmue[i] + fmue[j]) * ds * ds
        lam_v = np.zeros(mesh.nnodes)
        np.add.at(lam_v, i, fe)
        np.add.at(lam_v, j, fe)
        lam += cfg.visc_factor * lam_v / mesh.vol

    return lam


def compute_local_timestep(cv: NDArrayFloat, dv: NDArrayFloat, mesh: MeshData,
                           cfg: Optional[TimeStepConfig] = None) -> NDArrayFloat:
    """Local time step Ω_i / Λ_i for every node (CFL not applied)."""
    if cfg is None:
        cfg = TimeStepConfig()

    lam = compute_spectral_radii(cv, dv, mesh, cfg)

    # Periodic partners share one control volume: both see the summed radius
    pairs = mesh.periodic_pairs
    if pairs.size:
        total = lam[pairs[:, 0]] + lam[pairs[:, 1]]
        lam[pairs[:, 0]] = total
        lam[pairs[:, 1]] = total

    lam = np.maximum(lam, cfg.min_lambda)
    dt = mesh.vol / lam

    if cfg.use_global_dt:
        dt_global = float(np.min(dt[:mesh.nndint]))
        dt = np.full_like(dt, dt_global)

    return dt


class EdgeTimeStep:
    """Time-step estimator filling FlowField.tstep."""

    def __init__(self, mesh: MeshData, cfg: Optional[TimeStepConfig] = None) -> None:
        self.mesh = mesh
        self.cfg = cfg if cfg is not None else TimeStepConfig()

    def time_step(self, flow) -> None:
        flow.tstep[:] = compute_local_timestep(flow.cv, flow.dv, self.mesh, self.cfg)
