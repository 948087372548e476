"""
Calorically perfect gas: dependent variables and preconditioning matrices.

Primitive variables Wp = [p, u, v, T], conservative W = [rho, rho*u, rho*v, rho*E].

Low-Mach preconditioning (Weiss & Smith 1995) replaces rho_p = drho/dp in
the first column of P = dW/dWp by

    theta = 1/Ur^2 - rho_T / (rho * h_T),   Ur^2 = min(c^2, max(q^2, K * q_inf^2))

giving the preconditioned Jacobian Gamma. The pseudo-time residual is then
transformed by P * Gamma^-1.

References:
    Weiss, Smith (1995). AIAA J. 33(11), 2050-2057.
    Blazek, "Computational Fluid Dynamics", Section 9.5.
"""

import numpy as np
import numpy.typing as npt
from dataclasses import dataclass

from ..constants import (
    P_IDX, T_IDX, C_IDX, GAMMA_IDX, CP_IDX, MU_IDX, KAPPA_IDX, NDV_VISCOUS,
)

NDArrayFloat = npt.NDArray[np.floating]

SUTHERLAND_S = 110.4


@dataclass(frozen=True)
class PerfectGas:
    """
    Perfect gas with Sutherland viscosity.

    Attributes
    ----------
    gamma : float
        Ratio of specific heats.
    cp : float
        Specific heat at constant pressure.
    prandtl : float
        Laminar Prandtl number (conductivity = cp * mu / Pr).
    refvisc : float
        Viscosity at the reference temperature.
    reftemp : float
        Reference temperature of Sutherland's law.
    precoeff : float
        Preconditioning cut-off K (Ur^2 >= K * q_inf^2).
    q2_inf : float
        Squared freestream velocity magnitude.
    """
    gamma: float = 1.4
    cp: float = 1004.5
    prandtl: float = 0.72
    refvisc: float = 1.716e-5
    reftemp: float = 273.15
    precoeff: float = 1.0
    q2_inf: float = 1.0

    @property
    def rgas(self) -> float:
        return self.cp * (self.gamma - 1.0) / self.gamma

    def viscosity(self, T: NDArrayFloat) -> NDArrayFloat:
        """Sutherland's law."""
        return (self.refvisc * (T / self.reftemp) ** 1.5
                * (self.reftemp + SUTHERLAND_S) / (T + SUTHERLAND_S))

    def dependent_vars_all(self, flow) -> None:
        """Recompute p, T, c, gamma, cp (and mu, kappa) at all nodes from cv."""
        cv = flow.cv
        dv = flow.dv
        rrho = 1.0 / cv[0]
        p = (self.gamma - 1.0) * (cv[3] - 0.5 * (cv[1] ** 2 + cv[2] ** 2) * rrho)

        dv[P_IDX] = p
        dv[T_IDX] = p * rrho / self.rgas
        dv[C_IDX] = np.sqrt(self.gamma * p * rrho)
        dv[GAMMA_IDX] = self.gamma
        dv[CP_IDX] = self.cp
        if dv.shape[0] >= NDV_VISCOUS:
            dv[MU_IDX] = self.viscosity(dv[T_IDX])
            dv[KAPPA_IDX] = self.cp * dv[MU_IDX] / self.prandtl

    def theta(self, gamma: NDArrayFloat, c: NDArrayFloat, q2: NDArrayFloat) -> NDArrayFloat:
        """Preconditioning parameter theta for a perfect gas."""
        c2 = c * c
        ur2 = np.minimum(c2, np.maximum(q2, self.precoeff * self.q2_inf))
        return 1.0 / ur2 + (gamma - 1.0) / c2

    def prim_to_cons(self, wvec: NDArrayFloat, wpvec: NDArrayFloat,
                     H: NDArrayFloat, rhop: NDArrayFloat,
                     rhoT: NDArrayFloat, hp: NDArrayFloat, hT: NDArrayFloat) -> NDArrayFloat:
        """Jacobian dW/dWp, shape (n, 4, 4)."""
        return _jacobian(wvec[0], wpvec[1], wpvec[2], H, rhop, rhoT, hp, hT)

    def cons_to_prim(self, wvec: NDArrayFloat, wpvec: NDArrayFloat,
                     H: NDArrayFloat, q2: NDArrayFloat, theta: NDArrayFloat,
                     rhoT: NDArrayFloat, hp: NDArrayFloat, hT: NDArrayFloat) -> NDArrayFloat:
        """
        Inverse of the preconditioned Jacobian Gamma, shape (n, 4, 4).

        Closed form obtained by eliminating du, dv from the momentum rows;
        the remaining 2x2 system in (dp, dT) has determinant
        theta * rho * h_T + delta * rho_T with delta = 1 - rho * h_p.
        """
        rho = wvec[0]
        u = wpvec[1]
        v = wpvec[2]
        delta = 1.0 - rho * hp
        rdet = 1.0 / (theta * rho * hT + delta * rhoT)
        rrho = 1.0 / rho
        qH = q2 - H

        gmat1 = np.zeros((rho.shape[0], 4, 4))
        gmat1[:, 0, 0] = (rho * hT - rhoT * qH) * rdet
        gmat1[:, 0, 1] = rhoT * u * rdet
        gmat1[:, 0, 2] = rhoT * v * rdet
        gmat1[:, 0, 3] = -rhoT * rdet

        gmat1[:, 1, 0] = -u * rrho
        gmat1[:, 1, 1] = rrho
        gmat1[:, 2, 0] = -v * rrho
        gmat1[:, 2, 2] = rrho

        gmat1[:, 3, 0] = (delta + theta * qH) * rdet
        gmat1[:, 3, 1] = -theta * u * rdet
        gmat1[:, 3, 2] = -theta * v * rdet
        gmat1[:, 3, 3] = theta * rdet
        return gmat1

    def matrix_times_inverse(self, wpvec: NDArrayFloat, q2: NDArrayFloat,
                             pmat: NDArrayFloat, gmat1: NDArrayFloat) -> NDArrayFloat:
        """P * Gamma^-1 for every node."""
        return np.matmul(pmat, gmat1)

    def preconditioned_jacobian(self, wvec: NDArrayFloat, wpvec: NDArrayFloat,
                                H: NDArrayFloat, theta: NDArrayFloat,
                                rhoT: NDArrayFloat, hp: NDArrayFloat,
                                hT: NDArrayFloat) -> NDArrayFloat:
        """Gamma itself (P with rho_p replaced by theta)."""
        return _jacobian(wvec[0], wpvec[1], wpvec[2], H, theta, rhoT, hp, hT)


def _jacobian(rho, u, v, H, rhop, rhoT, hp, hT) -> NDArrayFloat:
    mat = np.zeros((rho.shape[0], 4, 4))
    mat[:, 0, 0] = rhop
    mat[:, 0, 3] = rhoT

    mat[:, 1, 0] = rhop * u
    mat[:, 1, 1] = rho
    mat[:, 1, 3] = rhoT * u

    mat[:, 2, 0] = rhop * v
    mat[:, 2, 2] = rho
    mat[:, 2, 3] = rhoT * v

    mat[:, 3, 0] = rhop * H - (1.0 - rho * hp)
    mat[:, 3, 1] = rho * u
    mat[:, 3, 2] = rho * v
    mat[:, 3, 3] = rhoT * H + rho * hT
    return mat
