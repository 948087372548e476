"""
Low-Mach preconditioning of the residual.

For every active node the raw flux-balance residual R is replaced by

    R <- P * Gamma^-1 * R

where P = dW/dWp is the primitive-to-conservative Jacobian and Gamma its
preconditioned counterpart. Both are built by the gas model from the
current conservative (cv) and dependent (dv) variables; this module only
assembles their inputs and applies the batched matrix-vector product.

Must run on the raw residual, before boundary corrections and the
pseudo-time scaling.
"""

import numpy as np
import numpy.typing as npt

from ..constants import P_IDX, T_IDX, C_IDX, GAMMA_IDX, CP_IDX

NDArrayFloat = npt.NDArray[np.floating]


def compute_preconditioning_matrices(flow, gas) -> NDArrayFloat:
    """
    Build P * Gamma^-1 for the active nodes.

    Parameters
    ----------
    flow : FlowField
        cv and dv must be consistent (dependent variables up to date).
    gas : GasModel
        Provides theta and the Jacobians.

    Returns
    -------
    dmat : ndarray, shape (nndint, 4, 4)
    """
    n = flow.nndint
    cv = flow.cv[:, :n]
    dv = flow.dv[:, :n]

    rho = cv[0]
    p = dv[P_IDX]
    T = dv[T_IDX]

    rhop = rho / p
    rhoT = -rho / T
    hT = dv[CP_IDX]
    hp = np.zeros(n)
    u = cv[1] / rho
    v = cv[2] / rho
    q2 = u * u + v * v
    H = (cv[3] + p) / rho
    theta = gas.theta(dv[GAMMA_IDX], dv[C_IDX], q2)

    wvec = cv
    wpvec = np.stack([p, u, v, T])

    gmat1 = gas.cons_to_prim(wvec, wpvec, H, q2, theta, rhoT, hp, hT)
    pmat = gas.prim_to_cons(wvec, wpvec, H, rhop, rhoT, hp, hT)
    return gas.matrix_times_inverse(wpvec, q2, pmat, gmat1)


def apply_preconditioning(flow, gas) -> None:
    """Replace flow.rhs[:, i] by dmat_i @ flow.rhs[:, i] in place."""
    dmat = compute_preconditioning_matrices(flow, gas)
    # Batched matrix-vector: dmat[i] @ rhs[:, i] for each node
    flow.rhs[:] = np.einsum('nkl,ln->kn', dmat, flow.rhs)
