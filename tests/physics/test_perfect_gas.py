"""
Tests for the perfect-gas dependent variables.
"""

import numpy as np
import pytest

from fvrk.constants import C_IDX, CP_IDX, GAMMA_IDX, KAPPA_IDX, MU_IDX, P_IDX, T_IDX
from fvrk.physics.perfect_gas import PerfectGas
from fvrk.solvers.flow_field import uniform_flow


class TestDependentVariables:

    def test_euler_state(self, small_cartesian_mesh):
        gas = PerfectGas(gamma=1.4, cp=1004.5)
        flow = uniform_flow(small_cartesian_mesh, rho=1.2, u=30.0, v=-5.0, p=1.0e5)

        gas.dependent_vars_all(flow)

        np.testing.assert_allclose(flow.dv[P_IDX], 1.0e5, rtol=1e-12)
        np.testing.assert_allclose(flow.dv[T_IDX], 1.0e5 / (1.2 * gas.rgas), rtol=1e-12)
        np.testing.assert_allclose(flow.dv[C_IDX], np.sqrt(1.4 * 1.0e5 / 1.2), rtol=1e-12)
        np.testing.assert_array_equal(flow.dv[GAMMA_IDX], 1.4)
        np.testing.assert_array_equal(flow.dv[CP_IDX], 1004.5)

    def test_transport_properties(self, small_cartesian_mesh):
        gas = PerfectGas()
        flow = uniform_flow(small_cartesian_mesh, rho=1.2, u=30.0, v=0.0, p=1.0e5, viscous=True)

        gas.dependent_vars_all(flow)

        mu = flow.dv[MU_IDX]
        np.testing.assert_allclose(mu, gas.viscosity(flow.dv[T_IDX]))
        np.testing.assert_allclose(flow.dv[KAPPA_IDX], gas.cp * mu / gas.prandtl)

    def test_sutherland_reference_point(self):
        gas = PerfectGas()
        assert gas.viscosity(np.array([gas.reftemp]))[0] == pytest.approx(gas.refvisc)
        assert gas.viscosity(np.array([400.0]))[0] > gas.refvisc

    def test_gas_constant(self):
        assert PerfectGas(gamma=1.4, cp=1004.5).rgas == pytest.approx(287.0)
