"""
Tests for the Runge-Kutta stage tables.
"""

import pytest

from fvrk.exceptions import ConfigurationError
from fvrk.solvers.stages import (
    STAGE_PRESETS, StageTable, hybrid_5stage, single_stage, stage_preset,
    upwind_3stage, upwind_5stage,
)


class TestStageTable:

    def test_from_lists_converts_types(self):
        table = StageTable.from_lists([0.5, 1], [1, 0.5], [1, 0])
        assert table.ark == (0.5, 1.0)
        assert table.betrk == (1.0, 0.5)
        assert table.ldiss == (True, False)
        assert table.nrk == 2

    def test_is_immutable(self):
        table = single_stage()
        with pytest.raises(AttributeError):
            table.ark = (0.5,)

    def test_character_flags(self):
        table = StageTable.from_lists([0.5, 1.0, 1.0], [1.0] * 3, ["Y", "n", True])
        assert table.ldiss == (True, False, True)

    @pytest.mark.parametrize("flag", ["X", "maybe", None])
    def test_invalid_flag(self, flag):
        with pytest.raises(ConfigurationError, match="ldiss flag"):
            StageTable.from_lists([1.0], [1.0], [flag])

    def test_length_mismatch(self):
        with pytest.raises(ConfigurationError, match="length mismatch"):
            StageTable.from_lists([0.5, 1.0], [1.0], [1, 1])

    def test_empty_table(self):
        with pytest.raises(ConfigurationError):
            StageTable(ark=(), betrk=(), ldiss=())

    @pytest.mark.parametrize("beta", [-0.1, 1.5])
    def test_betrk_out_of_range(self, beta):
        with pytest.raises(ConfigurationError, match="betrk"):
            StageTable.from_lists([1.0], [beta], [1])


class TestPresets:

    @pytest.mark.parametrize("name", sorted(STAGE_PRESETS))
    def test_last_stage_has_unit_weight(self, name):
        table = stage_preset(name)
        assert table.ark[-1] == 1.0
        assert table.ldiss[0]

    def test_upwind_coefficients_depend_on_order(self):
        assert upwind_3stage(1).ark == (0.1481, 0.4, 1.0)
        assert upwind_3stage(2).ark == (0.1918, 0.4929, 1.0)
        assert upwind_5stage(1).nrk == 5
        assert upwind_5stage(1).ark != upwind_5stage(2).ark

    def test_hybrid_scheme(self):
        table = hybrid_5stage()
        assert table.nrk == 5
        assert table.ldiss == (True, False, True, False, True)
        # Dissipation weights of the evaluated stages
        assert table.betrk[0] == 1.0
        assert table.betrk[2] + table.betrk[4] == pytest.approx(1.0)

    def test_unknown_preset(self):
        with pytest.raises(ConfigurationError, match="Unknown stage preset"):
            stage_preset("rk4")
