"""
Runge-Kutta stage coefficient tables.

Each stage k carries:
    ark[k]   - update weight:   W^(k) = W^(0) - ark[k] * CFL * dt/V * R^(k-1)
    betrk[k] - dissipation blending weight:
               D^(k) = betrk[k] * D(W^(k-1)) + (1 - betrk[k]) * D^(k-1)
    ldiss[k] - whether the dissipation is re-evaluated in stage k

Reference: Blazek, "Computational Fluid Dynamics: Principles and
Applications", Section 6.1.1 (hybrid multistage schemes).
"""

from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple

from ..exceptions import ConfigurationError

_TRUE_FLAGS = ('y', 'yes', 'true', '1', 'on')
_FALSE_FLAGS = ('n', 'no', 'false', '0', 'off')


def _as_flag(value) -> bool:
    """Interpret an ldiss entry: bool, 0/1 or a Y/N style string."""
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _TRUE_FLAGS:
            return True
        if key in _FALSE_FLAGS:
            return False
        raise ConfigurationError(f"invalid ldiss flag '{value}' (expected Y/N or 0/1)")
    try:
        return bool(int(value))
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid ldiss flag {value!r} (expected Y/N or 0/1)") from None


@dataclass(frozen=True)
class StageTable:
    """Read-only stage coefficients of a multistage scheme."""
    ark: Tuple[float, ...]
    betrk: Tuple[float, ...]
    ldiss: Tuple[bool, ...]

    def __post_init__(self):
        if not self.ark:
            raise ConfigurationError("stage table needs at least one stage")
        if not len(self.ark) == len(self.betrk) == len(self.ldiss):
            raise ConfigurationError(
                f"stage table length mismatch: ark={len(self.ark)}, "
                f"betrk={len(self.betrk)}, ldiss={len(self.ldiss)}"
            )
        for b in self.betrk:
            if not 0.0 <= b <= 1.0:
                raise ConfigurationError(f"betrk must lie in [0, 1], got {b}")

    @classmethod
    def from_lists(cls, ark: Sequence[float], betrk: Sequence[float],
                   ldiss: Sequence) -> 'StageTable':
        return cls(
            ark=tuple(float(a) for a in ark),
            betrk=tuple(float(b) for b in betrk),
            ldiss=tuple(_as_flag(l) for l in ldiss),
        )

    @property
    def nrk(self) -> int:
        return len(self.ark)


def single_stage() -> StageTable:
    """Explicit Euler: one stage, full weight, dissipation evaluated."""
    return StageTable(ark=(1.0,), betrk=(1.0,), ldiss=(True,))


def upwind_3stage(order: int = 2) -> StageTable:
    """Three-stage scheme optimised for upwind discretisations."""
    if order < 2:
        ark = (0.1481, 0.4000, 1.0)
    else:
        ark = (0.1918, 0.4929, 1.0)
    return StageTable(ark=ark, betrk=(1.0, 1.0, 1.0), ldiss=(True, True, True))


def upwind_5stage(order: int = 2) -> StageTable:
    """Five-stage scheme optimised for upwind discretisations."""
    if order < 2:
        ark = (0.0533, 0.1263, 0.2375, 0.4414, 1.0)
    else:
        ark = (0.0695, 0.1602, 0.2898, 0.5060, 1.0)
    return StageTable(ark=ark, betrk=(1.0,) * 5, ldiss=(True,) * 5)


def hybrid_5stage() -> StageTable:
    """
    Jameson's (5,3) hybrid scheme.

    Dissipation is evaluated in stages 1, 3 and 5 only and blended with
    the previous value in stages 3 and 5.
    """
    return StageTable(
        ark=(0.25, 0.1667, 0.375, 0.5, 1.0),
        betrk=(1.0, 0.0, 0.56, 0.0, 0.44),
        ldiss=(True, False, True, False, True),
    )


STAGE_PRESETS: Dict[str, Callable[[int], StageTable]] = {
    'single': lambda order: single_stage(),
    'upwind3': upwind_3stage,
    'upwind5': upwind_5stage,
    'hybrid5': lambda order: hybrid_5stage(),
}


def stage_preset(name: str, order: int = 2) -> StageTable:
    """Look up a named stage table."""
    try:
        factory = STAGE_PRESETS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown stage preset '{name}'. Available: {sorted(STAGE_PRESETS)}"
        ) from None
    return factory(order)
