"""
Exceptions raised by the pseudo-time stepping core.

All of them are fatal for the current step: the caller must discard the
flow field after a SolverError (other than a sizing error raised before
the stage loop, which leaves the conservative state untouched).
"""


class SolverError(RuntimeError):
    """Base class for fatal solver errors."""
    pass


class InsufficientWorkspaceError(SolverError):
    """Raised when a scratch buffer is smaller than required."""

    def __init__(self, name: str, required: int, available: int):
        self.name = name
        self.required = required
        self.available = available
        super().__init__(
            f"insufficient {name} work space: need {required} elements, got {available}"
        )


class WorkspaceBusyError(SolverError):
    """Raised when scratch views are requested while a previous pair is still live."""
    pass


class ConfigurationError(SolverError, ValueError):
    """Raised for inconsistent solver configuration."""
    pass
