"""
Pass definitions for the kernel pass runner.

A pass is one data-parallel kernel over every cell of a destination field.
Each PassSpec records the kernel and the order in which the runner binds
its arguments:

    kernel(*sources, destination, *params)

The runner validates a call against the spec before launching anything.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class PassId(str, Enum):
    """Named passes of the solver pipeline plus injection."""

    CURL = "curl"
    VORTICITY = "vorticity"
    ADVECT = "advect"
    DIVERGENCE = "divergence"
    PRESSURE = "pressure"
    GRADIENT = "gradient"
    SPLAT = "splat"


@dataclass(frozen=True)
class PassSpec:
    """Immutable description of one kernel pass.

    Attributes:
        pass_id: Registry key
        kernel: Taichi kernel, or host function launching one, taking
            (*sources, destination, *params)
        sources: Ordered source field names
        params: Ordered constant parameter names
        description: Human-readable description
    """

    pass_id: PassId
    kernel: Callable[..., Any]
    sources: tuple[str, ...]
    params: tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self):
        """Validate pass specification."""
        if not self.sources:
            raise ValueError(f"Pass '{self.pass_id.value}' must read at least one source")
        if len(set(self.sources)) != len(self.sources):
            raise ValueError(f"Pass '{self.pass_id.value}' has duplicate source names")
        if len(set(self.params)) != len(self.params):
            raise ValueError(f"Pass '{self.pass_id.value}' has duplicate parameter names")
