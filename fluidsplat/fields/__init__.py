"""Field management for fluidsplat (the Grid Buffer Store).

Main classes:
- FieldSpec: Declarative field specification
- FieldRole: Field categorization (STATE, DERIVED, SCRATCH)
- FieldContainer: Manages grid ndarray lifecycle and double-buffering

Convenience wrappers:
- SolverFields: Access to velocity, pressure, divergence, curl and dye

Factory functions:
- create_solver_specs, create_solver_container
"""

from fluidsplat.fields.base import FieldContainer, FieldRole, FieldSpec
from fluidsplat.fields.solver import (
    CURL,
    DIVERGENCE,
    DYE,
    PRESSURE,
    VELOCITY,
    SolverFields,
    create_solver_container,
    create_solver_specs,
)

__all__ = [
    "FieldContainer",
    "FieldRole",
    "FieldSpec",
    "SolverFields",
    "create_solver_specs",
    "create_solver_container",
    "VELOCITY",
    "PRESSURE",
    "DIVERGENCE",
    "CURL",
    "DYE",
]
