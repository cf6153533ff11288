"""Exception taxonomy for the solver.

- UnsupportedPlatform: capability failure at construction (fatal, not retried)
- ContextLost: the execution context was invalidated by the host; the solver
  instance is unusable and must be rebuilt

Parameter validation errors live in fluidsplat.params.schema.ValidationError.
"""


class FluidSplatError(Exception):
    """Base class for solver errors."""


class UnsupportedPlatform(FluidSplatError):
    """Required float grid-processor capability is missing.

    Raised at construction when float field storage cannot be allocated or
    a solver kernel fails to compile. The message carries the underlying
    error text.
    """


class ContextLost(FluidSplatError):
    """The solver's execution context was invalidated.

    There is no self-recovery: discard the solver, construct a fresh one and
    reseed the dye field.
    """
