"""
Kernel pass runner.

Executes one named pass over every cell of a destination field after
checking the call against the pass's declared sources and parameters.
Each launch completes before the next one starts, so a pass never observes
a partially written destination.
"""

from typing import Any

from fluidsplat.core.geometry import GridGeometry
from fluidsplat.kernels.protocol import PassId
from fluidsplat.kernels.registry import KernelRegistry, get_registry


class PassRunner:
    """Validate and launch kernel passes at one simulation resolution.

    Attributes:
        geometry: Resolution every destination must match
        pass_count: Number of passes launched so far
    """

    def __init__(self, geometry: GridGeometry, registry: KernelRegistry | None = None):
        self.geometry = geometry
        self._registry = registry if registry is not None else get_registry()
        self._pass_count = 0

    @property
    def registry(self) -> KernelRegistry:
        return self._registry

    @property
    def pass_count(self) -> int:
        return self._pass_count

    def run_pass(
        self,
        pass_id: PassId | str,
        sources: dict[str, Any],
        destination: Any,
        **params: Any,
    ) -> None:
        """Run one pass: destination[i, j] = kernel(sources, params) at every cell.

        Args:
            pass_id: Registered pass name
            sources: Mapping of source name to field, matching the pass spec
            destination: Field written by the pass
            **params: Constant scalar parameters, matching the pass spec

        Raises:
            KeyError: If the pass is not registered
            ValueError: If sources or parameters do not match the pass spec,
                the destination has the wrong shape, or the destination is
                also a source
        """
        spec = self._registry.get(pass_id)
        name = spec.pass_id.value

        missing = [s for s in spec.sources if s not in sources]
        unexpected = [s for s in sources if s not in spec.sources]
        if missing or unexpected:
            raise ValueError(
                f"Pass '{name}' expects sources {list(spec.sources)}; "
                f"missing {missing}, unexpected {unexpected}"
            )

        shape = self.geometry.shape
        if tuple(destination.shape) != shape:
            raise ValueError(
                f"Pass '{name}' destination shape {tuple(destination.shape)} "
                f"does not match grid {shape}"
            )
        for source_name, field in sources.items():
            if field is destination:
                raise ValueError(
                    f"Pass '{name}' destination is also bound as source '{source_name}'"
                )
            if tuple(field.shape) != shape:
                raise ValueError(
                    f"Pass '{name}' source '{source_name}' shape {tuple(field.shape)} "
                    f"does not match grid {shape}"
                )

        missing_params = [p for p in spec.params if p not in params]
        unexpected_params = [p for p in params if p not in spec.params]
        if missing_params or unexpected_params:
            raise ValueError(
                f"Pass '{name}' expects parameters {list(spec.params)}; "
                f"missing {missing_params}, unexpected {unexpected_params}"
            )

        args = [sources[s] for s in spec.sources]
        args.append(destination)
        args.extend(float(params[p]) for p in spec.params)
        spec.kernel(*args)
        self._pass_count += 1
