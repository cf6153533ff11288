"""Tests for the kernel registry and pass runner contract."""

import numpy as np
import pytest
import taichi as ti

from fluidsplat.core.dtypes import DTYPE, GRID
from fluidsplat.core.geometry import GridGeometry
from fluidsplat.kernels import KernelRegistry, PassId, PassRunner, PassSpec, get_registry


@ti.kernel
def fill_seven(velocity: GRID, dst: GRID):
    for i, j in dst:
        dst[i, j] = 7.0


@pytest.fixture
def fields():
    velocity = ti.Vector.ndarray(2, DTYPE, shape=(16, 8))
    div = ti.ndarray(DTYPE, shape=(16, 8))
    wrong = ti.ndarray(DTYPE, shape=(8, 8))
    return velocity, div, wrong


class TestKernelRegistry:
    """Tests for KernelRegistry."""

    def test_default_registry_has_all_passes(self):
        """Every pipeline pass plus splat is registered."""
        registry = get_registry()
        assert set(registry.available()) == set(PassId)

    def test_lookup_by_string(self):
        """String values resolve to the same spec."""
        registry = KernelRegistry()
        assert registry.get("advect") is registry.get(PassId.ADVECT)
        assert "splat" in registry
        assert "smoke" not in registry

    def test_unknown_pass(self):
        """Unknown ids raise KeyError listing what is available."""
        with pytest.raises(KeyError, match="Available"):
            KernelRegistry().get("smoke")

    def test_empty_registry(self):
        """An explicit empty list gives an empty registry."""
        registry = KernelRegistry(passes=[])
        assert registry.available() == []
        with pytest.raises(KeyError):
            registry.get(PassId.CURL)

    def test_spec_order(self):
        """Specs declare argument binding order."""
        spec = get_registry().get(PassId.ADVECT)
        assert spec.sources == ("source", "velocity")
        assert spec.params == ("dt", "dissipation")

    def test_spec_validation(self):
        """Specs need sources and unique names."""
        with pytest.raises(ValueError, match="at least one source"):
            PassSpec(PassId.CURL, fill_seven, sources=())
        with pytest.raises(ValueError, match="duplicate source"):
            PassSpec(PassId.CURL, fill_seven, sources=("velocity", "velocity"))


class TestPassRunner:
    """Tests for PassRunner.run_pass."""

    def test_runs_every_cell(self, fields):
        """The pass writes every destination cell."""
        velocity, div, _ = fields
        velocity.fill(1.0)
        div.fill(5.0)
        runner = PassRunner(GridGeometry(16, 8))
        runner.run_pass(PassId.DIVERGENCE, {"velocity": velocity}, div)
        np.testing.assert_array_equal(div.to_numpy(), 0.0)
        assert runner.pass_count == 1

    def test_params_bound_by_name(self, fields):
        """Keyword parameters reach the kernel in spec order."""
        velocity, _, _ = fields
        target = ti.Vector.ndarray(2, DTYPE, shape=(16, 8))
        runner = PassRunner(GridGeometry(16, 8))
        runner.run_pass(
            PassId.SPLAT,
            {"target": target},
            velocity,
            radius=0.1,
            v2=0.0,
            v1=-2.0,
            v0=1.0,
            py=0.5,
            px=0.5,
        )
        result = velocity.to_numpy()
        assert result[:, :, 0].max() > 0.0
        assert result[:, :, 1].min() < 0.0

    def test_destination_shape_mismatch(self, fields):
        """Destination must match the runner geometry."""
        velocity, _, wrong = fields
        runner = PassRunner(GridGeometry(16, 8))
        with pytest.raises(ValueError, match="shape"):
            runner.run_pass(PassId.DIVERGENCE, {"velocity": velocity}, wrong)
        assert runner.pass_count == 0

    def test_source_shape_mismatch(self, fields):
        """Sources must match the runner geometry."""
        _, div, wrong = fields
        runner = PassRunner(GridGeometry(16, 8))
        with pytest.raises(ValueError, match="source 'divergence'"):
            runner.run_pass(
                PassId.PRESSURE,
                {"pressure": div, "divergence": wrong},
                ti.ndarray(DTYPE, shape=(16, 8)),
            )

    def test_aliasing_rejected(self, fields):
        """A pass may not read and write the same grid."""
        _, div, _ = fields
        runner = PassRunner(GridGeometry(16, 8))
        other = ti.ndarray(DTYPE, shape=(16, 8))
        with pytest.raises(ValueError, match="also bound"):
            runner.run_pass(PassId.PRESSURE, {"pressure": div, "divergence": other}, div)

    def test_missing_source(self, fields):
        """All declared sources must be supplied."""
        velocity, _, _ = fields
        runner = PassRunner(GridGeometry(16, 8))
        dst = ti.Vector.ndarray(2, DTYPE, shape=(16, 8))
        with pytest.raises(ValueError, match="missing"):
            runner.run_pass(PassId.ADVECT, {"velocity": velocity}, dst, dt=0.1, dissipation=1.0)

    def test_unexpected_source(self, fields):
        """Undeclared sources are rejected."""
        velocity, div, _ = fields
        runner = PassRunner(GridGeometry(16, 8))
        with pytest.raises(ValueError, match="unexpected"):
            runner.run_pass(
                PassId.CURL,
                {"velocity": velocity, "extra": velocity},
                div,
            )

    def test_missing_param(self, fields):
        """All declared parameters must be supplied."""
        velocity, _, _ = fields
        runner = PassRunner(GridGeometry(16, 8))
        dst = ti.Vector.ndarray(2, DTYPE, shape=(16, 8))
        with pytest.raises(ValueError, match="dissipation"):
            runner.run_pass(
                PassId.ADVECT,
                {"source": velocity, "velocity": velocity},
                dst,
                dt=0.1,
            )

    def test_unknown_pass(self, fields):
        """Unregistered pass ids raise KeyError."""
        velocity, div, _ = fields
        runner = PassRunner(GridGeometry(16, 8))
        with pytest.raises(KeyError):
            runner.run_pass("smoke", {"velocity": velocity}, div)

    def test_custom_registry(self, fields):
        """A replacement kernel registered under an existing id is used."""
        velocity, div, _ = fields
        registry = KernelRegistry()
        registry.register(PassSpec(PassId.DIVERGENCE, fill_seven, sources=("velocity",)))
        runner = PassRunner(GridGeometry(16, 8), registry)
        runner.run_pass(PassId.DIVERGENCE, {"velocity": velocity}, div)
        np.testing.assert_array_equal(div.to_numpy(), 7.0)
