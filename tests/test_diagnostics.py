"""Tests for host-side diagnostics."""

import numpy as np
import pytest

from fluidsplat.diagnostics import (
    cell_value,
    curl_field,
    divergence_field,
    divergence_residual,
    field_checksum,
    kinetic_energy,
    max_divergence,
    sample_at,
    total_dye,
)


class TestStencils:
    """numpy stencils against the solver passes."""

    def test_divergence_matches_pass(self, solver, gaussian_bumps):
        """divergence_field reproduces the divergence pass."""
        velocity = gaussian_bumps(64, 64, np.random.default_rng(1))
        solver.fields.velocity.from_numpy(velocity)
        solver.compute_divergence()
        np.testing.assert_allclose(
            solver.fields.divergence.to_numpy(), divergence_field(velocity), atol=1e-6
        )

    def test_curl_matches_pass(self, solver, gaussian_bumps):
        """curl_field reproduces the curl pass."""
        velocity = gaussian_bumps(64, 64, np.random.default_rng(2))
        solver.fields.velocity.from_numpy(velocity)
        solver.compute_curl()
        np.testing.assert_allclose(
            solver.fields.curl.to_numpy(), curl_field(velocity), atol=1e-6
        )

    def test_linear_field(self):
        """v = (x, 0) has unit divergence inside, half at the walls."""
        w, h = 8, 6
        velocity = np.zeros((w, h, 2))
        velocity[:, :, 0] = np.arange(w).reshape(-1, 1)
        div = divergence_field(velocity)
        np.testing.assert_allclose(div[1:-1, :], 1.0)
        np.testing.assert_allclose(div[0, :], 0.5)
        np.testing.assert_allclose(div[-1, :], 0.5)
        np.testing.assert_allclose(curl_field(velocity), 0.0)

    def test_rotation(self):
        """v = (-y, x) has curl 2 inside and no divergence."""
        n = 8
        i = np.arange(n, dtype=np.float64).reshape(-1, 1)
        j = np.arange(n, dtype=np.float64).reshape(1, -1)
        velocity = np.zeros((n, n, 2))
        velocity[:, :, 0] = -j
        velocity[:, :, 1] = i
        np.testing.assert_allclose(curl_field(velocity)[1:-1, 1:-1], 2.0)
        np.testing.assert_allclose(divergence_field(velocity), 0.0)


class TestSolverMetrics:
    """Tests for metrics read from a live solver."""

    def test_residual_of_zero_state(self, solver):
        """A fresh solver has no divergence."""
        assert divergence_residual(solver) == 0.0
        assert max_divergence(solver) == 0.0

    def test_kinetic_energy(self, solver_factory):
        """Uniform unit flow on 16x16 has energy 128."""
        solver = solver_factory(16, 16)
        velocity = np.zeros((16, 16, 2), dtype=np.float32)
        velocity[:, :, 0] = 1.0
        solver.fields.velocity.from_numpy(velocity)
        assert kinetic_energy(solver) == pytest.approx(128.0)

    def test_total_dye(self, solver_factory):
        """total_dye sums every channel."""
        solver = solver_factory(32, 32)
        solver.fields.dye.from_numpy(np.ones((32, 32, 3), dtype=np.float32))
        assert total_dye(solver) == pytest.approx(3072.0)

    def test_checksum(self, solver):
        """Checksums change with contents only."""
        before = field_checksum(solver.fields.dye)
        assert field_checksum(solver.fields.dye_new) == before
        solver.splat((0.5, 0.5), (1.0, 0.0, 0.0), 0.05)
        assert field_checksum(solver.fields.dye) != before


class TestPointLookup:
    """Tests for sample_at and cell_value on a live solver."""

    def test_cell_value_reads_containing_cell(self, solver):
        """cell_value indexes the cell that contains the point."""
        dye = np.zeros((64, 64, 3), dtype=np.float32)
        dye[16, 48] = [1.0, 0.5, 0.25]
        solver.fields.dye.from_numpy(dye)
        np.testing.assert_array_equal(cell_value(solver, "dye", 16.9 / 64, 48.1 / 64), dye[16, 48])
        np.testing.assert_array_equal(cell_value(solver, "dye", 5.0, -5.0), dye[63, 0])

    def test_sample_at_scalar_solver_field(self, solver):
        """sample_at returns a float for scalar grids."""
        solver.fields.pressure.fill(1.5)
        value = sample_at(solver.fields.pressure, 0.3, 0.7)
        assert isinstance(value, float)
        assert value == pytest.approx(1.5)
