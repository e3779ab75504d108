"""
Pytest tests for particle drag and heat transfer closures.

Tests verify:
1. Sutherland viscosity and Reynolds number
2. Loth drag: Stokes limit, continuity and positivity across regimes
3. Drake heat transfer: conduction limit and the particle cutoff
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from rocketphase.src import (
    DrakeInviscidHeatTransfer, LothDrag, PhasePairKey, default_drag_registry,
    default_heat_transfer_registry, reynolds_number, sutherland_viscosity
)
from rocketphase.tests.slab_motor import GAS, PARTICLES, build_slab_motor

# Sutherland coefficients of air
AS_AIR = 1.458e-6
TS_AIR = 110.4


@pytest.fixture
def loth():
    return LothDrag(R=287.0, gamma=1.4)


@pytest.fixture
def drake():
    return DrakeInviscidHeatTransfer(As=AS_AIR, Ts=TS_AIR)


class TestTransportProperties:

    def test_sutherland_air(self):
        """Air viscosity at 300 K is about 1.85e-5 Pa.s."""
        mu = sutherland_viscosity(np.array([300.0]), AS_AIR, TS_AIR)
        assert np.allclose(mu, 1.846e-5, rtol=1e-2), f"mu = {mu}"

    def test_reynolds_vector_velocity(self):
        U = np.array([[3.0, 4.0, 0.0]])
        Re = reynolds_number(np.array([1.0]), U, 0.1, np.array([1e-3]))
        assert np.allclose(Re, 500.0)


class TestLothDrag:

    def test_stokes_limit(self, loth):
        """Continuum, incompressible, low Re: Cd Re -> 24 (1 + 0.15 Re^0.687)."""
        Re = np.array([1.0])
        Ma = np.array([1e-5])
        # Knudsen term decays as Kn -> 0, i.e. Ma / Re -> 0
        CdRe = loth.CdRe(Re, Ma)
        assert np.allclose(CdRe, 24 * (1 + 0.15), rtol=1e-3), f"CdRe = {CdRe}"

    def test_high_re_incompressible(self, loth):
        """Above Re = 45 the compressible branch reduces to the standard curve."""
        Re = np.array([1000.0])
        Ma = np.array([0.1])
        CdRe = loth.CdRe(Re, Ma)
        Cd = CdRe / Re

        assert 0.3 < Cd[0] < 0.7, f"Cd = {Cd[0]} outside the Newton regime range"

    @pytest.mark.parametrize('Ma', [0.05, 0.5, 0.9, 1.2, 2.0, 4.0])
    def test_positive_and_finite(self, loth, Ma):
        Re = np.logspace(-4, 5, 50)
        CdRe = loth.CdRe(Re, np.full_like(Re, Ma))

        assert np.all(np.isfinite(CdRe)), f"Non-finite CdRe at Ma = {Ma}"
        assert np.all(CdRe > 0.0), f"Non-positive CdRe at Ma = {Ma}"

    def test_vanishing_re(self, loth):
        """Below the residual Reynolds number CdRe follows the rarefied formula, not a floor."""
        Re = np.array([0.0, 1e-5, 1e-4])
        CdRe = loth.CdRe(Re, np.full_like(Re, 0.1))

        # Knudsen limit 24*fKn/(1 + Ma^4) with Kn = sqrt(pi)*S/max(Re, SMALL)
        expected = np.array([4.883e-14, 4.893e-4, 4.894e-3])
        assert np.all(np.isfinite(CdRe))
        assert np.allclose(CdRe, expected, rtol=2e-3, atol=0), f"CdRe = {CdRe}"
        assert np.all(np.diff(CdRe) > 0.0), "CdRe must grow with Re near zero"
        assert CdRe[0] < 1e-12, "CdRe at zero slip is floored"

    def test_exchange_coefficient_scales_with_fraction(self, loth):
        kwargs = dict(magUr=np.array([10.0]), rho_c=np.array([5.0]), mu_c=np.array([8e-5]),
                      T_c=np.array([3000.0]), d=10e-6)
        K1 = loth.K(alpha_d=np.array([0.01]), **kwargs)
        K2 = loth.K(alpha_d=np.array([0.02]), **kwargs)

        assert np.allclose(K2, 2 * K1)
        assert np.all(K1 > 0.0)

    def test_pair_coefficient(self):
        system = build_slab_motor()
        pair = system.pair(PhasePairKey(PARTICLES, GAS))
        gas = pair.phase2
        drag = LothDrag(R=gas.thermo.R, gamma=gas.thermo.gamma)

        K = drag.K_pair(pair, 10e-6, sutherland_viscosity(gas.T, AS_AIR, TS_AIR))
        # No particles yet
        assert np.all(K == 0.0)


class TestDrakeHeatTransfer:

    def test_conduction_limit(self, drake):
        """At zero slip Nu = 2."""
        T = np.array([300.0])
        p = np.array([101325.0])
        rho = p / (287.0 * T)
        cp, cv = 1004.5, 717.5
        d = 50e-6
        alpha_d = np.array([0.01])

        K = drake.K(np.array([0.0]), rho, T, p, cp, cv, alpha_d, d)

        mu = sutherland_viscosity(T, AS_AIR, TS_AIR)
        kappa = mu * cv * (1.32 + 1.77 * 287.0 / cv)
        assert np.allclose(K, 6 * alpha_d * kappa * 2.0 / d**2)

    def test_cutoff(self, drake):
        T = np.array([300.0, 300.0])
        p = np.array([101325.0, 101325.0])
        rho = p / (287.0 * T)
        alpha_d = np.array([1e-8, 1e-3])

        K = drake.K(np.array([1.0, 1.0]), rho, T, p, 1004.5, 717.5, alpha_d, 50e-6)

        assert K[0] == 0.0, "Heat exchanged below the particle cutoff"
        assert K[1] > 0.0

    def test_increases_with_slip(self, drake):
        T = np.full(2, 300.0)
        p = np.full(2, 101325.0)
        rho = p / (287.0 * T)

        K = drake.K(np.array([0.1, 10.0]), rho, T, p, 1004.5, 717.5, np.full(2, 0.01), 50e-6)
        assert K[1] > K[0]


class TestClosureRegistries:

    def test_drag(self):
        registry = default_drag_registry()
        drag = registry.create('Loth', R=287.0, gamma=1.4)
        assert isinstance(drag, LothDrag)

    def test_heat_transfer(self):
        registry = default_heat_transfer_registry()
        model = registry.create('DrakeInviscid', As=AS_AIR, Ts=TS_AIR)
        assert isinstance(model, DrakeInviscidHeatTransfer)
