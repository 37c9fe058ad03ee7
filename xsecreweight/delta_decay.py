"""Pion angular distribution in Delta(1232) -> N pi decays."""

from __future__ import annotations

from typing import Optional, Tuple

from .branching import DELTA_0_1232, DELTA_M_1232, DELTA_P_1232, DELTA_PP_1232
from .model import (
    PDG_NEUTRON,
    PDG_PI_MINUS,
    PDG_PI_PLUS,
    PDG_PI_ZERO,
    PDG_PROTON,
    Event,
)

# Nucleon-pion daughter pairs accepted for each Delta(1232) charge state.
_NPI_CHANNELS = {
    DELTA_PP_1232: frozenset({(PDG_PROTON, PDG_PI_PLUS)}),
    DELTA_P_1232: frozenset({(PDG_PROTON, PDG_PI_ZERO), (PDG_NEUTRON, PDG_PI_PLUS)}),
    DELTA_0_1232: frozenset({(PDG_PROTON, PDG_PI_MINUS), (PDG_NEUTRON, PDG_PI_ZERO)}),
    DELTA_M_1232: frozenset({(PDG_NEUTRON, PDG_PI_MINUS)}),
}

# Populations of the m=3/2 and m=1/2 sub-states.
_P32_ISO, _P12_ISO = 0.50, 0.50
_P32_RS, _P12_RS = 0.75, 0.25


def find_delta_pion(event: Event) -> Optional[Tuple[int, int]]:
    """Locate the first Delta(1232) decaying to exactly a nucleon and a pion.

    Returns ``(resonance_index, pion_index)`` or ``None``.
    """
    particles = event.particles
    for index, particle in enumerate(particles):
        channels = _NPI_CHANNELS.get(particle.pdg)
        if channels is None:
            continue
        fd, ld = particle.first_daughter, particle.last_daughter
        if ld - fd + 1 != 2 or fd < 0:
            continue
        fpdg, lpdg = particles[fd].pdg, particles[ld].pdg
        if (fpdg, lpdg) in channels:
            return index, ld
        if (lpdg, fpdg) in channels:
            return index, fd
    return None


def pion_cos_theta(event: Event, resonance_index: int, pion_index: int) -> float:
    """Cosine of the pion polar angle in the resonance rest frame."""
    resonance = event.particles[resonance_index].momentum
    pion = event.particles[pion_index].momentum
    bx, by, bz = resonance.boost_vector()
    return pion.boost(-bx, -by, -bz).cos_theta()


def angular_weight(cos_theta: float, dial: float) -> float:
    """Weight moving the pion distribution from Rein-Sehgal (0) to isotropy (1).

    W(theta) = 1 - p(3/2) P2(cos theta) + p(1/2) P2(cos theta).  The weight
    is 1 where either distribution is not positive.
    """
    p2 = 0.5 * (3.0 * cos_theta * cos_theta - 1.0)
    w_iso = 1.0 - _P32_ISO * p2 + _P12_ISO * p2
    w_rs = 1.0 - _P32_RS * p2 + _P12_RS * p2
    w_default = w_rs
    w_tweaked = dial * w_iso + (1.0 - dial) * w_rs
    if w_default > 0.0 and w_tweaked > 0.0:
        return w_tweaked / w_default
    return 1.0