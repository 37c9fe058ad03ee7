import math

import pytest

from xsecreweight.branching import DELTA_0_1232, DELTA_PP_1232, DELTA_P_1232
from xsecreweight.delta_decay import angular_weight, find_delta_pion, pion_cos_theta
from xsecreweight.model import (
    PDG_NEUTRON,
    PDG_PI_MINUS,
    PDG_PI_PLUS,
    PDG_PI_ZERO,
    PDG_PROTON,
    Event,
    FourVector,
    Interaction,
    Particle,
    ScatteringType,
)


def _event(particles):
    return Event(Interaction(scattering=ScatteringType.RESONANT), particles=particles)


def _delta_event(delta_pdg, first_pdg, second_pdg):
    return _event(
        [
            Particle(14),
            Particle(delta_pdg, first_daughter=2, last_daughter=3),
            Particle(first_pdg),
            Particle(second_pdg),
        ]
    )


def test_find_delta_pp_proton_first():
    event = _delta_event(DELTA_PP_1232, PDG_PROTON, PDG_PI_PLUS)
    assert find_delta_pion(event) == (1, 3)


def test_find_delta_pp_pion_first():
    event = _delta_event(DELTA_PP_1232, PDG_PI_PLUS, PDG_PROTON)
    assert find_delta_pion(event) == (1, 2)


@pytest.mark.parametrize(
    "delta, nucleon, pion",
    [
        (DELTA_P_1232, PDG_PROTON, PDG_PI_ZERO),
        (DELTA_P_1232, PDG_NEUTRON, PDG_PI_PLUS),
        (DELTA_0_1232, PDG_PROTON, PDG_PI_MINUS),
        (DELTA_0_1232, PDG_NEUTRON, PDG_PI_ZERO),
    ],
)
def test_find_other_charge_states(delta, nucleon, pion):
    assert find_delta_pion(_delta_event(delta, nucleon, pion)) == (1, 3)


def test_wrong_charge_channel_not_found():
    event = _delta_event(DELTA_PP_1232, PDG_NEUTRON, PDG_PI_PLUS)
    assert find_delta_pion(event) is None


def test_three_body_decay_not_found():
    event = _event(
        [
            Particle(DELTA_PP_1232, first_daughter=1, last_daughter=3),
            Particle(PDG_PROTON),
            Particle(PDG_PI_PLUS),
            Particle(22),
        ]
    )
    assert find_delta_pion(event) is None


def test_no_delta_not_found():
    event = _event([Particle(14), Particle(PDG_PROTON), Particle(PDG_PI_PLUS)])
    assert find_delta_pion(event) is None


def test_cos_theta_delta_at_rest():
    event = _event(
        [
            Particle(DELTA_PP_1232, FourVector(0.0, 0.0, 0.0, 1.232), 1, 2),
            Particle(PDG_PROTON, FourVector(0.0, 0.0, -0.2, 0.96)),
            Particle(PDG_PI_PLUS, FourVector(0.0, 0.0, 0.2, 0.24)),
        ]
    )
    assert pion_cos_theta(event, 0, 2) == pytest.approx(1.0)
    assert pion_cos_theta(event, 0, 1) == pytest.approx(-1.0)


def test_cos_theta_recovers_rest_frame_angle():
    delta_rest = FourVector(0.0, 0.0, 0.0, 1.232)
    angle = 0.7
    p = 0.2
    pion_rest = FourVector(p * math.sin(angle), 0.0, p * math.cos(angle), 0.25)
    beta = (0.3, 0.1, 0.4)
    delta_lab = delta_rest.boost(*beta)
    pion_lab = pion_rest.boost(*beta)
    event = _event(
        [
            Particle(DELTA_PP_1232, delta_lab, 1, 2),
            Particle(PDG_PROTON),
            Particle(PDG_PI_PLUS, pion_lab),
        ]
    )
    assert pion_cos_theta(event, 0, 2) == pytest.approx(math.cos(angle))


def test_zero_dial_gives_unit_weight():
    for c in (-1.0, -0.3, 0.0, 0.5, 1.0):
        assert angular_weight(c, 0.0) == pytest.approx(1.0)


def test_weight_one_where_p2_vanishes():
    c = 1.0 / math.sqrt(3.0)
    for dial in (-1.0, 0.5, 2.0):
        assert angular_weight(c, dial) == pytest.approx(1.0)


def test_isotropic_weight_at_right_angle():
    assert angular_weight(0.0, 1.0) == pytest.approx(0.8)


def test_weight_symmetric_in_cos_theta():
    assert angular_weight(0.6, 0.7) == pytest.approx(angular_weight(-0.6, 0.7))


def test_non_positive_tweaked_distribution_gives_one():
    assert angular_weight(1.0, -2.0) == 1.0


def test_isotropic_weight_is_inverse_of_default():
    w_forward = angular_weight(1.0, 1.0)
    w_side = angular_weight(0.0, 1.0)
    assert w_forward > 1.0
    assert w_side < 1.0