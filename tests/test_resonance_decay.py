import pytest

from xsecreweight.branching import DecayChannel
from xsecreweight.delta_decay import angular_weight, pion_cos_theta
from xsecreweight.model import (
    PDG_GAMMA,
    PDG_NU_MU,
    PDG_PI_PLUS,
    PDG_PI_ZERO,
    PDG_PROTON,
    Event,
    FlavourSelection,
    FourVector,
    Interaction,
    Particle,
    ScatteringType,
    Syst,
    Uncertainty,
)
from xsecreweight.resonance_decay import ResonanceDecayReweight

DELTA_P = 2214
DELTA_PP = 2224

TABLE = {
    DELTA_P: [
        DecayChannel(0.01, (PDG_PROTON, PDG_GAMMA)),
        DecayChannel(0.99, (PDG_PROTON, PDG_PI_ZERO)),
    ]
}


def _res_event(daughter_pdg, res_pdg=DELTA_P, **kw):
    params = dict(scattering=ScatteringType.RESONANT, is_cc=True, probe_pdg=PDG_NU_MU)
    params.update(kw)
    particles = [
        Particle(PDG_NU_MU, FourVector(0.0, 0.0, 1.0, 1.0)),
        Particle(res_pdg, FourVector(0.0, 0.0, 0.0, 1.232), 2, 3),
        Particle(PDG_PROTON, FourVector(0.0, 0.0, -0.2, 0.96)),
        Particle(daughter_pdg, FourVector(0.0, 0.0, 0.2, 0.25)),
    ]
    return Event(Interaction(**params), particles=particles)


def _gamma_reweight(error=0.5, table=TABLE, **kw):
    return ResonanceDecayReweight(table, Uncertainty({Syst.BR_1GAMMA: error}), **kw)


def test_untweaked_weight_is_one():
    rw = _gamma_reweight()
    assert rw.calc_weight(_res_event(PDG_GAMMA)) == 1.0


def test_one_gamma_branching_weight():
    rw = _gamma_reweight()
    rw.set_systematic(Syst.BR_1GAMMA, 1.0)
    assert rw.calc_weight(_res_event(PDG_GAMMA)) == pytest.approx(1.5)


def test_branching_weights_conserve_total_rate():
    rw = _gamma_reweight()
    rw.set_systematic(Syst.BR_1GAMMA, 1.0)
    w_gamma = rw.calc_weight(_res_event(PDG_GAMMA))
    w_other = rw.calc_weight(_res_event(PDG_PI_ZERO))
    assert 0.01 * w_gamma + 0.99 * w_other == pytest.approx(1.0)


def test_negative_tweak_clamped_at_zero():
    rw = _gamma_reweight()
    rw.set_systematic(Syst.BR_1GAMMA, -10.0)
    assert rw.calc_weight(_res_event(PDG_GAMMA)) == 0.0


def test_branching_ratio_capped_at_one():
    table = {
        DELTA_P: [
            DecayChannel(0.8, (PDG_PROTON, PDG_GAMMA)),
            DecayChannel(0.2, (PDG_PROTON, PDG_PI_ZERO)),
        ]
    }
    rw = _gamma_reweight(table=table)
    rw.set_systematic(Syst.BR_1GAMMA, 1.0)
    assert rw.calc_weight(_res_event(PDG_PI_ZERO)) == pytest.approx(0.0)
    w_gamma = rw.calc_weight(_res_event(PDG_GAMMA))
    assert 0.8 * w_gamma == pytest.approx(1.0)


def test_angular_weight_matches_delta_helpers():
    rw = ResonanceDecayReweight()
    rw.set_systematic(Syst.THETA_DELTA2NPI, 1.0)
    event = _res_event(PDG_PI_PLUS, res_pdg=DELTA_PP)
    cos_theta = pion_cos_theta(event, 1, 3)
    assert rw.calc_weight(event) == pytest.approx(angular_weight(cos_theta, 1.0))
    assert rw.calc_weight(event) == pytest.approx(2.0)


def test_angular_weight_needs_delta_to_n_pi():
    rw = ResonanceDecayReweight()
    rw.set_systematic(Syst.THETA_DELTA2NPI, 1.0)
    assert rw.calc_weight(_res_event(PDG_GAMMA, res_pdg=DELTA_PP)) == 1.0


def test_filters_give_unit_weight():
    rw = _gamma_reweight(rew_cc=False, flavours=FlavourSelection(nue=False))
    rw.set_systematic(Syst.BR_1GAMMA, 1.0)
    assert rw.calc_weight(_res_event(PDG_GAMMA)) == 1.0
    assert rw.calc_weight(_res_event(PDG_GAMMA, is_cc=False, is_nc=True, probe_pdg=12)) == 1.0
    assert rw.calc_weight(
        _res_event(PDG_GAMMA, scattering=ScatteringType.DEEP_INELASTIC)
    ) == 1.0
    assert rw.calc_weight(
        _res_event(PDG_GAMMA, is_cc=False, is_nc=True)
    ) == pytest.approx(1.5)


def test_reset_clears_dials():
    rw = _gamma_reweight()
    rw.set_systematic(Syst.BR_1GAMMA, 1.0)
    rw.set_systematic(Syst.THETA_DELTA2NPI, 1.0)
    rw.reset()
    assert rw.calc_weight(_res_event(PDG_GAMMA)) == 1.0
    assert rw.br_1gamma_dial == 0.0 and rw.theta_dial == 0.0


def test_is_handled_and_applies_to():
    rw = ResonanceDecayReweight()
    assert rw.is_handled(Syst.BR_1GAMMA)
    assert rw.is_handled(Syst.BR_1ETA)
    assert rw.is_handled(Syst.THETA_DELTA2NPI)
    assert not rw.is_handled(Syst.MA_CCRES)
    assert rw.applies_to(_res_event(PDG_GAMMA))
    assert not rw.applies_to(
        _res_event(PDG_GAMMA, scattering=ScatteringType.QUASI_ELASTIC)
    )


def test_unhandled_systematic_ignored():
    rw = _gamma_reweight()
    rw.set_systematic(Syst.MA_CCRES, 3.0)
    assert rw.calc_weight(_res_event(PDG_GAMMA)) == 1.0