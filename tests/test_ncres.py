import pytest

from xsecreweight.model import (
    CrossSectionModel,
    Event,
    FlavourSelection,
    Interaction,
    PDG_NU_MU,
    PhaseSpace,
    ScatteringType,
    Syst,
    Uncertainty,
)
from xsecreweight.ncres import NCRESReweight
from xsecreweight.resonant import ResonantMode


def _diff(interaction, phase_space, config):
    return 2.0 * config["RES-Ma"] + 0.0 * config["RES-Mv"]


def _integral(interaction, config):
    return 3.0 * config["RES-Ma"]


def _model():
    return CrossSectionModel(_diff, _integral, {"RES-Ma": 1.12, "RES-Mv": 0.84})


def _event(is_cc=False, scattering=ScatteringType.RESONANT, probe=PDG_NU_MU):
    interaction = Interaction(
        scattering=scattering, is_cc=is_cc, is_nc=not is_cc, probe_pdg=probe
    )
    return Event(
        interaction,
        weight=1.0,
        diff_xsec=_diff(interaction, PhaseSpace.WQ2_FE, {"RES-Ma": 1.12, "RES-Mv": 0.84}),
        diff_xsec_vars=PhaseSpace.WQ2_FE,
    )


def _uncertainty():
    return Uncertainty(
        {
            Syst.NORM_NCRES: 0.2,
            Syst.MA_NCRES_SHAPE: 0.1,
            Syst.MV_NCRES_SHAPE: 0.1,
            Syst.MA_NCRES: 0.1,
            Syst.MV_NCRES: 0.1,
        }
    )


def test_name_and_defaults():
    rw = NCRESReweight(_model())
    assert rw.name == "NCRES"
    assert rw.ma_default == pytest.approx(1.12)
    assert rw.mv_default == pytest.approx(0.84)


def test_applies_to():
    rw = NCRESReweight(_model())
    assert rw.applies_to(_event(is_cc=False)) is True
    assert rw.applies_to(_event(is_cc=True)) is False
    assert rw.applies_to(_event(scattering=ScatteringType.QUASI_ELASTIC)) is False


def test_is_handled_depends_on_mode():
    rw = NCRESReweight(_model())
    assert rw.is_handled(Syst.NORM_NCRES) is True
    assert rw.is_handled(Syst.MA_NCRES_SHAPE) is True
    assert rw.is_handled(Syst.MA_NCRES) is False
    assert rw.is_handled(Syst.NORM_CCRES) is False
    rw.mode = ResonantMode.MA_MV
    assert rw.is_handled(Syst.MA_NCRES) is True
    assert rw.is_handled(Syst.MV_NCRES) is True
    assert rw.is_handled(Syst.NORM_NCRES) is False


def test_untweaked_weight_is_one():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty())
    assert rw.calc_weight(_event()) == 1.0


def test_norm_dial_scales_weight():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty())
    rw.set_systematic(Syst.NORM_NCRES, 1.0)
    rw.reconfigure()
    assert rw.calc_weight(_event()) == pytest.approx(1.2)
    assert rw.calc_weight(_event()) == pytest.approx(rw.norm_current)


def test_cc_events_ignored():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty())
    rw.set_systematic(Syst.NORM_NCRES, 1.0)
    rw.reconfigure()
    assert rw.calc_weight(_event(is_cc=True)) == 1.0


def test_flavour_switch():
    rw = NCRESReweight(
        _model(), uncertainty=_uncertainty(), flavours=FlavourSelection(numu=False)
    )
    rw.set_systematic(Syst.NORM_NCRES, 1.0)
    rw.reconfigure()
    assert rw.calc_weight(_event()) == 1.0


def test_shape_only_keeps_weight_when_scaling_uniform():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty())
    rw.set_systematic(Syst.MA_NCRES_SHAPE, 1.0)
    rw.reconfigure()
    assert rw.ma_current > rw.ma_default
    assert rw.calc_weight(_event()) == pytest.approx(1.0)


def test_ma_mv_mode_follows_xsec_ratio():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty(), mode=ResonantMode.MA_MV)
    rw.set_systematic(Syst.MA_NCRES, -1.0)
    rw.reconfigure()
    weight = rw.calc_weight(_event())
    assert weight == pytest.approx(rw.ma_current / rw.ma_default)
    assert weight < 1.0


def test_unhandled_systematic_ignored():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty())
    rw.set_systematic(Syst.MA_NCRES, 2.0)
    rw.reconfigure()
    assert rw.ma_dial == 0.0
    assert rw.calc_weight(_event()) == 1.0


def test_reset_restores_unit_weight():
    rw = NCRESReweight(_model(), uncertainty=_uncertainty())
    rw.set_systematic(Syst.NORM_NCRES, 1.0)
    rw.reconfigure()
    rw.reset()
    assert rw.norm_dial == 0.0
    assert rw.calc_weight(_event()) == 1.0


def test_missing_parameter_raises():
    model = CrossSectionModel(_diff, _integral, {"RES-Ma": 1.0})
    with pytest.raises(KeyError):
        NCRESReweight(model)