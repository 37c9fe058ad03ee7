"""Reweighting of resonant neutrino-production cross sections."""

from __future__ import annotations

import copy
import enum
from typing import NamedTuple, Optional

from .model import (
    CrossSectionModel,
    Event,
    FlavourSelection,
    PhaseSpace,
    ReweightModel,
    ScatteringType,
    Syst,
    Uncertainty,
    is_tweaked,
)


class ResonantMode(enum.Enum):
    """Which set of dials a resonance reweighter responds to."""

    MA_MV = 0
    NORM_AND_MA_MV_SHAPE = 1


class _SystSet(NamedTuple):
    norm: Syst
    ma_shape: Syst
    mv_shape: Syst
    ma: Syst
    mv: Syst


_CC_SYSTS = _SystSet(
    Syst.NORM_CCRES,
    Syst.MA_CCRES_SHAPE,
    Syst.MV_CCRES_SHAPE,
    Syst.MA_CCRES,
    Syst.MV_CCRES,
)

_NC_SYSTS = _SystSet(
    Syst.NORM_NCRES,
    Syst.MA_NCRES_SHAPE,
    Syst.MV_NCRES_SHAPE,
    Syst.MA_NCRES,
    Syst.MV_NCRES,
)


class ResonantReweight(ReweightModel):
    """Tweak the axial and vector masses (and normalisation) of resonant events.

    In ``MA_MV`` mode the masses change both shape and rate.  In
    ``NORM_AND_MA_MV_SHAPE`` mode the mass dials change only the shape (the
    integrated cross section is held fixed) and a separate dial scales the
    rate.  Dial changes take effect after :meth:`reconfigure`.
    """

    def __init__(
        self,
        default_model: CrossSectionModel,
        tweaked_model: Optional[CrossSectionModel] = None,
        uncertainty: Optional[Uncertainty] = None,
        flavours: Optional[FlavourSelection] = None,
        *,
        charged_current: bool = True,
        mode: ResonantMode = ResonantMode.NORM_AND_MA_MV_SHAPE,
        ma_path: str = "RES-Ma",
        mv_path: str = "RES-Mv",
        **options,
    ) -> None:
        super().__init__("CCRES" if charged_current else "NCRES", **options)
        self.charged_current = charged_current
        self._systs = _CC_SYSTS if charged_current else _NC_SYSTS
        self.default_model = default_model
        if tweaked_model is None:
            tweaked_model = copy.copy(default_model)
            tweaked_model.configure(dict(default_model.config))
        self.tweaked_model = tweaked_model
        self.uncertainty = uncertainty if uncertainty is not None else Uncertainty()
        self.flavours = flavours if flavours is not None else FlavourSelection()
        self.mode = mode
        self.ma_path = ma_path
        self.mv_path = mv_path

        self._config = dict(tweaked_model.config)
        try:
            self.ma_default = float(self._config[ma_path])
            self.mv_default = float(self._config[mv_path])
        except KeyError as exc:
            raise KeyError(f"cross-section model config lacks parameter {exc}") from None

        self.norm_default = 1.0
        self.norm_dial = 0.0
        self.ma_dial = 0.0
        self.mv_dial = 0.0
        self.norm_current = self.norm_default
        self.ma_current = self.ma_default
        self.mv_current = self.mv_default

    def _selects_current(self, event: Event) -> bool:
        interaction = event.interaction
        return interaction.is_cc if self.charged_current else interaction.is_nc

    def applies_to(self, event: Event) -> bool:
        interaction = event.interaction
        if interaction.scattering is not ScatteringType.RESONANT:
            return False
        return interaction.is_cc if self.charged_current else not interaction.is_cc

    def is_handled(self, syst: Syst) -> bool:
        s = self._systs
        if syst in (s.norm, s.ma_shape, s.mv_shape):
            return self.mode is ResonantMode.NORM_AND_MA_MV_SHAPE
        if syst in (s.ma, s.mv):
            return self.mode is ResonantMode.MA_MV
        return False

    def set_systematic(self, syst: Syst, value: float) -> None:
        if not self.is_handled(syst):
            return
        s = self._systs
        if syst is s.norm:
            self.norm_dial = value
        elif syst in (s.ma_shape, s.ma):
            self.ma_dial = value
        elif syst in (s.mv_shape, s.mv):
            self.mv_dial = value

    def reset(self) -> None:
        self.norm_dial = 0.0
        self.norm_current = self.norm_default
        self.ma_dial = 0.0
        self.ma_current = self.ma_default
        self.mv_dial = 0.0
        self.mv_current = self.mv_default
        self.reconfigure()

    def reconfigure(self) -> None:
        err = self.uncertainty.one_sigma_err
        s = self._systs
        if self.mode is ResonantMode.MA_MV:
            self.ma_current = self.ma_default * (1.0 + self.ma_dial * err(s.ma))
            self.mv_current = self.mv_default * (1.0 + self.mv_dial * err(s.mv))
        elif self.mode is ResonantMode.NORM_AND_MA_MV_SHAPE:
            self.norm_current = self.norm_default * (
                1.0 + self.norm_dial * err(s.norm)
            )
            self.ma_current = self.ma_default * (1.0 + self.ma_dial * err(s.ma_shape))
            self.mv_current = self.mv_default * (1.0 + self.mv_dial * err(s.mv_shape))

        self.norm_current = max(0.0, self.norm_current)
        self.ma_current = max(0.0, self.ma_current)
        self.mv_current = max(0.0, self.mv_current)

        self._config[self.ma_path] = self.ma_current
        self._config[self.mv_path] = self.mv_current
        self.tweaked_model.configure(self._config)

    def calc_weight(self, event: Event) -> float:
        interaction = event.interaction
        if interaction.scattering is not ScatteringType.RESONANT:
            return 1.0
        if not self._selects_current(event):
            return 1.0
        if not self.flavours.accepts(interaction.probe_pdg):
            return 1.0

        if self.mode is ResonantMode.MA_MV:
            return self._mass_weight(event, shape_only=False)
        if self.mode is ResonantMode.NORM_AND_MA_MV_SHAPE:
            return self._norm_weight() * self._mass_weight(event, shape_only=True)
        return 1.0

    def _norm_weight(self) -> float:
        if not is_tweaked(self.norm_dial):
            return 1.0
        return self.norm_current

    def _mass_weight(self, event: Event, *, shape_only: bool) -> float:
        if not is_tweaked(self.ma_dial, self.mv_dial):
            return 1.0
        interaction = event.interaction
        phase_space = PhaseSpace.WQ2_FE
        old_xsec = self._reference_xsec(event, self.default_model, phase_space)
        new_xsec = self.tweaked_model.xsec(interaction, phase_space)
        weight = event.weight * (new_xsec / old_xsec)
        if shape_only:
            old_integrated = self.default_model.integral(interaction)
            twk_integrated = self.tweaked_model.integral(interaction)
            if twk_integrated <= 0:
                raise ValueError("tweaked integrated cross section is not positive")
            weight *= old_integrated / twk_integrated
        return weight


class CCRESReweight(ResonantReweight):
    """Resonance reweighting of charged-current events."""

    def __init__(
        self,
        default_model: CrossSectionModel,
        tweaked_model: Optional[CrossSectionModel] = None,
        uncertainty: Optional[Uncertainty] = None,
        flavours: Optional[FlavourSelection] = None,
        **options,
    ) -> None:
        super().__init__(
            default_model,
            tweaked_model,
            uncertainty,
            flavours,
            charged_current=True,
            **options,
        )