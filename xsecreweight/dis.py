"""Reweighting of deep-inelastic scattering through the Bodek-Yang parameters."""

from __future__ import annotations

import copy
import enum
from typing import Dict, Mapping, Optional

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

GEV = 1.0

PARAMETERS = ("aht", "bht", "cv1u", "cv2u")

DEFAULT_PATHS: Dict[str, str] = {
    "aht": "SFAlg/BY-A",
    "bht": "SFAlg/BY-B",
    "cv1u": "SFAlg/BY-Cv1U",
    "cv2u": "SFAlg/BY-Cv2U",
}

_PLAIN_SYSTS: Dict[Syst, str] = {
    Syst.AHT_BY: "aht",
    Syst.BHT_BY: "bht",
    Syst.CV1U_BY: "cv1u",
    Syst.CV2U_BY: "cv2u",
}

_SHAPE_SYSTS: Dict[Syst, str] = {
    Syst.AHT_BY_SHAPE: "aht",
    Syst.BHT_BY_SHAPE: "bht",
    Syst.CV1U_BY_SHAPE: "cv1u",
    Syst.CV2U_BY_SHAPE: "cv2u",
}


class DISMode(enum.Enum):
    """Which set of Bodek-Yang dials the DIS reweighter responds to."""

    ABC_V12U = 0
    ABC_V12U_SHAPE = 1


class DISReweight(ReweightModel):
    """Tweak the Bodek-Yang higher-twist and valence correction parameters.

    In ``ABC_V12U`` mode the dials change shape and rate; in
    ``ABC_V12U_SHAPE`` mode the integrated cross section is held fixed.
    Only events above the W and Q2 cuts are reweighted.  Dial changes take
    effect after :meth:`reconfigure`.
    """

    def __init__(
        self,
        default_model: CrossSectionModel,
        tweaked_model: Optional[CrossSectionModel] = None,
        uncertainty: Optional[Uncertainty] = None,
        flavours: Optional[FlavourSelection] = None,
        *,
        mode: DISMode = DISMode.ABC_V12U,
        rew_cc: bool = True,
        rew_nc: bool = True,
        w_min: float = 1.7 * GEV,
        q2_min: float = 1.0 * GEV * GEV,
        paths: Optional[Mapping[str, str]] = None,
        **options,
    ) -> None:
        super().__init__("CCDIS", **options)
        self.default_model = default_model
        if tweaked_model is None:
            tweaked_model = copy.copy(default_model)
            tweaked_model.configure(dict(default_model.config))
        self.tweaked_model = tweaked_model
        self.uncertainty = uncertainty if uncertainty is not None else Uncertainty()
        self.flavours = flavours if flavours is not None else FlavourSelection()
        self.mode = mode
        self.rew_cc = rew_cc
        self.rew_nc = rew_nc
        self.w_min = w_min
        self.q2_min = q2_min
        self.paths = dict(DEFAULT_PATHS)
        if paths:
            self.paths.update(paths)

        self._config = dict(tweaked_model.config)
        try:
            self.defaults = {p: float(self._config[self.paths[p]]) for p in PARAMETERS}
        except KeyError as exc:
            raise KeyError(f"cross-section model config lacks parameter {exc}") from None
        self.dials = {p: 0.0 for p in PARAMETERS}
        self.current = dict(self.defaults)

    def _mode_systs(self) -> Dict[Syst, str]:
        if self.mode is DISMode.ABC_V12U:
            return _PLAIN_SYSTS
        return _SHAPE_SYSTS

    def applies_to(self, event: Event) -> bool:
        return event.interaction.scattering is ScatteringType.DEEP_INELASTIC

    def is_handled(self, syst: Syst) -> bool:
        return syst in self._mode_systs()

    def set_systematic(self, syst: Syst, value: float) -> None:
        if self.is_handled(syst):
            self.dials[self._mode_systs()[syst]] = value

    def reset(self) -> None:
        self.dials = {p: 0.0 for p in PARAMETERS}
        self.reconfigure()

    def reconfigure(self) -> None:
        err = self.uncertainty.one_sigma_err
        for syst, param in self._mode_systs().items():
            self.current[param] = self.defaults[param] * (1.0 + self.dials[param] * err(syst))
            self._config[self.paths[param]] = self.current[param]
        self.tweaked_model.configure(self._config)

    def calc_weight(self, event: Event) -> float:
        if not is_tweaked(*self.dials.values()):
            return 1.0
        interaction = event.interaction
        if interaction.scattering is not ScatteringType.DEEP_INELASTIC:
            return 1.0
        if interaction.charm:
            return 1.0
        if interaction.is_cc and not self.rew_cc:
            return 1.0
        if interaction.is_nc and not self.rew_nc:
            return 1.0
        if not self.flavours.accepts(interaction.probe_pdg):
            return 1.0
        if interaction.W < self.w_min or interaction.Q2 < self.q2_min:
            return 1.0

        if self.mode is DISMode.ABC_V12U:
            return self._weight(event)
        if self.mode is DISMode.ABC_V12U_SHAPE:
            return self._shape_weight(event)
        return 1.0

    def _weight(self, event: Event) -> float:
        twk_xsec = self.tweaked_model.xsec(event.interaction, PhaseSpace.XY_FE)
        return event.weight * (twk_xsec / event.diff_xsec)

    def _shape_weight(self, event: Event) -> float:
        interaction = event.interaction
        phase_space = PhaseSpace.XY_FE
        old_xsec = self._reference_xsec(event, self.default_model, phase_space)
        twk_xsec = self.tweaked_model.xsec(interaction, phase_space)
        weight = event.weight * (twk_xsec / old_xsec)
        old_integrated = self.default_model.integral(interaction)
        twk_integrated = self.tweaked_model.integral(interaction)
        if twk_integrated <= 0:
            raise ValueError("tweaked integrated cross section is not positive")
        return weight * (old_integrated / twk_integrated)