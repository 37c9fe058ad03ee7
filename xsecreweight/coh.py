"""Reweighting of coherent pion production."""

from __future__ import annotations

import copy
from typing import Optional

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

_HANDLED = frozenset(
    {Syst.MA_COHPI, Syst.R0_COHPI, Syst.NORM_CC_COHPI, Syst.NORM_NC_COHPI}
)


class COHReweight(ReweightModel):
    """Tweak the axial mass, nuclear radius and CC/NC normalisations of COH pion events.

    Dial changes take effect after :meth:`reconfigure`.
    """

    def __init__(
        self,
        default_model: CrossSectionModel,
        tweaked_model: Optional[CrossSectionModel] = None,
        uncertainty: Optional[Uncertainty] = None,
        flavours: Optional[FlavourSelection] = None,
        *,
        rew_cc: bool = True,
        rew_nc: bool = True,
        ma_path: str = "COH-Ma",
        r0_path: str = "COH-Ro",
        **options,
    ) -> None:
        super().__init__("CCCoh", **options)
        self.default_model = default_model
        if tweaked_model is None:
            tweaked_model = copy.copy(default_model)
            tweaked_model.configure(dict(default_model.config))
        self.tweaked_model = tweaked_model
        self.uncertainty = uncertainty if uncertainty is not None else Uncertainty()
        self.flavours = flavours if flavours is not None else FlavourSelection()
        self.rew_cc = rew_cc
        self.rew_nc = rew_nc
        self.ma_path = ma_path
        self.r0_path = r0_path

        self._config = dict(tweaked_model.config)
        try:
            self.ma_default = float(self._config[ma_path])
            self.r0_default = float(self._config[r0_path])
        except KeyError as exc:
            raise KeyError(f"cross-section model config lacks parameter {exc}") from None

        self.ma_dial = 0.0
        self.r0_dial = 0.0
        self.cc_norm_dial = 0.0
        self.nc_norm_dial = 0.0
        self.ma_current = self.ma_default
        self.r0_current = self.r0_default
        self.cc_norm = 1.0
        self.nc_norm = 1.0

    def applies_to(self, event: Event) -> bool:
        return event.interaction.scattering is ScatteringType.COHERENT_PRODUCTION

    def is_handled(self, syst: Syst) -> bool:
        return syst in _HANDLED

    def set_systematic(self, syst: Syst, value: float) -> None:
        if syst is Syst.MA_COHPI:
            self.ma_dial = value
        elif syst is Syst.R0_COHPI:
            self.r0_dial = value
        elif syst is Syst.NORM_CC_COHPI:
            self.cc_norm_dial = value
        elif syst is Syst.NORM_NC_COHPI:
            self.nc_norm_dial = value

    def reset(self) -> None:
        self.ma_dial = 0.0
        self.ma_current = self.ma_default
        self.r0_dial = 0.0
        self.r0_current = self.r0_default
        self.cc_norm_dial = 0.0
        self.nc_norm_dial = 0.0
        self.cc_norm = 1.0
        self.nc_norm = 1.0
        self.reconfigure()

    def reconfigure(self) -> None:
        err = self.uncertainty.one_sigma_err
        self.ma_current = max(
            0.0, self.ma_default * (1.0 + self.ma_dial * err(Syst.MA_COHPI))
        )
        self.r0_current = max(
            0.0, self.r0_default * (1.0 + self.r0_dial * err(Syst.R0_COHPI))
        )
        self._config[self.ma_path] = self.ma_current
        self._config[self.r0_path] = self.r0_current
        self.tweaked_model.configure(self._config)

        # Normalisation errors are taken as symmetric.
        self.cc_norm = max(0.0, 1.0 + self.cc_norm_dial * err(Syst.NORM_CC_COHPI))
        self.nc_norm = max(0.0, 1.0 + self.nc_norm_dial * err(Syst.NORM_NC_COHPI))

    def calc_weight(self, event: Event) -> float:
        interaction = event.interaction
        if interaction.scattering is not ScatteringType.COHERENT_PRODUCTION:
            return 1.0

        xsec_tweaked = is_tweaked(self.ma_dial, self.r0_dial)
        norm_tweaked = is_tweaked(self.cc_norm_dial, self.nc_norm_dial)
        if not (xsec_tweaked or norm_tweaked):
            return 1.0

        if interaction.is_cc and not self.rew_cc:
            return 1.0
        if interaction.is_nc and not self.rew_nc:
            return 1.0
        if not self.flavours.accepts(interaction.probe_pdg):
            return 1.0

        new_weight = event.weight
        if norm_tweaked:
            if interaction.is_cc:
                new_weight *= self.cc_norm
            elif interaction.is_nc:
                new_weight *= self.nc_norm

        if not xsec_tweaked:
            return new_weight

        phase_space = PhaseSpace.XY_FE
        old_xsec = self._reference_xsec(event, self.default_model, phase_space)
        new_xsec = self.tweaked_model.xsec(interaction, phase_space)
        return new_weight * (new_xsec / old_xsec)