"""Gross rescaling of neutral-current event rates."""

from __future__ import annotations

from typing import Optional

from .model import (
    Event,
    FlavourSelection,
    ReweightModel,
    ScatteringType,
    Syst,
    is_tweaked,
)


class NCReweight(ReweightModel):
    """Scale NC events by the dial value.

    Resonant and DIS NC events are left alone by default, as dedicated
    calculators usually handle them.
    """

    def __init__(
        self,
        flavours: Optional[FlavourSelection] = None,
        *,
        rew_qe: bool = True,
        rew_res: bool = False,
        rew_dis: bool = False,
        **options,
    ) -> None:
        super().__init__("NC", **options)
        self.flavours = flavours if flavours is not None else FlavourSelection()
        self.rew_qe = rew_qe
        self.rew_res = rew_res
        self.rew_dis = rew_dis
        self.dial = 0.0

    def applies_to(self, event: Event) -> bool:
        return not event.interaction.is_cc

    def is_handled(self, syst: Syst) -> bool:
        return syst is Syst.XSEC_NC

    def set_systematic(self, syst: Syst, value: float) -> None:
        if self.is_handled(syst):
            self.dial = value

    def reset(self) -> None:
        self.dial = 0.0

    def reconfigure(self) -> None:
        self.dial = max(0.0, self.dial)

    def calc_weight(self, event: Event) -> float:
        if not is_tweaked(self.dial):
            return 1.0
        interaction = event.interaction
        if not interaction.is_nc:
            return 1.0
        skipped = {
            ScatteringType.QUASI_ELASTIC: not self.rew_qe,
            ScatteringType.RESONANT: not self.rew_res,
            ScatteringType.DEEP_INELASTIC: not self.rew_dis,
        }
        if skipped.get(interaction.scattering, False):
            return 1.0
        if not self.flavours.accepts(interaction.probe_pdg):
            return 1.0
        return self.dial