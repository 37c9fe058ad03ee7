"""Reweighting of neutral-current resonant neutrino-production."""

from __future__ import annotations

from typing import Optional

from .model import (
    CrossSectionModel,
    Event,
    FlavourSelection,
    ScatteringType,
    Syst,
    Uncertainty,
)
from .resonant import ResonantReweight


class NCRESReweight(ResonantReweight):
    """Resonance reweighting of neutral-current events.

    Responds to the NC resonance dials and leaves charged-current events
    untouched.
    """

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
            charged_current=False,
            **options,
        )

    def applies_to(self, event: Event) -> bool:
        interaction = event.interaction
        return (
            interaction.scattering is ScatteringType.RESONANT
            and not interaction.is_cc
        )

    def is_handled(self, syst: Syst) -> bool:
        """True for the NC resonance dials that belong to the current mode."""
        return super().is_handled(syst)