"""Shape reweighting of CCQE events between BBA and dipole vector form factors."""

from __future__ import annotations

from typing import Optional

from .model import (
    CrossSectionModel,
    Event,
    FlavourSelection,
    ReweightModel,
    ScatteringType,
    Syst,
    is_nucleon,
    is_tweaked,
    logger,
)


class CCQEVecReweight(ReweightModel):
    """Interpolate the dsigma shape between two vector form-factor models.

    A dial of 0 gives the default (BBA) model, 1 the model with dipole
    elastic form factors.  Each shape is normalised by its own integrated
    cross section, so the weight changes only the shape.
    """

    def __init__(
        self,
        default_model: CrossSectionModel,
        dipole_model: CrossSectionModel,
        flavours: Optional[FlavourSelection] = None,
        **options,
    ) -> None:
        super().__init__("CCQEvec", **options)
        self.default_model = default_model
        self.dipole_model = dipole_model
        self.flavours = flavours if flavours is not None else FlavourSelection()
        self.dial = 0.0

    def applies_to(self, event: Event) -> bool:
        interaction = event.interaction
        return interaction.scattering is ScatteringType.QUASI_ELASTIC and interaction.is_cc

    def is_handled(self, syst: Syst) -> bool:
        return syst is Syst.VECFF_CCQE_SHAPE

    def set_systematic(self, syst: Syst, value: float) -> None:
        if self.is_handled(syst):
            self.dial = value

    def reset(self) -> None:
        self.dial = 0.0

    def reconfigure(self) -> None:
        pass

    def calc_weight(self, event: Event) -> float:
        if not is_tweaked(self.dial):
            return 1.0
        interaction = event.interaction
        if interaction.scattering is not ScatteringType.QUASI_ELASTIC or not interaction.is_cc:
            return 1.0
        if interaction.charm or interaction.strange:
            return 1.0
        if not is_nucleon(interaction.recoil_nucleon_pdg):
            return 1.0
        if not self.flavours.accepts(interaction.probe_pdg):
            return 1.0

        phase_space = event.diff_xsec_vars
        with self._free_nucleon(interaction, phase_space):
            old_xsec = self._reference_xsec(event, self.default_model, phase_space)
            dpl_xsec = self.dipole_model.xsec(interaction, phase_space)
            def_integrated = self.default_model.integral(interaction)
            dpl_integrated = self.dipole_model.integral(interaction)

        if def_integrated <= 0 or dpl_integrated <= 0:
            logger.warning("non-positive total cross section in CCQE vector reweighting")
            return 1.0

        def_ratio = old_xsec / def_integrated
        dpl_ratio = dpl_xsec / dpl_integrated
        dial = self.dial
        return event.weight * (dial * dpl_ratio + (1.0 - dial) * def_ratio) / def_ratio