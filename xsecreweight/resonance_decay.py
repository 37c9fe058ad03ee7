"""Reweighting of baryon resonance decays."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from .branching import (
    BranchingRatioHistogram,
    DecayChannel,
    build_branching_tables,
    is_baryon_resonance,
)
from .delta_decay import angular_weight, find_delta_pion, pion_cos_theta
from .model import (
    PDG_ETA,
    PDG_GAMMA,
    Event,
    FlavourSelection,
    ReweightModel,
    ScatteringType,
    Syst,
    Uncertainty,
    is_tweaked,
)

logger = logging.getLogger("xsecreweight")

_HANDLED = frozenset({Syst.BR_1GAMMA, Syst.BR_1ETA, Syst.THETA_DELTA2NPI})


def _branching_factor(
    hist: BranchingRatioHistogram,
    mass: float,
    dial: float,
    fractional_error: float,
    in_channel: bool,
) -> float:
    """Weight from scaling one decay mode's branching ratio.

    The tweaked mode scales by ``1 + dial * error`` (capped so the ratio
    does not exceed one); all other modes share the remainder.
    """
    w = max(0.0, 1.0 + dial * fractional_error)
    br_default = hist.value_at(mass)
    br_tweaked = br_default * w
    if br_tweaked > 1:
        br_tweaked = 1.0
        w = br_tweaked / br_default
    if in_channel:
        return w
    return (1.0 - br_tweaked) / (1.0 - br_default)


class ResonanceDecayReweight(ReweightModel):
    """Tweak resonance branching ratios to X+gamma and X+eta and the
    pion angular distribution in Delta(1232) -> N pi decays."""

    def __init__(
        self,
        decay_table: Optional[Mapping[int, Iterable[DecayChannel]]] = None,
        uncertainty: Optional[Uncertainty] = None,
        flavours: Optional[FlavourSelection] = None,
        *,
        rew_cc: bool = True,
        rew_nc: bool = True,
        **options,
    ) -> None:
        super().__init__("ResonanceDecay", **options)
        self.tables = build_branching_tables(decay_table or {})
        self.uncertainty = uncertainty if uncertainty is not None else Uncertainty()
        self.flavours = flavours if flavours is not None else FlavourSelection()
        self.rew_cc = rew_cc
        self.rew_nc = rew_nc
        self.br_1gamma_dial = 0.0
        self.br_1eta_dial = 0.0
        self.theta_dial = 0.0

    def applies_to(self, event: Event) -> bool:
        return event.interaction.scattering is ScatteringType.RESONANT

    def is_handled(self, syst: Syst) -> bool:
        return syst in _HANDLED

    def set_systematic(self, syst: Syst, value: float) -> None:
        if syst is Syst.BR_1GAMMA:
            self.br_1gamma_dial = value
        elif syst is Syst.BR_1ETA:
            self.br_1eta_dial = value
        elif syst is Syst.THETA_DELTA2NPI:
            self.theta_dial = value

    def reset(self) -> None:
        self.br_1gamma_dial = 0.0
        self.br_1eta_dial = 0.0
        self.theta_dial = 0.0

    def reconfigure(self) -> None:
        pass

    def calc_weight(self, event: Event) -> float:
        interaction = event.interaction
        if interaction.scattering is not ScatteringType.RESONANT:
            return 1.0
        if interaction.is_cc and not self.rew_cc:
            return 1.0
        if interaction.is_nc and not self.rew_nc:
            return 1.0
        if not self.flavours.accepts(interaction.probe_pdg):
            return 1.0
        return self._branching_weight(event) * self._angular_weight(event)

    def _branching_weight(self, event: Event) -> float:
        tweak_gamma = is_tweaked(self.br_1gamma_dial)
        tweak_eta = is_tweaked(self.br_1eta_dial)
        if not (tweak_gamma or tweak_eta):
            return 1.0

        err = self.uncertainty.one_sigma_err
        weight = 1.0
        for particle in event:
            if not is_baryon_resonance(particle.pdg):
                continue
            daughters = [d.pdg for d in event.daughters(particle)]
            is_1gamma = daughters.count(PDG_GAMMA) == 1
            is_1eta = daughters.count(PDG_ETA) == 1
            if is_1gamma:
                logger.debug("a resonance -> X + 1gamma event")
            if is_1eta:
                logger.debug("a resonance -> X + 1eta event")
            mass = particle.momentum.mass()
            if tweak_gamma:
                weight *= _branching_factor(
                    self.tables.one_gamma[particle.pdg],
                    mass,
                    self.br_1gamma_dial,
                    err(Syst.BR_1GAMMA),
                    is_1gamma,
                )
            if tweak_eta:
                weight *= _branching_factor(
                    self.tables.one_eta[particle.pdg],
                    mass,
                    self.br_1eta_dial,
                    err(Syst.BR_1ETA),
                    is_1eta,
                )
        return weight

    def _angular_weight(self, event: Event) -> float:
        if not is_tweaked(self.theta_dial):
            return 1.0
        found = find_delta_pion(event)
        if found is None:
            return 1.0
        resonance_index, pion_index = found
        cos_theta = pion_cos_theta(event, resonance_index, pion_index)
        weight = angular_weight(cos_theta, self.theta_dial)
        logger.debug("pion cos(theta_CM) = %s, weight = %s", cos_theta, weight)
        return weight