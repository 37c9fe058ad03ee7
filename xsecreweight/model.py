"""Event records, cross-section models and the common reweighting interface."""

from __future__ import annotations

import abc
import enum
import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Optional, Tuple, Union

logger = logging.getLogger("xsecreweight")

SMALL_NUMBER = 1e-6

PDG_NU_E = 12
PDG_ANTI_NU_E = -12
PDG_NU_MU = 14
PDG_ANTI_NU_MU = -14
PDG_PROTON = 2212
PDG_NEUTRON = 2112
PDG_GAMMA = 22
PDG_ETA = 221
PDG_PI_PLUS = 211
PDG_PI_MINUS = -211
PDG_PI_ZERO = 111


class Syst(enum.Enum):
    """Systematic parameters (tweaking dials) known to the reweighting code."""

    XSEC_NC = "NC"
    AXFF_CCQE_SHAPE = "AxFFCCQEshape"
    VECFF_CCQE_SHAPE = "VecFFCCQEshape"
    NORM_CCRES = "NormCCRES"
    MA_CCRES_SHAPE = "MaCCRESshape"
    MV_CCRES_SHAPE = "MvCCRESshape"
    MA_CCRES = "MaCCRES"
    MV_CCRES = "MvCCRES"
    NORM_NCRES = "NormNCRES"
    MA_NCRES_SHAPE = "MaNCRESshape"
    MV_NCRES_SHAPE = "MvNCRESshape"
    MA_NCRES = "MaNCRES"
    MV_NCRES = "MvNCRES"
    MA_COHPI = "MaCOHpi"
    R0_COHPI = "R0COHpi"
    NORM_CC_COHPI = "NormCCCOHpi"
    NORM_NC_COHPI = "NormNCCOHpi"
    AHT_BY = "AhtBY"
    BHT_BY = "BhtBY"
    CV1U_BY = "CV1uBY"
    CV2U_BY = "CV2uBY"
    AHT_BY_SHAPE = "AhtBYshape"
    BHT_BY_SHAPE = "BhtBYshape"
    CV1U_BY_SHAPE = "CV1uBYshape"
    CV2U_BY_SHAPE = "CV2uBYshape"
    MA_NCEL = "MaNCEL"
    ETA_NCEL = "EtaNCEL"
    BR_1GAMMA = "BR1gamma"
    BR_1ETA = "BR1eta"
    THETA_DELTA2NPI = "Theta_Delta2Npi"


class ScatteringType(enum.Enum):
    UNKNOWN = "unknown"
    QUASI_ELASTIC = "QES"
    DEEP_INELASTIC = "DIS"
    RESONANT = "RES"
    COHERENT_PRODUCTION = "COH"


class PhaseSpace(enum.Enum):
    """Kinematic variables a differential cross section is expressed in."""

    NULL = "null"
    Q2_FE = "Q2|E"
    XY_FE = "x,y|E"
    WQ2_FE = "W,Q2|E"


@dataclass(frozen=True)
class FourVector:
    px: float
    py: float
    pz: float
    e: float

    def mass(self) -> float:
        """Invariant mass; negative for space-like vectors."""
        m2 = self.e**2 - (self.px**2 + self.py**2 + self.pz**2)
        return -math.sqrt(-m2) if m2 < 0 else math.sqrt(m2)

    def boost_vector(self) -> Tuple[float, float, float]:
        return (self.px / self.e, self.py / self.e, self.pz / self.e)

    def boost(self, bx: float, by: float, bz: float) -> "FourVector":
        """Return this vector boosted by velocity (bx, by, bz)."""
        b2 = bx * bx + by * by + bz * bz
        if b2 >= 1.0:
            raise ValueError("boost speed must be below the speed of light")
        gamma = 1.0 / math.sqrt(1.0 - b2)
        bp = bx * self.px + by * self.py + bz * self.pz
        gamma2 = (gamma - 1.0) / b2 if b2 > 0 else 0.0
        return FourVector(
            self.px + gamma2 * bp * bx + gamma * bx * self.e,
            self.py + gamma2 * bp * by + gamma * by * self.e,
            self.pz + gamma2 * bp * bz + gamma * bz * self.e,
            gamma * (self.e + bp),
        )

    def cos_theta(self) -> float:
        """Cosine of the polar angle of the 3-momentum (1 for a null momentum)."""
        p = math.sqrt(self.px**2 + self.py**2 + self.pz**2)
        return 1.0 if p == 0 else self.pz / p


@dataclass
class Particle:
    pdg: int
    momentum: FourVector = FourVector(0.0, 0.0, 0.0, 0.0)
    first_daughter: int = -1
    last_daughter: int = -1


@dataclass
class Interaction:
    """Summary of the simulated interaction carried by an event."""

    scattering: ScatteringType = ScatteringType.UNKNOWN
    is_cc: bool = False
    is_nc: bool = False
    probe_pdg: int = PDG_NU_MU
    recoil_nucleon_pdg: int = PDG_PROTON
    charm: bool = False
    strange: bool = False
    W: float = 0.0
    Q2: float = 0.0
    x: float = 0.0
    y: float = 0.0
    assume_free_nucleon: bool = False


@dataclass
class Event:
    interaction: Interaction
    particles: list = field(default_factory=list)
    weight: float = 1.0
    diff_xsec: float = 1.0
    xsec: float = 1.0
    diff_xsec_vars: PhaseSpace = PhaseSpace.NULL

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def daughters(self, particle: Particle) -> list:
        """The particles listed as daughters of ``particle``."""
        if particle.first_daughter < 0:
            return []
        return self.particles[particle.first_daughter : particle.last_daughter + 1]


DifferentialFn = Callable[[Interaction, PhaseSpace, Mapping[str, Any]], float]
IntegratedFn = Callable[[Interaction, Mapping[str, Any]], float]


class CrossSectionModel:
    """A configurable cross-section calculation."""

    def __init__(
        self,
        differential: DifferentialFn,
        integrated: Optional[IntegratedFn] = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._differential = differential
        self._integrated = integrated
        self.config = dict(config or {})

    def xsec(self, interaction: Interaction, phase_space: PhaseSpace) -> float:
        return self._differential(interaction, phase_space, self.config)

    def integral(self, interaction: Interaction) -> float:
        if self._integrated is None:
            raise ValueError("this model has no integrated cross section")
        return self._integrated(interaction, self.config)

    def configure(self, config: Mapping[str, Any]) -> None:
        self.config = dict(config)


ErrorSpec = Union[float, Tuple[float, float]]


class Uncertainty:
    """Fractional one-sigma errors of the systematic parameters.

    Each entry is either a symmetric error or a ``(minus, plus)`` pair.
    """

    def __init__(self, errors: Optional[Mapping[Syst, ErrorSpec]] = None) -> None:
        self._errors = {}
        for syst, spec in (errors or {}).items():
            if isinstance(spec, tuple):
                self._errors[syst] = (float(spec[0]), float(spec[1]))
            else:
                self._errors[syst] = (float(spec), float(spec))

    def one_sigma_err(self, syst: Syst, sign: int = 0) -> float:
        minus, plus = self._errors.get(syst, (0.0, 0.0))
        if sign > 0:
            return plus
        if sign < 0:
            return minus
        return 0.5 * (plus + minus)


@dataclass
class FlavourSelection:
    """Which neutrino flavours are reweighted."""

    nue: bool = True
    nuebar: bool = True
    numu: bool = True
    numubar: bool = True

    def accepts(self, probe_pdg: int) -> bool:
        switches = {
            PDG_NU_E: self.nue,
            PDG_ANTI_NU_E: self.nuebar,
            PDG_NU_MU: self.numu,
            PDG_ANTI_NU_MU: self.numubar,
        }
        return switches.get(probe_pdg, True)


def is_tweaked(*args: float) -> bool:
    """True if any dial differs from zero by more than the tolerance."""
    return any(abs(value) > SMALL_NUMBER for value in args)


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def is_nucleon(pdg: int) -> bool:
    return pdg in (PDG_PROTON, PDG_NEUTRON)


class ReweightModel(abc.ABC):
    """A calculator of event weights driven by systematic dials."""

    def __init__(
        self,
        name: str,
        *,
        use_old_weight_from_file: bool = True,
        n_weight_checks_to_do: int = 20,
    ) -> None:
        self.name = name
        self.use_old_weight_from_file = use_old_weight_from_file
        self.n_weight_checks_to_do = n_weight_checks_to_do
        self.n_weight_checks_done = 0

    @abc.abstractmethod
    def applies_to(self, event: Event) -> bool:
        """Whether this calculator is relevant to the event."""

    @abc.abstractmethod
    def is_handled(self, syst: Syst) -> bool:
        """Whether this calculator handles the given systematic."""

    @abc.abstractmethod
    def set_systematic(self, syst: Syst, value: float) -> None:
        """Set the dial of a handled systematic."""

    @abc.abstractmethod
    def reset(self) -> None:
        """Return all dials to their defaults."""

    def reconfigure(self) -> None:
        """Propagate dial values to the underlying models."""

    @abc.abstractmethod
    def calc_weight(self, event: Event) -> float:
        """Weight of the event for the current dial values."""

    def calc_chisq(self) -> float:
        return 0.0

    def _reference_xsec(
        self, event: Event, default_model: CrossSectionModel, phase_space: PhaseSpace
    ) -> float:
        """Differential cross section of the default model for the event."""
        old_xsec = event.diff_xsec
        checking = self.n_weight_checks_done < self.n_weight_checks_to_do
        if not self.use_old_weight_from_file or checking:
            calc_xsec = default_model.xsec(event.interaction, phase_space)
            if checking:
                if old_xsec == 0:
                    mismatch = calc_xsec != 0
                else:
                    mismatch = abs(calc_xsec - old_xsec) / old_xsec > SMALL_NUMBER
                if mismatch:
                    logger.warning(
                        "default dxsec does not match dxsec saved in the event; "
                        "does the configuration match?"
                    )
                self.n_weight_checks_done += 1
            if not self.use_old_weight_from_file:
                old_xsec = calc_xsec
        return old_xsec

    @staticmethod
    @contextmanager
    def _free_nucleon(interaction: Interaction, phase_space: PhaseSpace) -> Iterator[None]:
        """Treat the hit nucleon as free while computing dsigma/dQ2."""
        active = phase_space is PhaseSpace.Q2_FE
        if active:
            interaction.assume_free_nucleon = True
        try:
            yield
        finally:
            if active:
                interaction.assume_free_nucleon = False